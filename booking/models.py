# booking/models.py
#
# Purpose:
# - Core domain models for the appointment booking system.
#
# Design highlights:
# - ClientProfile: Optional link to auth User (public can book without login).
#   • clean() prevents duplicates by (name/email case-insensitive + phone exact).
#   • appointment_limit caps concurrently active bookings (0 = unlimited).
# - Service: Validates price and duration; "active" flag controls visibility.
# - Staff: The person whose time is booked; carries the IANA timezone that
#   working hours are expressed in.
# - Booking:
#   • Records client, service, staff, [start_time, end_time)
#   • status follows pending -> confirmed -> completed, with cancelled
#     reachable from pending/confirmed (see STATUS_TRANSITIONS)
#   • only pending/confirmed bookings occupy staff time
# - MeetingAccess: link + access code handed out when a booking is confirmed.
#
# Notes for developers:
# - Never create or reschedule Booking rows directly; go through
#   booking.services.booking_manager.BookingManager so the overlap check and
#   the per-staff serialization are applied.
#

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


def default_appointment_limit():
    return getattr(settings, "BOOKING_DEFAULT_APPOINTMENT_LIMIT", 3)


def validate_timezone_name(value):
    if not value:
        return
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {value!r}")


# -------------------------
# Client (person who books)
# -------------------------
class ClientProfile(models.Model):
    """
    A client who books an appointment.
    - 'user' link is optional (public can book with just name/email/phone).
    - We prevent duplicates by using a case-insensitive match on name and email,
      and exact match on phone in model.clean().
    """
    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name="client_profile",
        null=True,
        blank=True,
    )
    name = models.CharField(max_length=200)
    email = models.EmailField()
    phone = models.CharField(max_length=20, blank=True)
    appointment_limit = models.PositiveIntegerField(
        default=default_appointment_limit,
        help_text="Maximum pending+confirmed bookings at once (0 = unlimited).",
    )

    def __str__(self):
        return self.name

    def clean(self):
        """
        Soft duplicate prevention (app-level):
        - Disallow another profile with same (name/email case-insensitive) + phone exact.
        - Allows saving when updating the same record (excludes self.pk).
        """
        name = (self.name or "").strip()
        email = (self.email or "").strip()
        phone = (self.phone or "").strip()

        if not name or not email or not phone:
            return

        qs = ClientProfile.objects.filter(
            name__iexact=name,
            email__iexact=email,
            phone=phone,
        )
        if self.pk:
            qs = qs.exclude(pk=self.pk)

        if qs.exists():
            raise ValidationError(
                "A client with the same name, email, and phone already exists."
            )


# -------------------------
# Service catalog item
# -------------------------
class Service(models.Model):
    """
    A bookable service.

    Rules:
    - price must be > 0
    - duration_minutes must be > 0 (used to derive end_time from start_time)
    - active controls visibility and bookability
    """
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    duration_minutes = models.PositiveIntegerField(
        validators=[MinValueValidator(1)]
    )
    price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        validators=[MinValueValidator(0.01)],
    )
    active = models.BooleanField(default=True)

    def __str__(self):
        return f"{self.name} ({self.duration_minutes} min)"


# -------------------------
# Staff member
# -------------------------
class Staff(models.Model):
    """
    A staff member who can be booked.
    timezone: IANA name for interpreting working hours; blank = settings.TIME_ZONE.
    """
    name = models.CharField(max_length=200)
    email = models.EmailField(unique=True)
    specialization = models.CharField(max_length=100, blank=True)
    timezone = models.CharField(
        max_length=64,
        blank=True,
        validators=[validate_timezone_name],
    )

    def __str__(self):
        return self.name

    @property
    def tzinfo(self):
        return ZoneInfo(self.timezone or settings.TIME_ZONE)


# -------------------------
# Booking record
# -------------------------
class BookingStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    CANCELLED = "cancelled", "Cancelled"
    COMPLETED = "completed", "Completed"


# Statuses that occupy staff time for overlap purposes.
ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)

# Allowed lifecycle moves; completed and cancelled are terminal.
STATUS_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}


class Booking(models.Model):
    """
    Appointment booking over the half-open interval [start_time, end_time).
    """
    client = models.ForeignKey(ClientProfile, on_delete=models.CASCADE, related_name="bookings")
    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name="bookings")
    staff = models.ForeignKey(Staff, on_delete=models.CASCADE, related_name="bookings")
    title = models.CharField(max_length=200, blank=True)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)
    notes = models.TextField(blank=True)
    status = models.CharField(
        max_length=10,
        choices=BookingStatus.choices,
        default=BookingStatus.PENDING,
        help_text="Booking lifecycle status",
    )
    cancellation_note = models.TextField(blank=True)
    cancellation_time = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the booking was cancelled (if applicable).",
    )

    class Meta:
        ordering = ["start_time"]
        indexes = [
            models.Index(fields=["staff", "status", "start_time"], name="booking_staff_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(start_time__lt=models.F("end_time")),
                name="booking_start_before_end",
            ),
        ]

    def __str__(self):
        return f"{self.client.name} → {self.service.name} on {self.start_time}"

    @property
    def is_active(self):
        return self.status in ACTIVE_STATUSES


# -------------------------
# Meeting access for confirmed bookings
# -------------------------
class MeetingAccess(models.Model):
    """
    Remote-meeting link and access code for a confirmed booking.
    Replaced every time the booking is (re)confirmed.
    """
    booking = models.OneToOneField(Booking, on_delete=models.CASCADE, related_name="meeting")
    link = models.URLField(max_length=500)
    access_code = models.CharField(max_length=32)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Meeting for booking #{self.booking_id}"
