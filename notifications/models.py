# notifications/models.py
#
# Purpose:
# - Delivery log for every email sent about a booking (confirmation,
#   status change, reminder).
#
# Design:
# - FK to booking.ClientProfile when the recipient is the client; staff and
#   owner copies keep client empty and only record recipient_email.
# - status starts "pending" and becomes "sent" or "failed" after the attempt.
#
from django.db import models

from booking.models import Booking, ClientProfile


class Notification(models.Model):
    class Kind(models.TextChoices):
        APPOINTMENT = "appointment", "Appointment"
        REMINDER = "reminder", "Reminder"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        SENT = "sent", "Sent"
        FAILED = "failed", "Failed"

    kind = models.CharField(max_length=20, choices=Kind.choices, default=Kind.APPOINTMENT)
    booking = models.ForeignKey(
        Booking, on_delete=models.CASCADE, related_name="notifications", null=True, blank=True
    )
    user = models.ForeignKey(ClientProfile, on_delete=models.CASCADE, null=True, blank=True)
    recipient_email = models.EmailField()
    subject = models.CharField(max_length=255)
    message = models.TextField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.kind} to {self.recipient_email} ({self.status})"
