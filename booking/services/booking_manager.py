"""
booking_manager.py
------------------
The only path that creates, reschedules, moves through the lifecycle, or
deletes a Booking.

- create_booking / update_booking_interval run the AvailabilityEngine
  conflict check and the write as one unit: in-process staff (and client)
  locks, transaction.atomic(), and row locks on the Staff (and ClientProfile)
  records. Times are normalised to UTC before any arithmetic.
- transition_status enforces the lifecycle:
      pending   -> confirmed | cancelled
      confirmed -> completed | cancelled
  (completed and cancelled are terminal)
- Confirmation asks the meeting-link provider for credentials; failures are
  logged and do not undo the confirmation.
- booking_status_changed is sent after commit and after the scheduling
  locks are released, so slow mail never holds up other bookings and a mail
  failure never undoes the write.

Collaborators are passed in; nothing here reads module-level singletons
except the defaults built in __init__.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction

from ..models import (
    ACTIVE_STATUSES,
    STATUS_TRANSITIONS,
    Booking,
    BookingStatus,
    ClientProfile,
    MeetingAccess,
    Staff,
)
from ..signals import booking_status_changed
from .availability_engine import AvailabilityEngine
from .errors import (
    DeletionNotAllowed,
    InvalidInterval,
    InvalidTransition,
    LimitExceeded,
    NotFound,
    SchedulingError,
)
from .locks import SchedulingLockRegistry, client_key, staff_key
from .meeting_links import JitsiMeetingProvider
from .slot_utils import to_utc

logger = logging.getLogger(__name__)

# Shared so every manager in the process serializes on the same locks.
_scheduling_locks = SchedulingLockRegistry()


class BookingManager:
    def __init__(self, availability=None, meeting_provider=None, events=None, locks=None):
        self.availability = availability or AvailabilityEngine()
        self.meeting_provider = meeting_provider or JitsiMeetingProvider()
        self.events = events or booking_status_changed
        self.locks = locks or _scheduling_locks

    @property
    def clock(self):
        return self.availability.clock

    # -------------------- create --------------------
    def create_booking(self, client, service, staff, start_time, end_time=None, title="", notes=""):
        """
        Create a pending booking after checking hours, overlap and client cap.

        Args:
            client: ClientProfile instance
            service: Service instance (end_time defaults to start + duration)
            staff: Staff instance
            start_time, end_time: aware datetimes
            title, notes: optional strings

        Raises:
            InvalidInterval, StaffUnavailable, OutsideHours,
            SchedulingConflict, LimitExceeded
        """
        if start_time is None:
            raise InvalidInterval()
        start_time = to_utc(start_time)
        if end_time is None:
            end_time = start_time + timedelta(minutes=service.duration_minutes)
        end_time = to_utc(end_time)
        if start_time >= end_time:
            raise InvalidInterval()

        with self.locks.hold(staff_key(staff.pk), client_key(client.pk)), transaction.atomic():
            staff = self._lock_staff(staff.pk)
            try:
                self.availability.check_interval(staff, start_time, end_time)
            except SchedulingError as e:
                logger.info("Rejected booking for staff %s at %s: %s", staff.pk, start_time, e)
                raise

            client = self._lock_client(client.pk)
            self._check_client_limit(client)

            booking = Booking.objects.create(
                client=client,
                service=service,
                staff=staff,
                title=title or service.name,
                start_time=start_time,
                end_time=end_time,
                notes=notes,
                status=BookingStatus.PENDING,
            )

        self._emit_on_commit(booking, old_status=None)
        logger.info("Created booking %s for staff %s [%s, %s)", booking.pk, staff.pk, start_time, end_time)
        return booking

    def _check_client_limit(self, client):
        limit = client.appointment_limit or 0
        if limit <= 0:
            return
        active = Booking.objects.filter(client=client, status__in=ACTIVE_STATUSES).count()
        if active >= limit:
            raise LimitExceeded()

    # -------------------- reschedule / reassign --------------------
    def update_booking_interval(self, booking, staff=None, start_time=None, end_time=None):
        """
        Move a pending/confirmed booking to a new staff member and/or interval.

        Omitted values keep their current value; if only start_time is given
        the booking keeps its length. The overlap scan ignores the booking
        itself.
        """
        if not booking.is_active:
            raise InvalidTransition(f"A {booking.status} booking cannot be rescheduled.")

        new_staff = staff or booking.staff
        new_start = to_utc(start_time or booking.start_time)
        if end_time is not None:
            new_end = to_utc(end_time)
        elif start_time is not None:
            new_end = new_start + (booking.end_time - booking.start_time)
        else:
            new_end = to_utc(booking.end_time)

        if new_start >= new_end:
            raise InvalidInterval()

        with self.locks.hold(staff_key(new_staff.pk), staff_key(booking.staff_id)), transaction.atomic():
            new_staff = self._lock_staff(new_staff.pk)
            booking = self._lock_booking(booking.pk)
            if booking.status not in ACTIVE_STATUSES:
                raise InvalidTransition(f"A {booking.status} booking cannot be rescheduled.")

            self.availability.check_interval(new_staff, new_start, new_end, exclude_booking_id=booking.pk)

            booking.staff = new_staff
            booking.start_time = new_start
            booking.end_time = new_end
            booking.save(update_fields=["staff", "start_time", "end_time"])

        logger.info("Rescheduled booking %s to staff %s [%s, %s)", booking.pk, new_staff.pk, new_start, new_end)
        return booking

    # -------------------- lifecycle --------------------
    def transition_status(self, booking, new_status, note=None):
        """
        Move a booking along the lifecycle.

        Raises:
            InvalidTransition: unknown status, or a move absent from STATUS_TRANSITIONS.
        """
        if new_status not in BookingStatus.values:
            raise InvalidTransition(f"Unknown status {new_status!r}.")
        new_status = BookingStatus(new_status)

        with transaction.atomic():
            booking = self._lock_booking(booking.pk)
            old_status = BookingStatus(booking.status)
            if new_status not in STATUS_TRANSITIONS[old_status]:
                raise InvalidTransition(f"Cannot change status from {old_status} to {new_status}.")

            booking.status = new_status
            fields = ["status"]
            if new_status == BookingStatus.CANCELLED:
                booking.cancellation_note = note or ""
                booking.cancellation_time = self.clock()
                fields += ["cancellation_note", "cancellation_time"]
            booking.save(update_fields=fields)

            if new_status == BookingStatus.CONFIRMED:
                self._attach_meeting(booking)

        self._emit_on_commit(booking, old_status=old_status)
        logger.info("Booking %s: %s -> %s", booking.pk, old_status, new_status)
        return booking

    def cancel_booking(self, booking, note=None, cutoff_minutes=None):
        """
        Cancel with an optional cutoff: refuse when the appointment starts
        within `cutoff_minutes` from now (used by the public self-cancel flow).
        """
        if cutoff_minutes is not None:
            if booking.start_time - self.clock() <= timedelta(minutes=cutoff_minutes):
                raise InvalidTransition(
                    f"Cannot cancel within {cutoff_minutes} minutes of appointment start."
                )
        return self.transition_status(booking, BookingStatus.CANCELLED, note=note)

    def _attach_meeting(self, booking):
        try:
            creds = self.meeting_provider.create(booking.pk)
        except Exception:
            logger.exception("Meeting link creation failed for booking %s", booking.pk)
            return None
        meeting, _ = MeetingAccess.objects.update_or_create(
            booking=booking,
            defaults={"link": creds.link, "access_code": creds.access_code},
        )
        return meeting

    # -------------------- delete --------------------
    def delete_booking(self, booking):
        """
        Delete while pending, or once a completed/cancelled booking ended more
        than BOOKING_DELETE_GRACE_DAYS ago.
        """
        if not self.can_delete(booking):
            raise DeletionNotAllowed()
        booking_id = booking.pk
        booking.delete()
        logger.info("Deleted booking %s", booking_id)

    def can_delete(self, booking) -> bool:
        if booking.status == BookingStatus.PENDING:
            return True
        if booking.status in (BookingStatus.COMPLETED, BookingStatus.CANCELLED):
            grace = timedelta(days=getattr(settings, "BOOKING_DELETE_GRACE_DAYS", 5))
            return self.clock() - booking.end_time > grace
        return False

    # -------------------- helpers --------------------
    def _lock_staff(self, staff_id):
        try:
            return Staff.objects.select_for_update().get(pk=staff_id)
        except Staff.DoesNotExist:
            raise NotFound(f"Staff {staff_id} not found.")

    def _lock_client(self, client_id):
        try:
            return ClientProfile.objects.select_for_update().get(pk=client_id)
        except ClientProfile.DoesNotExist:
            raise NotFound(f"Client {client_id} not found.")

    def _lock_booking(self, booking_id):
        try:
            return Booking.objects.select_for_update().get(pk=booking_id)
        except Booking.DoesNotExist:
            raise NotFound(f"Booking {booking_id} not found.")

    def _emit_on_commit(self, booking, old_status):
        # Called after the locks are released: fires now, or when an enclosing
        # caller transaction commits.
        def emit():
            responses = self.events.send_robust(
                sender=Booking,
                booking=booking,
                booking_id=booking.pk,
                client_id=booking.client_id,
                staff_id=booking.staff_id,
                new_status=booking.status,
                old_status=old_status,
            )
            for receiver, result in responses:
                if isinstance(result, Exception):
                    logger.error("booking_status_changed receiver %r failed: %s", receiver, result)

        transaction.on_commit(emit)
