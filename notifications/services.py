"""
NotificationService
-------------------
Composes and sends booking emails and records each attempt in the
Notification table.

- Works with any Django EMAIL_BACKEND (console in dev, SMTP in prod,
  locmem in tests).
- The mail connection and sender are passed in, so callers decide the
  transport; nothing is read from module-level state at send time.
- A failed send is logged and recorded as status="failed"; it never raises
  to the caller.
"""

import logging

from django.conf import settings
from django.core.mail import send_mail
from django.utils import timezone

from booking.models import BookingStatus

from .models import Notification

logger = logging.getLogger(__name__)

STATUS_HEADLINES = {
    BookingStatus.PENDING: "Your appointment request has been received and is awaiting confirmation.",
    BookingStatus.CONFIRMED: "Your appointment is confirmed.",
    BookingStatus.CANCELLED: "Your appointment has been cancelled.",
    BookingStatus.COMPLETED: "Your appointment has been marked as completed. Thank you for visiting!",
}


def _format_when(booking) -> str:
    local = timezone.localtime(booking.start_time, booking.staff.tzinfo)
    return local.strftime("%A, %B %d, %Y at %I:%M %p %Z")


class NotificationService:
    def __init__(self, from_email=None, connection=None, owner_email=None):
        self.from_email = from_email or getattr(settings, "DEFAULT_FROM_EMAIL", None)
        self.connection = connection
        self.owner_email = owner_email if owner_email is not None else getattr(settings, "EMAIL_HOST_USER", "")

    # -------------------- low level --------------------
    def deliver(self, recipient, subject, body, booking=None, client=None,
                kind=Notification.Kind.APPOINTMENT):
        """
        Send one email and log it. Returns the Notification row (or None when
        there is no recipient).
        """
        if not recipient:
            return None
        record = Notification.objects.create(
            kind=kind,
            booking=booking,
            user=client,
            recipient_email=recipient,
            subject=subject,
            message=body,
        )
        try:
            send_mail(
                subject=subject,
                message=body,
                from_email=self.from_email,
                recipient_list=[recipient],
                fail_silently=False,  # raise so we can log; we still catch it below
                connection=self.connection,
            )
        except Exception:
            logger.exception("Email to %s failed (subject: %s)", recipient, subject)
            record.status = Notification.Status.FAILED
        else:
            record.status = Notification.Status.SENT
        record.save(update_fields=["status", "updated_at"])
        return record

    # -------------------- booking emails --------------------
    def send_status_update(self, booking):
        """
        Client email for the booking's current status, plus:
        - confirmed: a copy for the staff member, with the client's name
        - cancelled: an alert for the owner when EMAIL_HOST_USER is set
        """
        client = booking.client
        status = BookingStatus(booking.status)
        when = _format_when(booking)

        lines = [
            f"Hi {client.name},",
            "",
            STATUS_HEADLINES[status],
            "",
            f"Booking ID: {booking.id}",
            f"Service: {booking.service.name}",
            f"Staff: {booking.staff.name}",
            f"Date & Time: {when}",
        ]
        if status == BookingStatus.CANCELLED and booking.cancellation_note:
            lines.append(f"Note: {booking.cancellation_note}")
        meeting = getattr(booking, "meeting", None) if status == BookingStatus.CONFIRMED else None
        if meeting is not None:
            lines += [f"Meeting link: {meeting.link}", f"Access code: {meeting.access_code}"]
        body = "\n".join(lines) + "\n"

        sent = [
            self.deliver(
                client.email,
                f"Booking #{booking.id} {status.label}",
                body,
                booking=booking,
                client=client,
            )
        ]

        if status == BookingStatus.CONFIRMED:
            staff_body = (
                f"Hi {booking.staff.name},\n\n"
                f"A booking with {client.name} is confirmed.\n"
                f"Service: {booking.service.name}\n"
                f"Date & Time: {when}\n"
            )
            if meeting is not None:
                staff_body += f"Meeting link: {meeting.link}\nAccess code: {meeting.access_code}\n"
            sent.append(self.deliver(booking.staff.email, f"Booking #{booking.id} Confirmed", staff_body, booking=booking))

        if status == BookingStatus.CANCELLED and self.owner_email:
            owner_body = (
                f"ALERT: Booking #{booking.id} cancelled.\n"
                f"Client: {client.name} ({client.email})\n"
                f"Service: {booking.service.name}\n"
                f"Staff: {booking.staff.name}\n"
                f"Original Time: {when}\n"
                f"Cancellation Time: {timezone.now():%Y-%m-%d %H:%M:%S}\n"
            )
            sent.append(self.deliver(self.owner_email, f"ALERT: Booking #{booking.id} CANCELLED", owner_body, booking=booking))

        return [n for n in sent if n is not None]

    def send_reminder(self, booking, hours_before: int):
        client = booking.client
        body = (
            f"Hi {client.name},\n\n"
            f"This is a reminder that your appointment is in about {hours_before} hours.\n\n"
            f"Service: {booking.service.name}\n"
            f"Staff: {booking.staff.name}\n"
            f"Date & Time: {_format_when(booking)}\n"
        )
        return self.deliver(
            client.email,
            f"Reminder: Booking #{booking.id}",
            body,
            booking=booking,
            client=client,
            kind=Notification.Kind.REMINDER,
        )
