# notifications/signals.py
#
# Purpose:
# - Send emails when the scheduling core reports a booking lifecycle event
#   (booking.signals.booking_status_changed).
#   * pending:   on create, "request received"
#   * confirmed: client + staff member (with meeting link if any)
#   * cancelled: client, plus owner alert when EMAIL_HOST_USER is set
#   * completed: client "thank you"
#
# Notes:
# - The event is sent after commit, so a mail failure can't roll back the booking.
# - NotificationService never raises on delivery failures (logs instead).
#
from django.dispatch import receiver

from booking.signals import booking_status_changed

from .services import NotificationService


@receiver(booking_status_changed, dispatch_uid="notifications.booking_status_emails")
def booking_status_emails(sender, booking, new_status, old_status=None, **kwargs):
    if new_status == old_status:
        return
    NotificationService().send_status_update(booking)
