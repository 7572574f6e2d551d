# booking/signals.py
#
# Purpose:
# - Lifecycle events emitted by the scheduling core.
#
# booking_status_changed is sent after the database transaction that created
# a booking or changed its status has committed. Keyword arguments:
#   booking     Booking instance (already saved)
#   booking_id, client_id, staff_id
#   new_status  BookingStatus value
#   old_status  previous status, or None for a new booking
#
# Receivers (e.g. notifications.signals) must not assume they can stop the
# operation; BookingManager uses send_robust() and only logs receiver errors.
#
from django.dispatch import Signal

booking_status_changed = Signal()
