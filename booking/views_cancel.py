# booking/views_cancel.py
#
# Purpose:
# - Public "Cancel Booking" endpoint for clients without an account:
#   * POST /bookings/cancel/submit/ -> verify identity + cancel by rules
#
# Notes:
# - Identity is checked against the booking's client (name/email
#   case-insensitive, phone exact digits).
# - The cancellation goes through BookingManager.cancel_booking, which applies
#   the BOOKING_CANCEL_CUTOFF_MINUTES cutoff and the lifecycle rules, stores the
#   reason as the cancellation note, and emits the event that sends emails.
# - CSRF protected like any form POST; the page with the form supplies the token.
#
from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods

from .models import Booking, BookingStatus
from .services.booking_manager import BookingManager
from .services.errors import SchedulingError


@require_http_methods(["POST"])
def cancel_booking_action(request):
    """
    POST handler to cancel a booking.

    Expected form fields:
      - booking_id (required)
      - name       (required)
      - email      (required)
      - phone      (required) digits-only
      - reason     (optional) stored as the cancellation note
    """
    booking_id = (request.POST.get("booking_id") or "").strip()
    name = (request.POST.get("name") or "").strip()
    email = (request.POST.get("email") or "").strip()
    phone = (request.POST.get("phone") or "").strip()
    reason = (request.POST.get("reason") or "").strip()

    if not booking_id or not name or not email or not phone:
        return JsonResponse(
            {"ok": False, "message": "All required fields must be filled."},
            status=400,
        )

    if not phone.isdigit():
        return JsonResponse(
            {"ok": False, "message": "Phone must include digits only."},
            status=400,
        )

    try:
        bid_int = int(booking_id)
    except ValueError:
        return JsonResponse({"ok": False, "message": "Invalid Booking ID."}, status=400)

    booking = get_object_or_404(Booking.objects.select_related("client"), pk=bid_int)

    client = booking.client
    if (client.name.strip().lower() != name.lower()
            or client.email.strip().lower() != email.lower()
            or (client.phone or "").strip() != phone):
        return JsonResponse(
            {"ok": False, "message": "Provided details do not match this booking."},
            status=400,
        )

    if booking.status == BookingStatus.CANCELLED:
        return JsonResponse(
            {"ok": False, "message": "This booking is already cancelled."},
            status=400,
        )

    try:
        BookingManager().cancel_booking(
            booking,
            note=reason,
            cutoff_minutes=getattr(settings, "BOOKING_CANCEL_CUTOFF_MINUTES", 120),
        )
    except SchedulingError as e:
        return JsonResponse({"ok": False, "message": e.message, "code": e.code}, status=400)

    return JsonResponse({"ok": True, "message": "Your booking has been cancelled."})
