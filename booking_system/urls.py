# booking_system/urls.py
#
# Purpose:
# - Project URL router.
# - Keeps the public cancel endpoint outside /api/ and all JSON APIs under /api/.
#
from django.contrib import admin
from django.urls import path, include

from booking import views_cancel


urlpatterns = [
    # Django admin
    path("admin/", admin.site.urls),

    # Public self-cancellation (form POST, JSON response)
    path("bookings/cancel/submit/", views_cancel.cancel_booking_action, name="cancel_booking_action"),

    # =====
    # API's
    # =====
    # Working hours first: /api/staff/<id>/hours/ must not fall into the staff router.
    path("api/staff/", include("staff.urls")),
    path("api/", include("booking.urls")),
]
