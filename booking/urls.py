# booking/urls.py
#
# Purpose:
# - Expose REST API endpoints for the booking app via DRF router.
#
# Notes for developers:
# - Mounted under /api/ by booking_system/urls.py.
# - Working-hours endpoints live in staff/urls.py (/api/staff/<id>/hours/...).
# - The public self-cancel endpoint is wired in the project URLconf, outside /api/.

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    ClientProfileViewSet,
    ServiceViewSet,
    StaffViewSet,
    BookingViewSet,
)

router = DefaultRouter()
router.register(r"clients", ClientProfileViewSet, basename="client")
router.register(r"services", ServiceViewSet, basename="service")
router.register(r"staff", StaffViewSet, basename="staff")
router.register(r"bookings", BookingViewSet, basename="booking")

urlpatterns = [
    path("", include(router.urls)),
]
