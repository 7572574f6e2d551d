# booking/views.py
#
# Purpose:
# - CRUD APIs for Clients, Services and Staff.
# - Booking API on top of BookingManager / AvailabilityEngine:
#   * POST   /api/bookings/                 create (pending)
#   * PATCH  /api/bookings/{id}/            reschedule / reassign (staff users)
#   * POST   /api/bookings/{id}/status/     lifecycle transition (staff users)
#   * DELETE /api/bookings/{id}/            delete (pending, or old completed/cancelled)
#   * GET    /api/bookings/slots/           free start times for staff/service/date
# - Permissions:
#   * Service/Staff writes and booking edits are staff-only.
#   * Booking creation requires NO login. Public flow: create client -> create booking.
#
# Errors:
# - Scheduling rule violations come back as {"detail": ..., "code": ...} so the
#   UI can tell "staff off that day" / "outside hours" / "overlap" apart.
#
import re

from django.shortcuts import get_object_or_404

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import BasePermission
from rest_framework.response import Response

from .models import ClientProfile, Service, Staff, Booking
from .serializers import (
    ClientProfileSerializer,
    ServiceSerializer,
    StaffSerializer,
    BookingSerializer,
    BookingIntervalSerializer,
    StatusChangeSerializer,
    SlotQuerySerializer,
)
from .services.booking_manager import BookingManager
from .services.errors import NotFound, SchedulingConflict, SchedulingError

PHONE_RE = re.compile(r"^\d{7,15}$")


def scheduling_error_response(exc: SchedulingError) -> Response:
    if isinstance(exc, NotFound):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, SchedulingConflict):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({"detail": exc.message, "code": exc.code}, status=code)


# -------------------- Permissions --------------------
class IsStaffOrReadOnly(BasePermission):
    """
    Read: anyone
    Write: staff only
    """
    def has_permission(self, request, view):
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return True
        return bool(request.user and request.user.is_staff)


class IsStaffUser(BasePermission):
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_staff)


# -------------------- ViewSets --------------------
class ClientProfileViewSet(viewsets.ModelViewSet):
    queryset = ClientProfile.objects.all().order_by("id")
    serializer_class = ClientProfileSerializer

    def create(self, request, *args, **kwargs):
        """
        Create-or-reuse ClientProfile with normalized (trimmed) fields.
        - Existing match on (name, email case-insensitive; phone exact) -> 200 OK.
        - Otherwise a new profile -> 201 Created.
        """
        name = (request.data.get("name") or "").strip()
        email = (request.data.get("email") or "").strip()
        phone = (request.data.get("phone") or "").strip()

        if not name or not email or not phone:
            return Response({"detail": "name, email, and phone are required."}, status=400)

        if not PHONE_RE.match(phone):
            return Response({"detail": "Phone must be digits only, 7 to 15 digits."}, status=400)

        existing = ClientProfile.objects.filter(
            name__iexact=name,
            email__iexact=email,
            phone=phone,
        ).first()

        if existing:
            data = self.get_serializer(existing).data
            return Response(data, status=200)

        serializer = self.get_serializer(data={"name": name, "email": email, "phone": phone})
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        headers = self.get_success_headers(serializer.data)
        return Response(serializer.data, status=201, headers=headers)


class ServiceViewSet(viewsets.ModelViewSet):
    """
    Service catalog:
    - Anyone can list active services.
    - Only staff can create/update/delete services (IsStaffOrReadOnly).
    """
    serializer_class = ServiceSerializer
    permission_classes = [IsStaffOrReadOnly]

    def get_queryset(self):
        """
        Staff can see all services; public sees only active services.
        """
        user = getattr(self.request, "user", None)
        qs = Service.objects.all().order_by("name")
        if user and user.is_authenticated and user.is_staff:
            return qs
        return qs.filter(active=True)


class StaffViewSet(viewsets.ModelViewSet):
    queryset = Staff.objects.all().order_by("id")
    serializer_class = StaffSerializer
    permission_classes = [IsStaffOrReadOnly]


class BookingViewSet(mixins.CreateModelMixin,
                     mixins.RetrieveModelMixin,
                     mixins.ListModelMixin,
                     mixins.DestroyModelMixin,
                     viewsets.GenericViewSet):
    """
    Bookings are written only through BookingManager; there is no generic
    PUT. PATCH means "move this booking" (staff, start_time, end_time).
    """
    serializer_class = BookingSerializer

    def get_manager(self):
        return BookingManager()

    def get_queryset(self):
        qs = Booking.objects.select_related("client", "service", "staff", "meeting")
        client_id = self.request.query_params.get("client")
        staff_id = self.request.query_params.get("staff")
        if staff_id:
            qs = qs.filter(staff_id=staff_id)
        if client_id:
            qs = qs.filter(client_id=client_id)
        return qs.order_by("start_time")

    def get_permissions(self):
        if self.action in ("partial_update", "change_status"):
            return [IsStaffUser()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        """
        Requires: client, service, staff (PKs), start_time (ISO).
        Optional: end_time (defaults to start + service duration), title, notes.
        New bookings start as "pending"; staff confirm them via /status/.
        """
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            booking = self.get_manager().create_booking(
                client=data["client"],
                service=data["service"],
                staff=data["staff"],
                start_time=data["start_time"],
                end_time=data.get("end_time"),
                title=data.get("title", ""),
                notes=data.get("notes", ""),
            )
        except SchedulingError as e:
            return scheduling_error_response(e)

        out = BookingSerializer(booking)
        headers = self.get_success_headers(out.data)
        return Response(out.data, status=status.HTTP_201_CREATED, headers=headers)

    def partial_update(self, request, *args, **kwargs):
        booking = self.get_object()
        serializer = BookingIntervalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            booking = self.get_manager().update_booking_interval(
                booking,
                staff=data.get("staff"),
                start_time=data.get("start_time"),
                end_time=data.get("end_time"),
            )
        except SchedulingError as e:
            return scheduling_error_response(e)
        return Response(BookingSerializer(booking).data)

    def destroy(self, request, *args, **kwargs):
        booking = self.get_object()
        try:
            self.get_manager().delete_booking(booking)
        except SchedulingError as e:
            return scheduling_error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        """
        POST /api/bookings/{id}/status/  {"status": "confirmed", "note": "..."}
        """
        booking = get_object_or_404(Booking, pk=pk)
        serializer = StatusChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            booking = self.get_manager().transition_status(
                booking,
                serializer.validated_data["status"],
                note=serializer.validated_data.get("note"),
            )
        except SchedulingError as e:
            return scheduling_error_response(e)
        return Response(BookingSerializer(booking).data)

    @action(detail=False, methods=["get"], url_path="slots")
    def slots(self, request):
        """
        GET /api/bookings/slots/?staff=ID&service=ID&date=YYYY-MM-DD
        Start times are returned in the staff member's timezone, ascending.
        """
        query = SlotQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        staff = query.validated_data["staff"]
        service = query.validated_data["service"]
        day = query.validated_data["date"]

        starts = self.get_manager().availability.enumerate_slots(staff, day, service.duration_minutes)
        return Response({
            "staff": staff.id,
            "service": service.id,
            "date": day.isoformat(),
            "slots": [s.isoformat() for s in starts],
        })
