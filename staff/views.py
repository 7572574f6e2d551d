from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from booking.models import Staff
from booking.services.errors import SchedulingError
from booking.services.working_hours import WorkingHoursManager
from booking.views import IsStaffOrReadOnly, scheduling_error_response
from .serializers import WorkingWindowInputSerializer, WorkingWindowSerializer


class StaffWorkingHoursView(APIView):
    """
    GET /api/staff/<staff_id>/hours/
    The staff member's weekly working windows (day 0 = Sunday).
    """
    def get(self, request, staff_id):
        staff = get_object_or_404(Staff, pk=staff_id)
        windows = WorkingHoursManager().list_working_windows(staff)
        return Response({
            "staff": staff.id,
            "timezone": staff.tzinfo.key,
            "windows": WorkingWindowSerializer(windows, many=True).data,
        })


class StaffWorkingWindowView(APIView):
    """
    PUT    /api/staff/<staff_id>/hours/<day>/  {"start_time": "09:00", "end_time": "17:00"}
    DELETE /api/staff/<staff_id>/hours/<day>/
    """
    permission_classes = [IsStaffOrReadOnly]

    def put(self, request, staff_id, day_of_week):
        staff = get_object_or_404(Staff, pk=staff_id)
        serializer = WorkingWindowInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            window = WorkingHoursManager().set_working_window(
                staff,
                day_of_week,
                serializer.validated_data["start_time"],
                serializer.validated_data["end_time"],
            )
        except SchedulingError as e:
            return scheduling_error_response(e)
        return Response(WorkingWindowSerializer(window).data)

    def delete(self, request, staff_id, day_of_week):
        staff = get_object_or_404(Staff, pk=staff_id)
        try:
            cleared = WorkingHoursManager().clear_working_window(staff, day_of_week)
        except SchedulingError as e:
            return scheduling_error_response(e)
        if not cleared:
            return Response({"detail": "No working hours set for that day.", "code": "not_found"},
                            status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)
