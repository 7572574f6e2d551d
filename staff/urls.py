from django.urls import path

from .views import StaffWorkingHoursView, StaffWorkingWindowView

urlpatterns = [
    path("<int:staff_id>/hours/", StaffWorkingHoursView.as_view(), name="staff-hours"),
    path("<int:staff_id>/hours/<int:day_of_week>/", StaffWorkingWindowView.as_view(), name="staff-hours-day"),
]
