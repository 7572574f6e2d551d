from datetime import date, datetime, time, timedelta
from decimal import Decimal
from zoneinfo import ZoneInfo

from django.utils import timezone

from booking.models import ClientProfile, Service, Staff
from staff.models import WorkingWindow

UTC = ZoneInfo("UTC")

# 2030-01-07 is a Monday (day_of_week 1); 2030-01-08 is a Tuesday.
MONDAY = date(2030, 1, 7)
TUESDAY = date(2030, 1, 8)


def at(day, hh, mm=0, tz=UTC):
    return datetime.combine(day, time(hh, mm), tzinfo=tz)


def fixed_clock(moment):
    return lambda: moment


def upcoming_monday(weeks_ahead=1):
    """A Monday at least a week in the future, for tests that use the real clock."""
    today = timezone.localdate()
    days = (7 - today.weekday()) % 7 or 7
    return today + timedelta(days=days + 7 * (weeks_ahead - 1))


class SchedulingFixtures:
    """setUp helpers shared by the scheduling test cases."""

    def make_staff(self, name="Alex", email="alex@example.com", tz="UTC"):
        return Staff.objects.create(name=name, email=email, specialization="General", timezone=tz)

    def make_service(self, name="Consultation", minutes=30):
        return Service.objects.create(
            name=name,
            description="Test service",
            duration_minutes=minutes,
            price=Decimal("50.00"),
        )

    def make_client(self, name="Jane Doe", email="jane@example.com", phone="5551234567", limit=0):
        return ClientProfile.objects.create(name=name, email=email, phone=phone, appointment_limit=limit)

    def make_window(self, staff, day_of_week=1, start=time(9, 0), end=time(17, 0)):
        return WorkingWindow.objects.create(
            staff=staff, day_of_week=day_of_week, start_time=start, end_time=end
        )
