"""
availability_engine.py
----------------------
Decides whether a proposed appointment interval may be committed for a staff
member, and enumerates the start times a client can pick on a given day.

A candidate [start, end) is legal when:
1) start < end,
2) the staff member has a working window on the local day of `start`,
3) the whole interval lies inside that window, anchored on that local day
   and compared as UTC instants, and
4) it does not intersect any pending/confirmed booking of the same staff
   member. Intervals are half-open, so a booking ending at 10:00 does not
   block one starting at 10:00.

Calendar days and window times are read in the staff member's timezone
(Staff.tzinfo); durations are added to UTC instants so DST days neither
skip nor repeat slots.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from staff.models import WorkingWindow

from ..models import ACTIVE_STATUSES, Booking
from .errors import InvalidInterval, OutsideHours, SchedulingConflict, StaffUnavailable
from .slot_utils import (
    day_of_week,
    first_aligned_start,
    generate_candidate_starts,
    to_utc,
    window_bounds,
)

logger = logging.getLogger(__name__)


def intervals_overlap(a_start, a_end, b_start, b_end) -> bool:
    return a_start < b_end and b_start < a_end


class AvailabilityEngine:
    def __init__(self, clock=None, step_minutes=None):
        # clock() must return an aware "now"; tests inject a fixed one.
        self.clock = clock or timezone.now
        self.step_minutes = step_minutes or getattr(settings, "BOOKING_SLOT_STEP_MINUTES", 15)

    # -------------------- store access --------------------
    def get_window(self, staff, weekday):
        return WorkingWindow.objects.filter(staff=staff, day_of_week=weekday).first()

    def active_bookings(self, staff, start_time, end_time, exclude_booking_id=None):
        """Pending/confirmed bookings of `staff` intersecting [start_time, end_time)."""
        qs = Booking.objects.filter(
            staff=staff,
            status__in=ACTIVE_STATUSES,
            start_time__lt=end_time,
            end_time__gt=start_time,
        )
        if exclude_booking_id is not None:
            qs = qs.exclude(pk=exclude_booking_id)
        return qs.order_by("start_time")

    # -------------------- conflict checker --------------------
    def check_interval(self, staff, start_time, end_time, exclude_booking_id=None):
        """
        Raise the specific SchedulingError explaining why [start_time, end_time)
        cannot be booked for `staff`; return None when it can.

        Args:
            staff: Staff instance
            start_time, end_time: aware datetimes
            exclude_booking_id: booking to ignore in the overlap scan (rescheduling)
        """
        if start_time is None or end_time is None:
            raise InvalidInterval()
        start_time, end_time = to_utc(start_time), to_utc(end_time)
        if start_time >= end_time:
            raise InvalidInterval()

        tz = staff.tzinfo
        local_day = timezone.localtime(start_time, tz).date()
        window = self.get_window(staff, day_of_week(local_day))
        if window is None:
            raise StaffUnavailable()

        window_start, window_end = window_bounds(window, local_day, tz)
        if start_time < window_start or end_time > window_end:
            raise OutsideHours()

        if self.active_bookings(staff, start_time, end_time, exclude_booking_id).exists():
            raise SchedulingConflict()

    def is_legal(self, staff, start_time, end_time, exclude_booking_id=None) -> bool:
        try:
            self.check_interval(staff, start_time, end_time, exclude_booking_id)
        except (InvalidInterval, StaffUnavailable, OutsideHours, SchedulingConflict):
            return False
        return True

    # -------------------- slot enumerator --------------------
    def enumerate_slots(self, staff, day, duration_minutes: int):
        """
        Ordered list of legal start times (aware, in the staff member's zone)
        for a `duration_minutes` appointment on calendar date `day`.

        - step is min(BOOKING_SLOT_STEP_MINUTES, duration) so short services
          are never offered with gaps longer than themselves
        - on the staff member's current date, the walk starts at the first
          step boundary at or after now, counted from the window start rather
          than the top of the hour (09:10 window, 10:07 now -> 10:10)
        - empty list when the staff member is off that day or nothing fits
        """
        if duration_minutes is None or int(duration_minutes) <= 0:
            raise InvalidInterval("Duration must be a positive number of minutes.")
        duration_minutes = int(duration_minutes)

        window = self.get_window(staff, day_of_week(day))
        if window is None:
            return []

        tz = staff.tzinfo
        window_start, window_end = window_bounds(window, day, tz)
        duration = timedelta(minutes=duration_minutes)
        step = timedelta(minutes=min(self.step_minutes, duration_minutes))

        walk_start = window_start
        now = self.clock()
        if timezone.localtime(now, tz).date() == day:
            walk_start = first_aligned_start(window_start, now, step)
            if walk_start >= window_end:
                return []

        busy = [
            (b.start_time, b.end_time)
            for b in self.active_bookings(staff, walk_start, window_end)
        ]

        slots = []
        for start in generate_candidate_starts(walk_start, window_end, duration, step):
            end = start + duration
            if any(intervals_overlap(start, end, b_start, b_end) for b_start, b_end in busy):
                continue
            slots.append(start.astimezone(tz))

        logger.debug("%d slot(s) for staff %s on %s (%d min)", len(slots), staff.pk, day, duration_minutes)
        return slots

    def find_available_slots(self, service, day, staff_queryset):
        """
        Slots for `service` on `day` across several staff members, grouped
        by start time: {"slots": [{"start_time": iso, "staff_ids": [...]}, ...]}.
        """
        by_start = {}
        for staff in staff_queryset:
            for start in self.enumerate_slots(staff, day, service.duration_minutes):
                by_start.setdefault(start, []).append(staff.id)

        results = [
            {"start_time": start.isoformat(), "staff_ids": staff_ids}
            for start, staff_ids in sorted(by_start.items())
        ]
        return {"slots": results}
