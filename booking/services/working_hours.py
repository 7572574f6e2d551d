"""
working_hours.py
----------------
Read/write access to the weekly working windows (staff.models.WorkingWindow).

One window per (staff, day_of_week); set_working_window upserts, so changing
Monday's hours replaces the previous Monday row. Times are "HH:MM" strings
(or time objects) in the staff member's own timezone.
"""

import logging

from django.db import transaction

from staff.models import WorkingWindow

from .errors import InvalidInterval
from .slot_utils import parse_hhmm

logger = logging.getLogger(__name__)


class WorkingHoursManager:
    @staticmethod
    def validate_day(day_of_week) -> int:
        try:
            day = int(day_of_week)
        except (TypeError, ValueError):
            raise InvalidInterval(f"Invalid day of week {day_of_week!r}; expected 0-6.")
        if not 0 <= day <= 6:
            raise InvalidInterval(f"Invalid day of week {day}; expected 0 (Sunday) to 6 (Saturday).")
        return day

    def list_working_windows(self, staff):
        return list(WorkingWindow.objects.filter(staff=staff).order_by("day_of_week"))

    @transaction.atomic
    def set_working_window(self, staff, day_of_week, start, end):
        """
        Create or replace the window for `day_of_week`.

        Raises:
            InvalidInterval: bad day, unparsable time, or start >= end.
        """
        day = self.validate_day(day_of_week)
        start_time = parse_hhmm(start)
        end_time = parse_hhmm(end)
        if start_time >= end_time:
            raise InvalidInterval("Working hours must start before they end.")

        window, created = WorkingWindow.objects.update_or_create(
            staff=staff,
            day_of_week=day,
            defaults={"start_time": start_time, "end_time": end_time},
        )
        logger.info(
            "%s working window for staff %s day %s: %s-%s",
            "Created" if created else "Updated", staff.pk, day, start_time, end_time,
        )
        return window

    def clear_working_window(self, staff, day_of_week) -> bool:
        """Remove the window for `day_of_week`. Returns False if there was none."""
        day = self.validate_day(day_of_week)
        deleted, _ = WorkingWindow.objects.filter(staff=staff, day_of_week=day).delete()
        if deleted:
            logger.info("Cleared working window for staff %s day %s", staff.pk, day)
        return bool(deleted)
