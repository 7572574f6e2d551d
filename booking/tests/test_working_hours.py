# booking/tests/test_working_hours.py

from datetime import time

from django.test import TestCase

from booking.services.errors import InvalidInterval
from booking.services.slot_utils import parse_hhmm
from booking.services.working_hours import WorkingHoursManager
from staff.models import WorkingWindow
from .utils import SchedulingFixtures


class WorkingHoursManagerTests(SchedulingFixtures, TestCase):
    def setUp(self):
        self.staff = self.make_staff()
        self.hours = WorkingHoursManager()

    def test_set_creates_window(self):
        window = self.hours.set_working_window(self.staff, 1, "09:00", "17:00")
        self.assertEqual(window.day_of_week, 1)
        self.assertEqual(window.start_time, time(9, 0))
        self.assertEqual(window.end_time, time(17, 0))

    def test_set_again_replaces_the_day(self):
        self.hours.set_working_window(self.staff, 1, "09:00", "17:00")
        self.hours.set_working_window(self.staff, 1, "10:00", "14:30")
        windows = self.hours.list_working_windows(self.staff)
        self.assertEqual(len(windows), 1)
        self.assertEqual(windows[0].start_time, time(10, 0))
        self.assertEqual(windows[0].end_time, time(14, 30))

    def test_list_is_ordered_by_day(self):
        for day in (5, 0, 3):
            self.hours.set_working_window(self.staff, day, "08:00", "12:00")
        days = [w.day_of_week for w in self.hours.list_working_windows(self.staff)]
        self.assertEqual(days, [0, 3, 5])

    def test_inverted_hours_rejected(self):
        with self.assertRaises(InvalidInterval):
            self.hours.set_working_window(self.staff, 1, "17:00", "09:00")
        with self.assertRaises(InvalidInterval):
            self.hours.set_working_window(self.staff, 1, "09:00", "09:00")
        self.assertFalse(WorkingWindow.objects.exists())

    def test_bad_day_rejected(self):
        for day in (-1, 7, "monday"):
            with self.subTest(day=day):
                with self.assertRaises(InvalidInterval):
                    self.hours.set_working_window(self.staff, day, "09:00", "17:00")

    def test_unparsable_time_rejected(self):
        for value in ("9am", "25:00", "12:60", ""):
            with self.subTest(value=value):
                with self.assertRaises(InvalidInterval):
                    parse_hhmm(value)

    def test_clear_window(self):
        self.hours.set_working_window(self.staff, 2, "09:00", "17:00")
        self.assertTrue(self.hours.clear_working_window(self.staff, 2))
        self.assertFalse(self.hours.clear_working_window(self.staff, 2))
        self.assertEqual(self.hours.list_working_windows(self.staff), [])

    def test_windows_are_per_staff(self):
        other = self.make_staff(name="Sam", email="sam@example.com")
        self.hours.set_working_window(self.staff, 1, "09:00", "17:00")
        self.hours.set_working_window(other, 1, "12:00", "18:00")
        self.assertEqual(self.hours.list_working_windows(other)[0].start_time, time(12, 0))
        self.assertEqual(self.hours.list_working_windows(self.staff)[0].start_time, time(9, 0))
