"""
slot_utils.py
-------------
Time helpers shared by the availability engine and the working-hours API:
- "HH:MM" parsing/formatting for working-window times
- day-of-week numbering (0 = Sunday ... 6 = Saturday)
- anchoring a working window onto a calendar date in the staff member's zone
- UTC normalisation, so interval math is done on instants, not wall clocks
- stepping candidate start times through a window
"""

import math
from datetime import date, datetime, time, timedelta
from datetime import timezone as dt_timezone

from .errors import InvalidInterval


def parse_hhmm(value) -> time:
    """
    Parse a 24-hour "HH:MM" string (time objects pass through).

    Raises:
        InvalidInterval: for anything that is not a valid time of day.
    """
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    try:
        h, m = str(value).strip().split(":")
        return time(int(h), int(m))
    except (TypeError, ValueError):
        raise InvalidInterval(f"Invalid time {value!r}; expected HH:MM (24-hour).")


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def to_utc(value: datetime) -> datetime:
    return value.astimezone(dt_timezone.utc)


def day_of_week(day: date) -> int:
    # Python's weekday() is Monday=0; working windows use Sunday=0.
    return (day.weekday() + 1) % 7


def window_bounds(window, day: date, tz):
    """
    Anchor a working window's wall-clock times onto `day` in zone `tz`.

    Returns (window_start, window_end) as UTC instants. Arithmetic on datetimes
    carrying a DST zone happens in wall-clock time, so callers step and add
    durations on these UTC values and convert back for display.
    """
    return (
        to_utc(datetime.combine(day, window.start_time, tzinfo=tz)),
        to_utc(datetime.combine(day, window.end_time, tzinfo=tz)),
    )


def first_aligned_start(window_start: datetime, not_before: datetime, step: timedelta) -> datetime:
    """
    Earliest point on the grid window_start + k*step (k >= 0) that is at or
    after `not_before`. The grid is counted from the window start, not from
    the top of the hour, so a 09:10 window with a 15 minute step offers 10:10
    rather than 10:15 at 10:07.
    """
    window_start, not_before = to_utc(window_start), to_utc(not_before)
    if not_before <= window_start:
        return window_start
    steps = math.ceil((not_before - window_start) / step)
    return window_start + steps * step


def generate_candidate_starts(window_start: datetime, window_end: datetime,
                              duration: timedelta, step: timedelta):
    """
    Candidate slot starts (UTC) stepping by `step` whose
    [start, start+duration) still ends inside the window.
    """
    window_start, window_end = to_utc(window_start), to_utc(window_end)
    slots = []
    current = window_start
    while current + duration <= window_end:
        slots.append(current)
        current += step
    return slots
