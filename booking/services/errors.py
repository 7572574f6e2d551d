"""
errors.py
---------
Caller-visible failures of the scheduling core.

Every error carries a stable ``code`` so API clients can tell "staff is off
that day" from "outside hours" from "overlaps another appointment" without
parsing messages. They subclass ValueError, the same way BookingManager has
always signalled rule violations to the views.

Database faults are NOT wrapped here; they propagate as django.db errors.
"""


class SchedulingError(ValueError):
    code = "scheduling_error"
    default_message = "The request could not be scheduled."

    def __init__(self, message=None):
        super().__init__(message or self.default_message)

    @property
    def message(self):
        return self.args[0]


class InvalidInterval(SchedulingError):
    code = "invalid_interval"
    default_message = "Start time must be before end time."


class StaffUnavailable(SchedulingError):
    code = "staff_unavailable"
    default_message = "Staff member is not available on this day."


class OutsideHours(SchedulingError):
    code = "outside_hours"
    default_message = "Appointment time is outside of the staff member's available hours."


class SchedulingConflict(SchedulingError):
    code = "scheduling_conflict"
    default_message = "This time slot overlaps with an existing appointment."


class LimitExceeded(SchedulingError):
    code = "limit_exceeded"
    default_message = "You have reached your appointment limit."


class InvalidTransition(SchedulingError):
    code = "invalid_transition"
    default_message = "This status change is not allowed."


class DeletionNotAllowed(InvalidTransition):
    code = "deletion_not_allowed"
    default_message = "This booking cannot be deleted yet."


class NotFound(SchedulingError):
    code = "not_found"
    default_message = "Not found."
