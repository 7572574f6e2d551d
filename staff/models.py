# staff/models.py
from django.core.validators import MaxValueValidator
from django.db import models

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


class WorkingWindow(models.Model):
    """
    Weekly recurring working hours for one staff member on one day of the week.

    - day_of_week: 0 = Sunday ... 6 = Saturday
    - start_time/end_time: wall-clock times in the staff member's timezone
    - At most one window per (staff, day_of_week); a missing row means the
      staff member does not work that day.
    Points to booking.Staff to avoid having two Staff models.
    """
    staff = models.ForeignKey(
        "booking.Staff",
        on_delete=models.CASCADE,
        related_name="working_windows",
    )
    day_of_week = models.PositiveSmallIntegerField(validators=[MaxValueValidator(6)])
    start_time = models.TimeField()
    end_time = models.TimeField()

    class Meta:
        ordering = ["staff_id", "day_of_week"]
        constraints = [
            models.UniqueConstraint(
                fields=["staff", "day_of_week"],
                name="unique_window_per_staff_day",
            ),
            models.CheckConstraint(
                condition=models.Q(start_time__lt=models.F("end_time")),
                name="window_start_before_end",
            ),
            models.CheckConstraint(
                condition=models.Q(day_of_week__lte=6),
                name="window_day_of_week_range",
            ),
        ]

    def __str__(self):
        return (
            f"{self.staff.name}: {DAY_NAMES[self.day_of_week]} "
            f"{self.start_time:%H:%M}-{self.end_time:%H:%M}"
        )
