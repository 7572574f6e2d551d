import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("booking", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="WorkingWindow",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("day_of_week", models.PositiveSmallIntegerField(
                    validators=[django.core.validators.MaxValueValidator(6)],
                )),
                ("start_time", models.TimeField()),
                ("end_time", models.TimeField()),
                ("staff", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="working_windows",
                    to="booking.staff",
                )),
            ],
            options={
                "ordering": ["staff_id", "day_of_week"],
                "constraints": [
                    models.UniqueConstraint(fields=("staff", "day_of_week"), name="unique_window_per_staff_day"),
                    models.CheckConstraint(
                        condition=models.Q(start_time__lt=models.F("end_time")),
                        name="window_start_before_end",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(day_of_week__lte=6),
                        name="window_day_of_week_range",
                    ),
                ],
            },
        ),
    ]
