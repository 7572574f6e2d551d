import booking.models
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ClientProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("email", models.EmailField(max_length=254)),
                ("phone", models.CharField(blank=True, max_length=20)),
                ("appointment_limit", models.PositiveIntegerField(
                    default=booking.models.default_appointment_limit,
                    help_text="Maximum pending+confirmed bookings at once (0 = unlimited).",
                )),
                ("user", models.OneToOneField(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="client_profile",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
        ),
        migrations.CreateModel(
            name="Service",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("duration_minutes", models.PositiveIntegerField(
                    validators=[django.core.validators.MinValueValidator(1)],
                )),
                ("price", models.DecimalField(
                    decimal_places=2,
                    max_digits=8,
                    validators=[django.core.validators.MinValueValidator(0.01)],
                )),
                ("active", models.BooleanField(default=True)),
            ],
        ),
        migrations.CreateModel(
            name="Staff",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("specialization", models.CharField(blank=True, max_length=100)),
                ("timezone", models.CharField(
                    blank=True,
                    max_length=64,
                    validators=[booking.models.validate_timezone_name],
                )),
            ],
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(blank=True, max_length=200)),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("notes", models.TextField(blank=True)),
                ("status", models.CharField(
                    choices=[
                        ("pending", "Pending"),
                        ("confirmed", "Confirmed"),
                        ("cancelled", "Cancelled"),
                        ("completed", "Completed"),
                    ],
                    default="pending",
                    help_text="Booking lifecycle status",
                    max_length=10,
                )),
                ("cancellation_note", models.TextField(blank=True)),
                ("cancellation_time", models.DateTimeField(
                    blank=True,
                    help_text="When the booking was cancelled (if applicable).",
                    null=True,
                )),
                ("client", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="bookings",
                    to="booking.clientprofile",
                )),
                ("service", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="bookings",
                    to="booking.service",
                )),
                ("staff", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="bookings",
                    to="booking.staff",
                )),
            ],
            options={
                "ordering": ["start_time"],
                "indexes": [
                    models.Index(fields=["staff", "status", "start_time"], name="booking_staff_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(start_time__lt=models.F("end_time")),
                        name="booking_start_before_end",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="MeetingAccess",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("link", models.URLField(max_length=500)),
                ("access_code", models.CharField(max_length=32)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("booking", models.OneToOneField(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="meeting",
                    to="booking.booking",
                )),
            ],
        ),
    ]
