"""
seed_services.py
----------------
Seeds (creates or updates) a starter service catalog, and optionally a demo
staff member with Monday-Friday 09:00-17:00 working hours.
Safe to run any time; services are upserted by unique name.

Usage:
    python manage.py seed_services
    python manage.py seed_services --demo-staff
"""

from decimal import Decimal
from django.core.management.base import BaseCommand
from booking.models import Service, Staff
from booking.services.working_hours import WorkingHoursManager


CATALOG = [
    {"name": "Initial Consultation",  "description": "First meeting to assess needs",  "duration_minutes": 60, "price": Decimal("80.00")},
    {"name": "Follow-up Session",     "description": "Progress review",                "duration_minutes": 30, "price": Decimal("45.00")},
    {"name": "Quick Check-in",        "description": "Short status call",              "duration_minutes": 10, "price": Decimal("15.00")},
    {"name": "Extended Session",      "description": "In-depth working session",       "duration_minutes": 90, "price": Decimal("120.00")},
]

DEMO_STAFF = {"name": "Demo Staff", "email": "staff@appointments.local", "specialization": "General"}


class Command(BaseCommand):
    help = "Seed or update the service catalog (and optionally a demo staff member)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--demo-staff",
            action="store_true",
            help="Also create a demo staff member working Mon-Fri 09:00-17:00.",
        )

    def handle(self, *args, **options):
        created = 0
        updated = 0

        for item in CATALOG:
            svc, is_created = Service.objects.get_or_create(
                name=item["name"],
                defaults={
                    "description": item["description"],
                    "duration_minutes": item["duration_minutes"],
                    "price": item["price"],
                    "active": True,
                },
            )
            if is_created:
                created += 1
                continue

            changed = False
            for field in ("description", "duration_minutes", "price"):
                if getattr(svc, field) != item[field]:
                    setattr(svc, field, item[field])
                    changed = True
            if not svc.active:
                svc.active = True
                changed = True
            if changed:
                svc.save()
                updated += 1

        self.stdout.write(self.style.SUCCESS(f"Seed complete. Created={created}, Updated={updated}"))

        if options["demo_staff"]:
            staff, _ = Staff.objects.get_or_create(email=DEMO_STAFF["email"], defaults=DEMO_STAFF)
            hours = WorkingHoursManager()
            for day in range(1, 6):  # Monday..Friday
                hours.set_working_window(staff, day, "09:00", "17:00")
            self.stdout.write(self.style.SUCCESS(f"Demo staff ready: {staff.name} (id={staff.id})"))
