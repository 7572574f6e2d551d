from datetime import timedelta
from io import StringIO
from smtplib import SMTPException
from unittest import mock

from django.core import mail
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.utils import timezone

from booking.models import Booking, BookingStatus
from booking.services.availability_engine import AvailabilityEngine
from booking.services.booking_manager import BookingManager
from booking.tests.utils import MONDAY, SchedulingFixtures, at, fixed_clock
from notifications.models import Notification
from notifications.services import NotificationService


class NotificationTests(SchedulingFixtures, TestCase):
    def setUp(self):
        self.staff = self.make_staff(email="alex@clinic.example.com")
        self.service = self.make_service()
        self.client_profile = self.make_client()
        self.make_window(self.staff, day_of_week=1)
        self.manager = BookingManager(
            availability=AvailabilityEngine(clock=fixed_clock(at(MONDAY - timedelta(days=7), 8)))
        )

    def book(self):
        with self.captureOnCommitCallbacks(execute=True):
            return self.manager.create_booking(
                client=self.client_profile, service=self.service, staff=self.staff, start_time=at(MONDAY, 10)
            )

    def test_email_sent_when_booking_created(self):
        booking = self.book()
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["jane@example.com"])
        self.assertEqual(mail.outbox[0].subject, f"Booking #{booking.id} Pending")
        self.assertIn("awaiting confirmation", mail.outbox[0].body)

        record = Notification.objects.get(booking=booking)
        self.assertEqual(record.status, Notification.Status.SENT)
        self.assertEqual(record.user, self.client_profile)

    def test_confirmation_emails_client_and_staff(self):
        booking = self.book()
        with self.captureOnCommitCallbacks(execute=True):
            self.manager.transition_status(booking, BookingStatus.CONFIRMED)

        confirmations = mail.outbox[1:]
        self.assertEqual(sorted(m.to[0] for m in confirmations), ["alex@clinic.example.com", "jane@example.com"])
        for message in confirmations:
            self.assertIn("Meeting link:", message.body)
        self.assertEqual(Notification.objects.filter(booking=booking).count(), 3)

    @override_settings(EMAIL_HOST_USER="owner@clinic.example.com")
    def test_cancellation_alerts_owner(self):
        booking = self.book()
        with self.captureOnCommitCallbacks(execute=True):
            self.manager.transition_status(booking, BookingStatus.CANCELLED, note="double booked")

        recipients = [m.to[0] for m in mail.outbox[1:]]
        self.assertIn("jane@example.com", recipients)
        self.assertIn("owner@clinic.example.com", recipients)
        client_mail = next(m for m in mail.outbox[1:] if m.to == ["jane@example.com"])
        self.assertIn("Note: double booked", client_mail.body)

    @override_settings(EMAIL_HOST_USER="")
    def test_no_owner_alert_without_owner_address(self):
        booking = self.book()
        with self.captureOnCommitCallbacks(execute=True):
            self.manager.transition_status(booking, BookingStatus.CANCELLED)
        self.assertEqual([m.to for m in mail.outbox[1:]], [["jane@example.com"]])

    def test_failed_delivery_is_recorded_not_raised(self):
        with mock.patch("notifications.services.send_mail", side_effect=SMTPException("down")):
            with self.assertLogs("notifications.services", level="ERROR"):
                booking = self.book()

        self.assertTrue(Booking.objects.filter(pk=booking.pk).exists())
        record = Notification.objects.get(booking=booking)
        self.assertEqual(record.status, Notification.Status.FAILED)

    def test_blank_recipient_skipped(self):
        self.assertIsNone(NotificationService().deliver("", "Subject", "Body"))
        self.assertFalse(Notification.objects.exists())


class SendRemindersCommandTests(SchedulingFixtures, TestCase):
    def setUp(self):
        self.staff = self.make_staff()
        self.service = self.make_service()
        self.client_profile = self.make_client()

    def insert(self, start, status):
        return Booking.objects.create(
            client=self.client_profile, service=self.service, staff=self.staff,
            start_time=start, end_time=start + timedelta(minutes=30), status=status,
        )

    def test_reminds_active_bookings_in_window(self):
        start = timezone.now() + timedelta(hours=24)
        due = self.insert(start, BookingStatus.CONFIRMED)
        self.insert(start, BookingStatus.CANCELLED)
        self.insert(start + timedelta(hours=3), BookingStatus.CONFIRMED)

        out = StringIO()
        call_command("send_reminders", "--when", "24", stdout=out)

        self.assertIn("Sent 1 reminder(s)", out.getvalue())
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, f"Reminder: Booking #{due.id}")
        record = Notification.objects.get(booking=due)
        self.assertEqual(record.kind, Notification.Kind.REMINDER)
