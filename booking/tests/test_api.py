# booking/tests/test_api.py

from datetime import date, timedelta

from django.contrib.auth.models import User
from django.test import Client, TestCase
from rest_framework.test import APIClient

from booking.models import Booking, BookingStatus, MeetingAccess
from staff.models import WorkingWindow
from .utils import SchedulingFixtures, at, upcoming_monday


class BookingApiTestCase(SchedulingFixtures, TestCase):
    def setUp(self):
        self.client = APIClient()
        self.day = upcoming_monday()
        self.staff = self.make_staff()
        self.service = self.make_service(minutes=30)
        self.client_profile = self.make_client()
        self.make_window(self.staff, day_of_week=1)

        self.admin = User.objects.create_user("frontdesk", password="pw", is_staff=True)

    def post_booking(self, start, **extra):
        data = {
            "client": self.client_profile.id,
            "service": self.service.id,
            "staff": self.staff.id,
            "start_time": start.isoformat(),
        }
        data.update(extra)
        return self.client.post("/api/bookings/", data=data, format="json")


class CreateBookingApiTests(BookingApiTestCase):
    def test_create_returns_pending_booking(self):
        resp = self.post_booking(at(self.day, 10))
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["status"], BookingStatus.PENDING)
        self.assertIsNone(resp.data["meeting"])
        booking = Booking.objects.get(pk=resp.data["id"])
        self.assertEqual(booking.end_time, at(self.day, 10, 30))

    def test_overlap_returns_409(self):
        self.assertEqual(self.post_booking(at(self.day, 10)).status_code, 201)
        resp = self.post_booking(at(self.day, 10, 15))
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.data["code"], "scheduling_conflict")

    def test_outside_hours_returns_400_with_code(self):
        resp = self.post_booking(at(self.day, 8, 45))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data["code"], "outside_hours")

    def test_day_off_returns_400_with_code(self):
        resp = self.post_booking(at(self.day - timedelta(days=1), 10))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data["code"], "staff_unavailable")

    def test_past_start_rejected(self):
        resp = self.post_booking(at(date(2001, 1, 1), 10))
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(Booking.objects.exists())

    def test_inactive_service_rejected(self):
        self.service.active = False
        self.service.save()
        resp = self.post_booking(at(self.day, 10))
        self.assertEqual(resp.status_code, 400)

    def test_client_limit_returns_400(self):
        self.client_profile.appointment_limit = 1
        self.client_profile.save()
        self.assertEqual(self.post_booking(at(self.day, 10)).status_code, 201)
        resp = self.post_booking(at(self.day, 12))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data["code"], "limit_exceeded")

    def test_list_filtered_by_staff(self):
        other = self.make_staff(name="Sam", email="sam@example.com")
        self.make_window(other, day_of_week=1)
        self.post_booking(at(self.day, 10))
        self.post_booking(at(self.day, 10), staff=other.id)
        resp = self.client.get(f"/api/bookings/?staff={other.id}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([b["staff"] for b in resp.data], [other.id])

    def test_list_ordered_by_start_time(self):
        for hour in (15, 9, 12):
            self.post_booking(at(self.day, hour))
        resp = self.client.get("/api/bookings/")
        self.assertEqual(resp.status_code, 200)
        ids = [b["id"] for b in resp.data]
        expected = list(Booking.objects.order_by("start_time").values_list("id", flat=True))
        self.assertEqual(ids, expected)
        self.assertEqual(Booking.objects.get(pk=ids[0]).start_time, at(self.day, 9))


class StatusApiTests(BookingApiTestCase):
    def setUp(self):
        super().setUp()
        self.booking_id = self.post_booking(at(self.day, 10)).data["id"]

    def test_anonymous_cannot_change_status(self):
        resp = self.client.post(f"/api/bookings/{self.booking_id}/status/", {"status": "confirmed"}, format="json")
        self.assertIn(resp.status_code, (401, 403))

    def test_confirm_returns_meeting(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.post(f"/api/bookings/{self.booking_id}/status/", {"status": "confirmed"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["status"], BookingStatus.CONFIRMED)
        meeting = MeetingAccess.objects.get(booking_id=self.booking_id)
        self.assertEqual(resp.data["meeting"]["link"], meeting.link)

    def test_illegal_transition_returns_400(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.post(f"/api/bookings/{self.booking_id}/status/", {"status": "completed"}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data["code"], "invalid_transition")

    def test_unknown_status_returns_400(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.post(f"/api/bookings/{self.booking_id}/status/", {"status": "archived"}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_cancel_stores_note(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.post(
            f"/api/bookings/{self.booking_id}/status/",
            {"status": "cancelled", "note": "staff sick"},
            format="json",
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["cancellation_note"], "staff sick")

    def test_reschedule(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.patch(
            f"/api/bookings/{self.booking_id}/",
            {"start_time": at(self.day, 15).isoformat()},
            format="json",
        )
        self.assertEqual(resp.status_code, 200)
        booking = Booking.objects.get(pk=self.booking_id)
        self.assertEqual(booking.start_time, at(self.day, 15))
        self.assertEqual(booking.end_time, at(self.day, 15, 30))

    def test_pending_booking_can_be_deleted(self):
        resp = self.client.delete(f"/api/bookings/{self.booking_id}/")
        self.assertEqual(resp.status_code, 204)
        self.assertFalse(Booking.objects.filter(pk=self.booking_id).exists())

    def test_confirmed_booking_delete_refused(self):
        Booking.objects.filter(pk=self.booking_id).update(status=BookingStatus.CONFIRMED)
        resp = self.client.delete(f"/api/bookings/{self.booking_id}/")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data["code"], "deletion_not_allowed")


class SlotsApiTests(BookingApiTestCase):
    def test_slots_for_free_day(self):
        resp = self.client.get(
            "/api/bookings/slots/",
            {"staff": self.staff.id, "service": self.service.id, "date": self.day.isoformat()},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["date"], self.day.isoformat())
        self.assertEqual(len(resp.data["slots"]), 31)
        self.assertEqual(resp.data["slots"][0], at(self.day, 9).isoformat())

    def test_slots_exclude_booked_time(self):
        self.post_booking(at(self.day, 10))
        resp = self.client.get(
            "/api/bookings/slots/",
            {"staff": self.staff.id, "service": self.service.id, "date": self.day.isoformat()},
        )
        self.assertNotIn(at(self.day, 10).isoformat(), resp.data["slots"])
        self.assertIn(at(self.day, 10, 30).isoformat(), resp.data["slots"])

    def test_slots_require_all_parameters(self):
        resp = self.client.get("/api/bookings/slots/", {"staff": self.staff.id})
        self.assertEqual(resp.status_code, 400)


class WorkingHoursApiTests(BookingApiTestCase):
    def test_get_hours(self):
        resp = self.client.get(f"/api/staff/{self.staff.id}/hours/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["timezone"], "UTC")
        self.assertEqual(resp.data["windows"][0]["day_of_week"], 1)
        self.assertEqual(resp.data["windows"][0]["start_time"], "09:00")

    def test_put_requires_staff_user(self):
        resp = self.client.put(
            f"/api/staff/{self.staff.id}/hours/2/",
            {"start_time": "09:00", "end_time": "12:00"},
            format="json",
        )
        self.assertIn(resp.status_code, (401, 403))

    def test_put_upserts_window(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.put(
            f"/api/staff/{self.staff.id}/hours/1/",
            {"start_time": "10:00", "end_time": "12:00"},
            format="json",
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["end_time"], "12:00")
        window = WorkingWindow.objects.get(staff=self.staff, day_of_week=1)
        self.assertEqual(window.start_time.hour, 10)

    def test_put_invalid_hours(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.put(
            f"/api/staff/{self.staff.id}/hours/3/",
            {"start_time": "18:00", "end_time": "09:00"},
            format="json",
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data["code"], "invalid_interval")

    def test_put_invalid_day(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.put(
            f"/api/staff/{self.staff.id}/hours/9/",
            {"start_time": "09:00", "end_time": "17:00"},
            format="json",
        )
        self.assertEqual(resp.status_code, 400)

    def test_delete_window(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.delete(f"/api/staff/{self.staff.id}/hours/1/")
        self.assertEqual(resp.status_code, 204)
        resp = self.client.delete(f"/api/staff/{self.staff.id}/hours/1/")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data["code"], "not_found")


class PublicCancelTests(BookingApiTestCase):
    def setUp(self):
        super().setUp()
        self.booking_id = self.post_booking(at(self.day, 10)).data["id"]

    def form(self, **overrides):
        data = {
            "booking_id": str(self.booking_id),
            "name": "jane doe",
            "email": "JANE@example.com",
            "phone": "5551234567",
            "reason": "schedule change",
        }
        data.update(overrides)
        return data

    def test_cancel_with_matching_details(self):
        resp = self.client.post("/bookings/cancel/submit/", self.form())
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["ok"])
        booking = Booking.objects.get(pk=self.booking_id)
        self.assertEqual(booking.status, BookingStatus.CANCELLED)
        self.assertEqual(booking.cancellation_note, "schedule change")

    def test_mismatched_details_rejected(self):
        resp = self.client.post("/bookings/cancel/submit/", self.form(phone="5550000000"))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(Booking.objects.get(pk=self.booking_id).status, BookingStatus.PENDING)

    def test_already_cancelled(self):
        self.client.post("/bookings/cancel/submit/", self.form())
        resp = self.client.post("/bookings/cancel/submit/", self.form())
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["ok"])

    def test_get_not_allowed(self):
        resp = self.client.get("/bookings/cancel/submit/")
        self.assertEqual(resp.status_code, 405)

    def test_form_post_requires_csrf_token(self):
        browser = Client(enforce_csrf_checks=True)
        resp = browser.post("/bookings/cancel/submit/", self.form())
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(Booking.objects.get(pk=self.booking_id).status, BookingStatus.PENDING)
