from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework import status

from events.attendance import answers_match
from events.models import Attendee, Event
from users.models import User
from .helpers import make_event, make_user


class SelfCheckInTestCase(TestCase):
    def setUp(self):
        cache.clear()  # throttle counters
        self.client = APIClient()
        self.club = make_user("club", role=User.ROLE_CLUB)
        self.student = make_user("alice")

        self.event = make_event(
            self.club,
            attendance_question="2+2",
            attendance_options=["3", "4", "5"],
            attendance_answer="4",
        )
        self.attendee = Attendee.objects.create(event=self.event, user=self.student)
        self.url = f"/api/events/checkin/{self.event.qr_code_id}/"

    def check_in(self, email="alice@example.com", answer=None, url=None):
        payload = {"email": email, "name": "Alice"}
        if answer is not None:
            payload["answer"] = answer
        return self.client.post(url or self.url, payload, format="json")

    def test_checkin_page_shows_question_but_not_answer(self):
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["title"], "Hack Night")
        self.assertEqual(data["question"], "2+2")
        self.assertEqual(data["options"], ["3", "4", "5"])
        self.assertNotIn("attendance_answer", data)
        self.assertNotIn("correct_answer", data)

    def test_wrong_answer_then_right_answer(self):
        resp = self.check_in(answer="5")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.json()["error"], "Incorrect answer to the verification question.")
        self.attendee.refresh_from_db()
        self.assertFalse(self.attendee.is_attended)

        resp = self.check_in(answer="4")
        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(resp.json()["message"], "Attendance marked successfully!")
        self.attendee.refresh_from_db()
        self.assertTrue(self.attendee.is_attended)
        self.assertIsNotNone(self.attendee.attended_at)

    def test_answer_comparison_ignores_case_and_whitespace(self):
        self.event.attendance_answer = "Paris"
        self.event.save()
        resp = self.check_in(answer="  paris ")
        self.assertEqual(resp.status_code, 200)

    def test_missing_answer_is_rejected_when_question_set(self):
        resp = self.check_in()
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_blank_answer_is_rejected_when_question_set(self):
        resp = self.check_in(answer="   ")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.attendee.refresh_from_db()
        self.assertFalse(self.attendee.is_attended)

    def test_second_checkin_conflicts_and_keeps_flag(self):
        self.assertEqual(self.check_in(answer="4").status_code, 200)

        resp = self.check_in(answer="4")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.json()["error"], "Attendance already marked.")
        self.attendee.refresh_from_db()
        self.assertTrue(self.attendee.is_attended)

    def test_email_match_is_case_insensitive(self):
        resp = self.check_in(email="ALICE@Example.com", answer="4")
        self.assertEqual(resp.status_code, 200)

    def test_unregistered_email_is_not_found(self):
        resp = self.check_in(email="stranger@example.com", answer="4")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.json()["error"], "You are not registered for this event.")

    def test_unknown_token_is_not_found(self):
        resp = self.check_in(answer="4", url="/api/events/checkin/doesnotexist/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_unapproved_event_is_not_active(self):
        self.event.status = Event.STATUS_REJECTED
        self.event.save()
        resp = self.check_in(answer="4")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["error"], "Event not found or not active.")

    def test_event_without_question_needs_only_email(self):
        plain = make_event(self.club, title="Open Mic")
        Attendee.objects.create(event=plain, user=self.student)
        resp = self.check_in(url=f"/api/events/checkin/{plain.qr_code_id}/")
        self.assertEqual(resp.status_code, 200)


class AnswersMatchTestCase(TestCase):
    def test_missing_or_blank_answers_never_match(self):
        for given in (None, "", "   "):
            self.assertFalse(answers_match("4", given))

    def test_non_string_answer_is_compared_as_text(self):
        self.assertTrue(answers_match("4", 4))
        self.assertTrue(answers_match("0", 0))


class ManualAttendanceTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.club = make_user("club", role=User.ROLE_CLUB)
        self.other_club = make_user("otherclub", role=User.ROLE_CLUB)
        self.admin = make_user("admin", role=User.ROLE_ADMIN)
        self.student = make_user("alice")
        self.outsider = make_user("bob")

        self.event = make_event(self.club)
        self.attendee = Attendee.objects.create(event=self.event, user=self.student)
        self.url = f"/api/events/{self.event.id}/manual-attendance/"

    def mark(self, actor, student=None, url=None):
        self.client.force_authenticate(user=actor)
        student = student or self.student
        return self.client.post(url or self.url, {"student_id": student.id}, format="json")

    def test_owner_marks_attendance(self):
        resp = self.mark(self.club)
        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertTrue(resp.json()["attendee"]["is_attended"])
        self.attendee.refresh_from_db()
        self.assertTrue(self.attendee.is_attended)

    def test_remarking_is_idempotent(self):
        self.mark(self.club)
        self.attendee.refresh_from_db()
        first_marked_at = self.attendee.attended_at

        resp = self.mark(self.club)
        self.assertEqual(resp.status_code, 200)
        self.attendee.refresh_from_db()
        self.assertTrue(self.attendee.is_attended)
        self.assertEqual(self.attendee.attended_at, first_marked_at)

    def test_admin_may_mark_any_event(self):
        self.assertEqual(self.mark(self.admin).status_code, 200)

    def test_other_club_is_forbidden(self):
        resp = self.mark(self.other_club)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.json()["error"], "You can only manage your own events.")

    def test_student_is_forbidden(self):
        resp = self.mark(self.outsider)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.json()["error"], "Access denied.")

    def test_unregistered_student(self):
        resp = self.mark(self.club, student=self.outsider)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["error"], "Student not registered.")

    def test_unknown_event(self):
        resp = self.mark(self.club, url="/api/events/99999/manual-attendance/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_pending_event_cannot_be_marked(self):
        self.event.status = Event.STATUS_PENDING
        self.event.save()
        resp = self.mark(self.club)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.attendee.refresh_from_db()
        self.assertFalse(self.attendee.is_attended)


class EventQRImageTestCase(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.club = make_user("club", role=User.ROLE_CLUB)
        self.student = make_user("alice")
        self.event = make_event(self.club)

    def test_owner_gets_png(self):
        self.client.force_authenticate(user=self.club)
        resp = self.client.get(f"/api/events/{self.event.id}/qr/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp["Content-Type"], "image/png")
        self.assertEqual(resp["Cache-Control"], "no-store")
        self.assertTrue(resp.content.startswith(b"\x89PNG"))

    def test_student_cannot_fetch_qr(self):
        self.client.force_authenticate(user=self.student)
        resp = self.client.get(f"/api/events/{self.event.id}/qr/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
