from datetime import timedelta
from unittest.mock import patch

from django.core import mail
from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework import status

from events.clock import now as clock_now
from users.models import User


class SignupLoginTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_signup_creates_student(self):
        resp = self.client.post(
            "/api/auth/signup/",
            {"name": "Alice", "email": "Alice@Example.com", "password": "secret123"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.content)

        user = User.objects.get(email="alice@example.com")
        self.assertEqual(user.role, User.ROLE_STUDENT)
        self.assertEqual(user.name, "Alice")
        self.assertTrue(user.check_password("secret123"))

    def test_signup_rejects_duplicate_email(self):
        User.objects.create_user(username="alice", email="alice@example.com", password="x1234567")
        resp = self.client.post(
            "/api/auth/signup/",
            {"name": "Alice", "email": "ALICE@example.com", "password": "secret123"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("already exists", resp.json()["error"])

    def test_old_address_is_free_after_email_change(self):
        resp = self.client.post(
            "/api/auth/signup/",
            {"name": "Alice", "email": "a@x.com", "password": "secret123"},
            format="json",
        )
        self.assertEqual(resp.status_code, 201)
        first = User.objects.get(email="a@x.com")

        self.client.force_authenticate(user=first)
        resp = self.client.patch("/api/users/profile/", {"email": "b@x.com"}, format="json")
        self.assertEqual(resp.status_code, 200, resp.content)
        first.refresh_from_db()
        self.assertEqual(first.username, "b@x.com")

        self.client.force_authenticate(user=None)
        resp = self.client.post(
            "/api/auth/signup/",
            {"name": "Another Alice", "email": "a@x.com", "password": "secret123"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.content)
        self.assertEqual(User.objects.get(email="a@x.com").username, "a@x.com")

    def test_signup_refuses_address_held_as_username(self):
        User.objects.create_user(username="c@x.com", email="other@x.com", password="x1234567")
        resp = self.client.post(
            "/api/auth/signup/",
            {"name": "Carol", "email": "c@x.com", "password": "secret123"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_signup_ignores_requested_role(self):
        resp = self.client.post(
            "/api/auth/signup/",
            {"name": "Mallory", "email": "m@example.com", "password": "secret123", "role": "admin"},
            format="json",
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(User.objects.get(email="m@example.com").role, User.ROLE_STUDENT)

    def test_login_returns_tokens_and_user(self):
        User.objects.create_user(
            username="club", email="club@example.com", password="secret123", role=User.ROLE_CLUB
        )
        resp = self.client.post(
            "/api/auth/login/",
            {"email": "CLUB@example.com", "password": "secret123"},
            format="json",
        )
        self.assertEqual(resp.status_code, 200, resp.content)
        data = resp.json()
        self.assertIn("access", data)
        self.assertIn("refresh", data)
        self.assertEqual(data["user"]["role"], User.ROLE_CLUB)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {data['access']}")
        me = self.client.get("/api/auth/me/")
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["email"], "club@example.com")

    def test_login_wrong_password(self):
        User.objects.create_user(username="alice", email="alice@example.com", password="secret123")
        resp = self.client.post(
            "/api/auth/login/",
            {"email": "alice@example.com", "password": "nope"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.json()["error"], "Invalid credentials.")

    def test_login_unknown_email(self):
        resp = self.client.post(
            "/api/auth/login/",
            {"email": "ghost@example.com", "password": "nope"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_social_account_is_told_to_use_google(self):
        user = User.objects.create_user(username="g", email="g@example.com")
        user.set_unusable_password()
        user.save()

        resp = self.client.post(
            "/api/auth/login/",
            {"email": "g@example.com", "password": "anything"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn("Google", resp.json()["error"])


class PasswordResetTestCase(TestCase):
    def setUp(self):
        cache.clear()  # throttle counters
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="alice", email="alice@example.com", password="oldpass123"
        )

    def forgot(self, email):
        with self.captureOnCommitCallbacks(execute=True):
            return self.client.post("/api/auth/forgot-password/", {"email": email}, format="json")

    def test_forgot_issues_token_and_mails_link(self):
        resp = self.forgot("alice@example.com")
        self.assertEqual(resp.status_code, 200)

        self.user.refresh_from_db()
        self.assertEqual(len(self.user.reset_password_token), 40)
        self.assertGreater(self.user.reset_password_expires, clock_now())

        self.assertEqual(len(mail.outbox), 1)
        self.assertIn(f"reset-password.html?token={self.user.reset_password_token}", mail.outbox[0].body)

    def test_forgot_answers_the_same_for_unknown_email(self):
        known = self.forgot("alice@example.com").json()
        unknown = self.forgot("ghost@example.com").json()
        self.assertEqual(known, unknown)
        self.assertEqual(len(mail.outbox), 1)

    def test_reset_with_valid_token(self):
        self.forgot("alice@example.com")
        self.user.refresh_from_db()

        resp = self.client.post(
            "/api/auth/reset-password/",
            {"token": self.user.reset_password_token, "password": "newpass123"},
            format="json",
        )
        self.assertEqual(resp.status_code, 200, resp.content)

        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("newpass123"))
        self.assertIsNone(self.user.reset_password_token)

    def test_reset_with_expired_token(self):
        self.user.reset_password_token = "a" * 40
        self.user.reset_password_expires = clock_now() - timedelta(minutes=1)
        self.user.save()

        resp = self.client.post(
            "/api/auth/reset-password/",
            {"token": "a" * 40, "password": "newpass123"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["error"], "Password reset token is invalid or has expired.")
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("oldpass123"))

    def test_mail_failure_is_not_surfaced(self):
        with patch("events.emails.send_mail", side_effect=OSError("smtp down")):
            resp = self.forgot("alice@example.com")
        self.assertEqual(resp.status_code, 200)
