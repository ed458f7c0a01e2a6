import shutil
import tempfile
from io import BytesIO

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework.test import APIClient
from rest_framework import status
from PIL import Image

from users.models import User

TEMP_MEDIA_ROOT = tempfile.mkdtemp()


def make_png():
    buffer = BytesIO()
    Image.new("RGB", (8, 8), color="red").save(buffer, format="PNG")
    return buffer.getvalue()


class ProfileTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="alice", email="alice@example.com", password="pass1234", name="Alice"
        )
        self.client.force_authenticate(user=self.user)

    def test_get_profile(self):
        resp = self.client.get("/api/users/profile/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["email"], "alice@example.com")
        self.assertEqual(resp.json()["role"], User.ROLE_STUDENT)

    def test_update_name_and_email(self):
        resp = self.client.patch(
            "/api/users/profile/",
            {"name": "Alice L.", "email": "Alice.L@Example.com"},
            format="json",
        )
        self.assertEqual(resp.status_code, 200, resp.content)
        self.user.refresh_from_db()
        self.assertEqual(self.user.name, "Alice L.")
        self.assertEqual(self.user.email, "alice.l@example.com")

    def test_email_taken_by_someone_else(self):
        User.objects.create_user(username="bob", email="bob@example.com", password="pass1234")
        resp = self.client.patch("/api/users/profile/", {"email": "bob@example.com"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_role_cannot_be_changed_through_profile(self):
        self.client.patch("/api/users/profile/", {"role": User.ROLE_ADMIN}, format="json")
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, User.ROLE_STUDENT)


@override_settings(MEDIA_ROOT=TEMP_MEDIA_ROOT)
class ProfileImageTestCase(TestCase):
    @classmethod
    def tearDownClass(cls):
        super().tearDownClass()
        shutil.rmtree(TEMP_MEDIA_ROOT, ignore_errors=True)

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="alice", email="alice@example.com", password="pass1234"
        )
        self.client.force_authenticate(user=self.user)

    def test_upload_image(self):
        upload = SimpleUploadedFile("me.png", make_png(), content_type="image/png")
        resp = self.client.post("/api/users/profile/image/", {"profileImage": upload}, format="multipart")
        self.assertEqual(resp.status_code, 200, resp.content)
        self.user.refresh_from_db()
        self.assertTrue(self.user.profile_image_url.startswith("profiles/"))

    def test_non_image_rejected(self):
        upload = SimpleUploadedFile("me.txt", b"hello", content_type="text/plain")
        resp = self.client.post("/api/users/profile/image/", {"profileImage": upload}, format="multipart")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["error"], "Not an image! Please upload an image file.")


class AdminUserManagementTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            username="admin", email="admin@example.com", password="pass1234", role=User.ROLE_ADMIN
        )
        self.student = User.objects.create_user(
            username="alice", email="alice@example.com", password="pass1234"
        )

    def test_admin_lists_users(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.get("/api/users/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual({u["email"] for u in resp.json()}, {"admin@example.com", "alice@example.com"})

    def test_student_cannot_list_users(self):
        self.client.force_authenticate(user=self.student)
        resp = self.client.get("/api/users/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_promotes_student_to_club(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.patch(
            f"/api/users/{self.student.id}/role/", {"role": User.ROLE_CLUB}, format="json"
        )
        self.assertEqual(resp.status_code, 200, resp.content)
        self.student.refresh_from_db()
        self.assertEqual(self.student.role, User.ROLE_CLUB)

    def test_admin_cannot_change_own_role(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.patch(
            f"/api/users/{self.admin.id}/role/", {"role": User.ROLE_STUDENT}, format="json"
        )
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.role, User.ROLE_ADMIN)

    def test_invalid_role(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.patch(
            f"/api/users/{self.student.id}/role/", {"role": "superhero"}, format="json"
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_user(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.patch("/api/users/99999/role/", {"role": User.ROLE_CLUB}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
