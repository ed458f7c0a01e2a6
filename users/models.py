# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    ROLE_STUDENT = "student"
    ROLE_CLUB = "club"
    ROLE_ADMIN = "admin"

    ROLE_CHOICES = (
        (ROLE_STUDENT, "Student"),
        (ROLE_CLUB, "Club"),
        (ROLE_ADMIN, "Admin"),
    )

    name = models.CharField(max_length=255, blank=True)
    # Stored lower-case, looked up case-insensitively
    email = models.EmailField(unique=True)

    role = models.CharField(
        max_length=30,
        choices=ROLE_CHOICES,
        default=ROLE_STUDENT,
    )

    profile_image_url = models.CharField(max_length=1024, blank=True, default="")

    reset_password_token = models.CharField(max_length=64, blank=True, null=True, db_index=True)
    reset_password_expires = models.DateTimeField(blank=True, null=True)

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    @property
    def display_name(self):
        return self.name or self.get_full_name() or self.username

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN or self.is_superuser

    @property
    def is_club(self):
        return self.role == self.ROLE_CLUB

    @property
    def is_student(self):
        return self.role == self.ROLE_STUDENT

    def __str__(self):
        return self.email or self.username
