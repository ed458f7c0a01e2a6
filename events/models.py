# events/models.py
from django.db import models
from django.conf import settings
from django.core.validators import RegexValidator
import uuid

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

validate_hhmm = RegexValidator(HHMM_PATTERN, "Time must be in HH:MM format.")


class Event(models.Model):
    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    ]

    TYPE_TECH = "Tech"
    TYPE_CULTURAL = "Cultural"
    TYPE_SPORTS = "Sports"
    TYPE_INTRA_COLLEGE = "Intra College"
    TYPE_INTER_COLLEGE = "Inter College"
    TYPE_WORKSHOP = "Workshop"
    TYPE_SEMINAR = "Seminar"
    TYPE_OTHER = "Other"

    TYPE_CHOICES = [
        (TYPE_TECH, "Tech"),
        (TYPE_CULTURAL, "Cultural"),
        (TYPE_SPORTS, "Sports"),
        (TYPE_INTRA_COLLEGE, "Intra College"),
        (TYPE_INTER_COLLEGE, "Inter College"),
        (TYPE_WORKSHOP, "Workshop"),
        (TYPE_SEMINAR, "Seminar"),
        (TYPE_OTHER, "Other"),
    ]

    MODE_ONLINE = "Online"
    MODE_OFFLINE = "Offline"

    MODE_CHOICES = [
        (MODE_ONLINE, "Online"),
        (MODE_OFFLINE, "Offline"),
    ]

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="created_events",
    )
    title = models.CharField(max_length=255)
    description = models.TextField()
    event_type = models.CharField(max_length=32, choices=TYPE_CHOICES, default=TYPE_OTHER)

    # Scheduling: date + "HH:MM" wall-clock time, combined by events.clock
    date = models.DateField()
    time = models.CharField(max_length=5, blank=True, default="", validators=[validate_hhmm])
    venue = models.CharField(max_length=255)

    event_mode = models.CharField(max_length=16, choices=MODE_CHOICES, default=MODE_OFFLINE)
    meeting_link = models.CharField(max_length=1024, blank=True, default="")

    status = models.CharField(
        max_length=32,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
    )

    # 0 = unlimited / free
    registration_limit = models.PositiveIntegerField(default=0)
    registration_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    # Optional challenge used to prove presence during self check-in
    attendance_question = models.CharField(max_length=500, blank=True, default="")
    attendance_options = models.JSONField(default=list, blank=True)
    attendance_answer = models.CharField(max_length=255, blank=True, default="")

    poster_url = models.CharField(max_length=1024, blank=True, default="")
    # Storage name of the uploaded PDF template; "" = not uploaded yet
    certificate_template_url = models.CharField(max_length=1024, blank=True, default="")

    # Public check-in key, never the internal id. Assigned once on first save.
    qr_code_id = models.CharField(
        max_length=64,
        unique=True,
        null=True,
        blank=True,
        editable=False,
    )

    # Optimistic-concurrency token for roster appends
    roster_version = models.PositiveIntegerField(default=0, editable=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date"]
        indexes = [
            models.Index(
                fields=["status", "date"],
                name="event_status_date_idx",
            ),
            models.Index(
                fields=["created_by", "date"],
                name="event_owner_date_idx",
            ),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if self._state.adding and not self.qr_code_id:
            self.qr_code_id = uuid.uuid4().hex
        super().save(*args, **kwargs)

    @property
    def has_attendance_question(self):
        return bool(self.attendance_question)

    @property
    def is_paid(self):
        return self.registration_fee > 0


class Attendee(models.Model):
    """
    One user's registration on one event's roster.
    Rows are only ever appended; is_attended only moves False -> True.
    """
    event = models.ForeignKey(
        Event,
        on_delete=models.CASCADE,
        related_name="attendees",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="attendances",
    )
    registered_college = models.CharField(max_length=255, blank=True, default="")
    is_attended = models.BooleanField(default=False)
    # Mock settlement reference, only for paid events
    payment_id = models.CharField(max_length=64, blank=True, null=True)

    registered_at = models.DateTimeField(auto_now_add=True)
    attended_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user"],
                name="attendee_unique_event_user",
            ),
        ]
        indexes = [
            models.Index(
                fields=["user", "is_attended"],
                name="attendee_user_attended_idx",
            ),
        ]

    def __str__(self):
        return f"{self.user} @ {self.event}"


class Feedback(models.Model):
    event = models.ForeignKey(
        Event,
        on_delete=models.CASCADE,
        related_name="feedbacks",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="event_feedbacks",
    )
    rating = models.PositiveSmallIntegerField()  # 1-5, enforced in serializer
    comment = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["event", "created_at"],
                name="feedback_event_created_idx",
            ),
        ]

    def __str__(self):
        return f"{self.event.title} - {self.user} ({self.rating})"
