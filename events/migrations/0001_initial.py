from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField()),
                (
                    "event_type",
                    models.CharField(
                        choices=[
                            ("Tech", "Tech"),
                            ("Cultural", "Cultural"),
                            ("Sports", "Sports"),
                            ("Intra College", "Intra College"),
                            ("Inter College", "Inter College"),
                            ("Workshop", "Workshop"),
                            ("Seminar", "Seminar"),
                            ("Other", "Other"),
                        ],
                        default="Other",
                        max_length=32,
                    ),
                ),
                ("date", models.DateField()),
                ("time", models.CharField(blank=True, default="", max_length=5)),
                ("venue", models.CharField(max_length=255)),
                (
                    "event_mode",
                    models.CharField(
                        choices=[("Online", "Online"), ("Offline", "Offline")],
                        default="Offline",
                        max_length=16,
                    ),
                ),
                ("meeting_link", models.CharField(blank=True, default="", max_length=1024)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected")],
                        default="pending",
                        max_length=32,
                    ),
                ),
                ("registration_limit", models.PositiveIntegerField(default=0)),
                ("registration_fee", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("attendance_question", models.CharField(blank=True, default="", max_length=500)),
                ("attendance_options", models.JSONField(blank=True, default=list)),
                ("attendance_answer", models.CharField(blank=True, default="", max_length=255)),
                ("poster_url", models.CharField(blank=True, default="", max_length=1024)),
                ("certificate_template_url", models.CharField(blank=True, default="", max_length=1024)),
                ("qr_code_id", models.CharField(blank=True, editable=False, max_length=64, null=True, unique=True)),
                ("roster_version", models.PositiveIntegerField(default=0, editable=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="created_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-date"],
                "indexes": [
                    models.Index(fields=["status", "date"], name="event_status_date_idx"),
                    models.Index(fields=["created_by", "date"], name="event_owner_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Attendee",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("registered_college", models.CharField(blank=True, default="", max_length=255)),
                ("is_attended", models.BooleanField(default=False)),
                ("payment_id", models.CharField(blank=True, max_length=64, null=True)),
                ("registered_at", models.DateTimeField(auto_now_add=True)),
                ("attended_at", models.DateTimeField(blank=True, null=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attendees",
                        to="events.event",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attendances",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "indexes": [
                    models.Index(fields=["user", "is_attended"], name="attendee_user_attended_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("event", "user"), name="attendee_unique_event_user"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Feedback",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("rating", models.PositiveSmallIntegerField()),
                ("comment", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="feedbacks",
                        to="events.event",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_feedbacks",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["event", "created_at"], name="feedback_event_created_idx"),
                ],
            },
        ),
    ]
