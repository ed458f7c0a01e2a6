from datetime import date, timedelta

from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model

from events.models import Event, Attendee

User = get_user_model()

DEMO_PASSWORD = "password"


class Command(BaseCommand):
    help = "Seeds the database with demo accounts, events and registrations"

    def ensure_user(self, username, role, name):
        user, _ = User.objects.get_or_create(
            username=username,
            defaults={"email": f"{username}@example.com", "role": role, "name": name},
        )
        if not user.check_password(DEMO_PASSWORD):
            user.set_password(DEMO_PASSWORD)
            user.save()
        return user

    def handle(self, *args, **options):
        self.stdout.write("Seeding data...")

        # 1. Ensure Users
        admin = self.ensure_user("admin", User.ROLE_ADMIN, "Campus Admin")
        club = self.ensure_user("codeclub", User.ROLE_CLUB, "Code Club")
        alice = self.ensure_user("alice", User.ROLE_STUDENT, "Alice")
        bob = self.ensure_user("bob", User.ROLE_STUDENT, "Bob")

        # 2. Create Events
        today = date.today()
        events_data = [
            {
                "title": "AI Revolution Summit",
                "description": "A deep dive into large language models with talks from industry speakers.",
                "event_type": Event.TYPE_SEMINAR,
                "date": today + timedelta(days=5),
                "time": "10:00",
                "venue": "Innovation Hub, Hall A",
                "registration_limit": 100,
                "status": Event.STATUS_APPROVED,
            },
            {
                "title": "Hackathon: Build for Good",
                "description": "24-hour coding marathon to solve campus problems.",
                "event_type": Event.TYPE_TECH,
                "date": today + timedelta(days=12),
                "time": "09:00",
                "venue": "Online",
                "event_mode": Event.MODE_ONLINE,
                "meeting_link": "https://meet.example.com/hackathon",
                "attendance_question": "What is the hackathon theme?",
                "attendance_options": ["Climate", "Health", "Education"],
                "attendance_answer": "Health",
                "status": Event.STATUS_APPROVED,
            },
            {
                "title": "Tech Mixer Night",
                "description": "Networking evening for developers and designers.",
                "event_type": Event.TYPE_TECH,
                "date": today - timedelta(days=3),
                "time": "18:30",
                "venue": "Student Centre",
                "status": Event.STATUS_APPROVED,
            },
            {
                "title": "Spring Cultural Fest",
                "description": "Music, dance and food stalls from every department.",
                "event_type": Event.TYPE_CULTURAL,
                "date": today + timedelta(days=20),
                "time": "16:00",
                "venue": "Main Lawn",
                "registration_fee": 50,
                "status": Event.STATUS_PENDING,
            },
        ]

        for data in events_data:
            title = data.pop("title")
            evt, created = Event.objects.get_or_create(
                title=title,
                defaults={"created_by": club, **data},
            )
            if created:
                self.stdout.write(f"Created Event: {evt.title} ({evt.status})")

        # 3. Registrations + attendance for the past event
        mixer = Event.objects.get(title="Tech Mixer Night")
        for u in [alice, bob]:
            Attendee.objects.get_or_create(
                event=mixer,
                user=u,
                defaults={"registered_college": "City College", "is_attended": u == alice},
            )

        self.stdout.write(self.style.SUCCESS(
            f"Seeding complete. Log in as {admin.email}, {club.email} or {alice.email} "
            f"with password '{DEMO_PASSWORD}'."
        ))
