from datetime import date, timedelta

from users.models import User
from events.models import Event


def make_user(username, role=User.ROLE_STUDENT, **extra):
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="pass1234",
        role=role,
        name=extra.pop("name", username.title()),
        **extra,
    )


def days_from_today(days):
    return date.today() + timedelta(days=days)


def make_event(club, **fields):
    defaults = {
        "title": "Hack Night",
        "description": "Overnight build session",
        "event_type": Event.TYPE_TECH,
        "date": days_from_today(1),
        "time": "18:00",
        "venue": "Hall A",
        "status": Event.STATUS_APPROVED,
    }
    defaults.update(fields)
    return Event.objects.create(created_by=club, **defaults)
