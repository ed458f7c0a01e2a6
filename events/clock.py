# events/clock.py
"""
Centralized time handling for events.

Events store a calendar `date` and an optional wall-clock `time` ("HH:MM").
Every timing decision (registration window, certificate availability,
recommendations) goes through `event_start()` so they all agree on the
same instant.
"""
from datetime import datetime, time as dt_time
from typing import Optional
from django.utils import timezone


def now() -> datetime:
    """
    Get current datetime.

    This is the single source of truth for "now" in the events app.
    """
    return timezone.now()


def start_of_today(at: Optional[datetime] = None) -> datetime:
    """Midnight of the current day."""
    current = at or now()
    return current.replace(hour=0, minute=0, second=0, microsecond=0)


def parse_hhmm(value: Optional[str]) -> Optional[dt_time]:
    """
    Parse a "HH:MM" string.

    Returns None for blank input. Raises ValueError for malformed input.
    """
    if not value:
        return None
    hours, _, minutes = value.strip().partition(":")
    return dt_time(int(hours), int(minutes or 0))


def event_start(event) -> datetime:
    """
    Combine event.date with event.time into a single comparable instant.
    A missing time means start of day.
    """
    start = datetime.combine(event.date, dt_time.min)
    parsed = parse_hhmm(getattr(event, "time", None))
    if parsed is not None:
        start = start.replace(hour=parsed.hour, minute=parsed.minute)
    if timezone.is_aware(now()):
        start = timezone.make_aware(start)
    return start


def is_event_upcoming(event, at: Optional[datetime] = None) -> bool:
    """Event start instant is now or later."""
    return event_start(event) >= (at or now())


def is_event_past(event, at: Optional[datetime] = None) -> bool:
    """Event start instant has been reached."""
    return event_start(event) <= (at or now())


def format_event_date(event) -> str:
    """Human-readable date: "Jan 01, 2026"."""
    return event.date.strftime("%b %d, %Y")


def format_event_time(event) -> str:
    """Human-readable time: "02:30 PM", or "TBA" when not set."""
    try:
        parsed = parse_hhmm(event.time)
    except ValueError:
        return event.time
    if parsed is None:
        return "TBA"
    return parsed.strftime("%I:%M %p")
