# events/admission.py
"""
Registration admission control.

Checks run in a fixed order and the first failure wins:

1. event exists                      -> NotFound
2. event approved                    -> InvalidState
3. event start >= now                -> InvalidState
4. user not already on the roster    -> Conflict
5. roster below registration_limit   -> Conflict

Checks 4 and 5 are evaluated against a snapshot of the event. The append
only commits if the event's roster_version is still the one the snapshot
saw, so two racing requests can never both pass the capacity/duplicate
checks: the loser's conditional UPDATE matches zero rows.
"""
import logging
import secrets

from django.db import IntegrityError, transaction
from django.db.models import F

from core.exceptions import Conflict, InvalidState, NotFound, RosterContention
from .clock import is_event_upcoming
from .lifecycle import is_open_for_registration
from .models import Attendee, Event
from .tasks import notify_registration

logger = logging.getLogger("cos.events")

ALREADY_REGISTERED = "You are already registered."
EVENT_FULL = "Sorry, this event is full."


def load_event(event_id) -> Event:
    try:
        return Event.objects.get(pk=event_id)
    except (Event.DoesNotExist, ValueError):
        raise NotFound("Event not found.")


def mock_payment_reference() -> str:
    """Opaque settlement reference; no real payment happens."""
    return f"mock_payment_{secrets.token_hex(8)}"


def check_admission(event: Event, user, at=None):
    """
    Run checks 2-5 against `event` as loaded. Raises on the first failure.
    """
    if not is_open_for_registration(event):
        raise InvalidState("Cannot register for this event, it is not approved.")

    if not is_event_upcoming(event, at):
        raise InvalidState("This event has already passed and registration is closed.")

    roster = Attendee.objects.filter(event_id=event.pk)

    if roster.filter(user_id=user.pk).exists():
        raise Conflict(ALREADY_REGISTERED)

    if event.registration_limit > 0 and roster.count() >= event.registration_limit:
        raise Conflict(EVENT_FULL)


def register(event_id, user, college_name: str = "", now=None) -> Attendee:
    """
    Admit `user` onto the event's roster.

    Returns the new Attendee. The confirmation email is queued after commit
    and never affects the outcome.
    """
    event = load_event(event_id)
    check_admission(event, user, at=now)

    payment_id = None
    if event.is_paid:
        payment_id = mock_payment_reference()
        logger.info(f"Simulating payment of {event.registration_fee} for event {event.id}")

    try:
        with transaction.atomic():
            claimed = (
                Event.objects
                .filter(pk=event.pk, roster_version=event.roster_version)
                .update(roster_version=F("roster_version") + 1)
            )
            if not claimed:
                logger.warning(
                    f"Registration contention: event={event.id}, user={user.pk}, "
                    f"stale_version={event.roster_version}"
                )
                raise RosterContention()

            attendee = Attendee.objects.create(
                event=event,
                user=user,
                registered_college=(college_name or "").strip(),
                payment_id=payment_id,
            )
    except IntegrityError:
        # Unique (event, user) constraint caught a duplicate the snapshot missed
        raise Conflict(ALREADY_REGISTERED)

    logger.info(f"Registration created: user={user.pk}, event={event.id}, attendee={attendee.id}")

    notify_registration(attendee)
    return attendee
