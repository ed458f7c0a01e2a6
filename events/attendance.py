# events/attendance.py
"""
Attendance verification.

Two entry points, one invariant: an Attendee's is_attended flips
False -> True, only for a matching roster row, only on an approved event.

* self_check_in: public, keyed by the event's qr_code_id, matched by email,
  optionally guarded by the event's challenge question. Re-marking is
  rejected with Conflict.
* mark_attendance: event owner (club) or admin, keyed by student id.
  Re-marking is an idempotent overwrite.
"""
import logging

from core.exceptions import Conflict, InvalidState, NotFound, PermissionDenied, Unauthorized
from .clock import now as clock_now
from .lifecycle import is_open_for_registration
from .models import Attendee, Event

logger = logging.getLogger("cos.events")

ALREADY_MARKED = "Attendance already marked."


def resolve_checkin_event(qr_code_id) -> Event:
    """
    Public lookup by check-in token; the event must be approved.
    """
    event = Event.objects.filter(qr_code_id=qr_code_id).first()
    if event is None:
        raise NotFound("Event not found or not active.")
    if not is_open_for_registration(event):
        raise InvalidState("Event not found or not active.")
    return event


def answers_match(expected: str, given) -> bool:
    if given is None or not str(given).strip():
        return False
    return expected.strip().lower() == str(given).strip().lower()


def self_check_in(qr_code_id, email, name=None, answer=None) -> Attendee:
    """
    Mark the caller present. `name` is accepted but only `email` is matched.
    No date check: this runs at the venue, whenever that is.
    """
    event = resolve_checkin_event(qr_code_id)

    attendee = (
        Attendee.objects
        .select_related("user")
        .filter(event=event, user__email__iexact=(email or "").strip())
        .first()
    )
    if attendee is None:
        raise NotFound("You are not registered for this event.")

    if attendee.is_attended:
        raise Conflict(ALREADY_MARKED)

    if event.has_attendance_question and not answers_match(event.attendance_answer, answer):
        logger.info(f"Check-in challenge failed: event={event.id}, attendee={attendee.id}")
        raise Unauthorized("Incorrect answer to the verification question.")

    marked_at = clock_now()
    # Conditional flip: a concurrent check-in that already won leaves 0 rows
    flipped = (
        Attendee.objects
        .filter(pk=attendee.pk, is_attended=False)
        .update(is_attended=True, attended_at=marked_at)
    )
    if not flipped:
        raise Conflict(ALREADY_MARKED)

    attendee.is_attended = True
    attendee.attended_at = marked_at
    logger.info(f"Self check-in: event={event.id}, attendee={attendee.id}")
    return attendee


def can_operate_attendance(user, event) -> bool:
    """Admin, or the club that created the event."""
    if getattr(user, "is_admin", False):
        return True
    return getattr(user, "is_club", False) and event.created_by_id == user.id


def mark_attendance(event_id, student_id, actor) -> Attendee:
    """
    Operator-driven check-in. Re-marking an attended record is allowed.
    """
    if not (getattr(actor, "is_admin", False) or getattr(actor, "is_club", False)):
        raise PermissionDenied("Access denied.")

    try:
        event = Event.objects.get(pk=event_id)
    except Event.DoesNotExist:
        raise NotFound("Event not found.")

    if not can_operate_attendance(actor, event):
        logger.warning(f"Manual attendance refused: event={event.id}, actor={actor.id}")
        raise PermissionDenied("You can only manage your own events.")

    if not is_open_for_registration(event):
        raise InvalidState("Attendance can only be marked for approved events.")

    attendee = Attendee.objects.filter(event=event, user_id=student_id).first()
    if attendee is None:
        raise InvalidState("Student not registered.")

    marked_at = attendee.attended_at or clock_now()
    Attendee.objects.filter(pk=attendee.pk).update(is_attended=True, attended_at=marked_at)
    attendee.is_attended = True
    attendee.attended_at = marked_at

    logger.info(f"Manual attendance: event={event.id}, student={student_id}, actor={actor.id}")
    return attendee
