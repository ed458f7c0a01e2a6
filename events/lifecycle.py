# events/lifecycle.py
"""
Event moderation lifecycle.

pending ──► approved
   └──────► rejected

Only admins move events between statuses. There is no transition guard:
an admin may assign any of the three statuses from any status, including
re-approving a rejected event.
"""
import logging

from rest_framework.exceptions import ValidationError

from core.exceptions import NotFound, PermissionDenied
from .models import Event

logger = logging.getLogger("cos.events")


def is_open_for_registration(event: Event) -> bool:
    """The one predicate every stage above moderation relies on."""
    return event.status == Event.STATUS_APPROVED


def set_status(event_id, new_status: str, actor) -> Event:
    """
    Assign `new_status` to the event.

    Raises:
        PermissionDenied: actor is not an admin
        ValidationError: unknown status value
        NotFound: event id does not resolve
    """
    if not getattr(actor, "is_admin", False):
        logger.warning(
            f"Status change refused: event={event_id}, to={new_status}, "
            f"actor={getattr(actor, 'id', 'unknown')}"
        )
        raise PermissionDenied("Forbidden: Only admin can approve/reject events.")

    if new_status not in dict(Event.STATUS_CHOICES):
        raise ValidationError({"status": [f"Invalid status: {new_status}"]})

    try:
        event = Event.objects.get(pk=event_id)
    except Event.DoesNotExist:
        raise NotFound("Event not found.")

    old_status = event.status
    event.status = new_status
    event.save(update_fields=["status", "updated_at"])

    logger.info(
        f"Event state transition: event={event.id}, "
        f"from={old_status}, to={new_status}, actor={actor.id}"
    )
    return event
