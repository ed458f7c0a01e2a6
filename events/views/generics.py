from django.core.exceptions import ValidationError as DjangoValidationError

from core.exceptions import NotFound
from events.models import Event


def get_event_or_404(event_id):
    try:
        return Event.objects.select_related("created_by").get(pk=event_id)
    except (Event.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFound("Event not found.")


def user_is_system_admin(user) -> bool:
    """
    Global admin flag based on user.role (superusers included).
    """
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return getattr(user, "is_admin", False)


def user_can_edit_event(user, event) -> bool:
    """
    Who can see the roster, print the check-in QR or read the challenge answer?
    - the club that created the event
    - global admin
    """
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return user_is_system_admin(user) or event.created_by_id == user.id


def parse_pagination(request, default_limit=50, max_limit=100):
    """
    limit/offset from query params, clamped. Raises ValueError on junk input.
    """
    limit = int(request.query_params.get("limit", default_limit))
    offset = int(request.query_params.get("offset", 0))
    return max(1, min(limit, max_limit)), max(0, offset)
