# events/recommendations.py

from .clock import start_of_today
from .models import Event


DEFAULT_LIMIT = 5


def attended_event_types(user):
    """Categories of approved events the user actually attended."""
    return set(
        Event.objects
        .filter(
            status=Event.STATUS_APPROVED,
            attendees__user=user,
            attendees__is_attended=True,
        )
        .values_list("event_type", flat=True)
        .distinct()
    )


# RULE-BASED: same categories as past attendance, else anything upcoming
def recommend_events(user, limit=DEFAULT_LIMIT, now=None):
    qs = (
        Event.objects
        .filter(
            status=Event.STATUS_APPROVED,
            date__gte=start_of_today(now).date(),
        )
        .exclude(attendees__user=user)
    )

    types = attended_event_types(user)
    if types:
        qs = qs.filter(event_type__in=types)

    # Natural store order, no ranking beyond the cap
    return list(qs.select_related("created_by").order_by("id")[:limit])
