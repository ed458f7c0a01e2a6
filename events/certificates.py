# events/certificates.py
"""
Certificate eligibility gate.

Authorization, then checks in order (first failure wins):

1. event and student exist                 -> NotFound
2. event start instant has been reached    -> InvalidState
3. student attended                        -> InvalidState
4. a template was uploaded                 -> InvalidState

Only then is the rendering collaborator called. There is no end time on
events, so "after the event" means "after it started".
"""
import logging
import re
from dataclasses import dataclass

from django.contrib.auth import get_user_model

from core.exceptions import InvalidState, NotFound, PermissionDenied, RenderFailed
from .certificate_generator import generate_certificate
from .clock import format_event_date, is_event_past
from .models import Attendee, Event

logger = logging.getLogger("cos.events")

User = get_user_model()

PDF_CONTENT_TYPE = "application/pdf"


@dataclass
class CertificateDocument:
    content: bytes
    filename: str
    content_type: str = PDF_CONTENT_TYPE


def certificate_filename(event_title: str) -> str:
    slug = re.sub(r"\s", "_", event_title)
    return f"Certificate_{slug}.pdf"


def issue_certificate(event_id, student_id, requester, now=None) -> CertificateDocument:
    if str(requester.id) != str(student_id) and not getattr(requester, "is_admin", False):
        raise PermissionDenied("Access Denied.")

    event = Event.objects.filter(pk=event_id).first()
    student = User.objects.filter(pk=student_id).first()
    if event is None or student is None:
        raise NotFound("Event or student not found.")

    if not is_event_past(event, now):
        raise InvalidState("Certificate not available until after the event.")

    attendee = Attendee.objects.filter(event=event, user=student).first()
    if attendee is None or not attendee.is_attended:
        raise InvalidState("Certificate not available. Attendance was not marked.")

    if not event.certificate_template_url:
        raise InvalidState(
            "A certificate template has not been uploaded for this event by the club."
        )

    try:
        content = generate_certificate(
            student.display_name,
            event.title,
            format_event_date(event),
            event.certificate_template_url,
        )
    except Exception as e:
        logger.error(f"Certificate generation failed: event={event.id}, student={student.id}: {e}")
        raise RenderFailed()

    logger.info(f"Certificate rendered: event={event.id}, student={student.id}")
    return CertificateDocument(content=content, filename=certificate_filename(event.title))
