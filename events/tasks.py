# events/tasks.py
import logging

from celery import shared_task
from django.db import transaction

from .models import Attendee
from .emails import send_registration_email, send_password_reset_email

logger = logging.getLogger("cos.events")


@shared_task
def send_registration_email_task(attendee_id: int):
    """
    Async wrapper for sending registration confirmation email.
    """
    try:
        attendee = Attendee.objects.select_related("event", "user").get(id=attendee_id)
    except Attendee.DoesNotExist:
        return "attendee_not_found"

    try:
        send_registration_email(attendee)
    except Exception as e:
        # Avoid crashing worker if email fails
        logger.warning(f"Registration email failed for attendee {attendee_id}: {e}")
        return "failed"
    return "sent"


@shared_task
def send_password_reset_email_task(email: str, reset_url: str):
    """
    Async wrapper for sending the password reset link.
    """
    try:
        send_password_reset_email(email, reset_url)
    except Exception as e:
        logger.warning(f"Password reset email failed for {email}: {e}")
        return "failed"
    return "sent"


def _dispatch(task, fallback, *args):
    try:
        task.delay(*args)
    except Exception as e:
        # Broker down: send inline, never surface to the caller
        logger.warning(f"Could not queue {task.name}, sending inline: {e}")
        try:
            fallback(*args)
        except Exception as inner:
            logger.warning(f"Inline send for {task.name} failed: {inner}")


def notify_registration(attendee):
    """
    Best-effort confirmation, sent only once the roster append is committed.
    """
    transaction.on_commit(
        lambda: _dispatch(send_registration_email_task, _send_registration_by_id, attendee.id)
    )


def notify_password_reset(email, reset_url):
    transaction.on_commit(
        lambda: _dispatch(send_password_reset_email_task, send_password_reset_email, email, reset_url)
    )


def _send_registration_by_id(attendee_id):
    attendee = Attendee.objects.select_related("event", "user").get(id=attendee_id)
    send_registration_email(attendee)
