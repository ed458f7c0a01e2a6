# events/emails.py
from django.core.mail import send_mail
from django.conf import settings

from .clock import format_event_date, format_event_time


def build_frontend_url(path):
    base = getattr(settings, "FRONTEND_URL", "").rstrip("/")
    return f"{base}/{path.lstrip('/')}"


def build_checkin_url(event):
    """Public self check-in page for an event, keyed by its QR token."""
    return build_frontend_url(f"qr-attendance.html?event={event.qr_code_id}")


def send_registration_email(attendee):
    """
    Send a registration confirmation to the attendee.
    """
    user = attendee.user
    event = attendee.event

    if not getattr(user, "email", None):
        # No email set, nothing to send
        return

    subject = f"Registration Confirmed for: {event.title}"

    lines = [
        f"Hi {user.display_name},",
        "",
        "You have successfully registered for the event:",
        f"  {event.title}",
        f"  Venue: {event.venue}",
        f"  Date: {format_event_date(event)}, Time: {format_event_time(event)}",
    ]
    if event.event_mode == event.MODE_ONLINE and event.meeting_link:
        lines.append(f"  Meeting link: {event.meeting_link}")
    if attendee.payment_id:
        lines.append(f"  Payment reference: {attendee.payment_id}")
    lines += [
        "",
        "Thank you,",
        "EventSphere",
    ]

    send_mail(
        subject=subject,
        message="\n".join(lines),
        from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
        recipient_list=[user.email],
        fail_silently=False,
    )


def send_password_reset_email(email, reset_url):
    """
    Send the password reset link.
    """
    message = (
        f"Hi,\n\n"
        f"We received a request to reset your EventSphere password.\n"
        f"Use this link to choose a new one:\n"
        f"{reset_url}\n\n"
        f"If this wasn't you, you can ignore this email.\n\n"
        f"Best,\n"
        f"EventSphere Support"
    )

    send_mail(
        subject="Your Password Reset Request for EventSphere",
        message=message,
        from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
        recipient_list=[email],
        fail_silently=False,
    )
