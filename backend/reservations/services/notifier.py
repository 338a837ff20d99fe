"""Best-effort transactional email.

Notifications are built after the authoritative write has committed and are
handed to FastAPI ``BackgroundTasks``; ``deliver`` is the task body. A failed
send is logged and never reaches the caller's response.
"""
import logging
from dataclasses import dataclass

import resend
from fastapi import BackgroundTasks, Depends

from reservations.config import settings
from reservations.services import email_templates

logger = logging.getLogger(__name__)


@dataclass
class EmailMessage:
    to: str
    subject: str
    html: str
    kind: str


class Notifier:
    """Interface for email delivery."""

    def send(self, message: EmailMessage) -> None:
        raise NotImplementedError


class ResendNotifier(Notifier):
    """Sends through the Resend API. Without an API key sending is disabled."""

    def __init__(self, api_key: str, sender: str):
        self.api_key = api_key
        self.sender = sender

    def send(self, message: EmailMessage) -> None:
        if not self.api_key:
            logger.info("Email disabled (no RESEND_API_KEY); skipping '%s' to %s", message.subject, message.to)
            return
        resend.api_key = self.api_key
        resend.Emails.send({
            "from": self.sender,
            "to": [message.to],
            "subject": message.subject,
            "html": message.html,
        })


def get_notifier() -> Notifier:
    """FastAPI dependency — overridden in tests with a recording double."""
    return ResendNotifier(settings.RESEND_API_KEY, settings.EMAIL_FROM)


class NotificationQueue:
    """Enqueues sends to run after the response has been produced."""

    def __init__(self, background_tasks: BackgroundTasks, notifier: Notifier):
        self.background_tasks = background_tasks
        self.notifier = notifier

    def enqueue(self, message: EmailMessage) -> None:
        self.background_tasks.add_task(deliver, self.notifier, message)


def get_notification_queue(
    background_tasks: BackgroundTasks,
    notifier: Notifier = Depends(get_notifier),
) -> NotificationQueue:
    return NotificationQueue(background_tasks, notifier)


def deliver(notifier: Notifier, message: EmailMessage) -> bool:
    try:
        notifier.send(message)
    except Exception:
        logger.exception("Email '%s' to %s failed (non-blocking)", message.kind, message.to)
        return False
    logger.info("Email '%s' sent to %s", message.kind, message.to)
    return True


# Message builders -----------------------------------------------------------

def booking_request_message(user, booking) -> EmailMessage:
    return EmailMessage(
        to=user.email,
        subject="Booking Request Submitted",
        html=email_templates.booking_request(user.full_name, booking),
        kind="booking-request",
    )


def booking_status_message(user, booking) -> EmailMessage:
    status = booking.status.value
    return EmailMessage(
        to=user.email,
        subject=f"Booking {status}",
        html=email_templates.booking_status(user.full_name, booking, status),
        kind=f"booking-{status.lower()}",
    )


def booking_reminder_message(user, booking) -> EmailMessage:
    return EmailMessage(
        to=user.email,
        subject=f"Booking Reminder: {settings.REMINDER_LEAD_HOURS} Hours Left",
        html=email_templates.booking_reminder(user.full_name, booking),
        kind="booking-reminder",
    )


def change_request_message(user, change_request) -> EmailMessage:
    status = change_request.status.value
    return EmailMessage(
        to=user.email,
        subject=f"Change Request {status}",
        html=email_templates.change_request_status(
            user.full_name, change_request.event_name, status, change_request.admin_notes,
        ),
        kind=f"change-request-{status.lower()}",
    )
