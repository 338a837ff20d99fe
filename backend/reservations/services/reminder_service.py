"""Reminder emails for approved bookings starting in the lead window."""
import logging
from datetime import datetime, timedelta
from typing import Optional

from reservations.config import settings
from reservations.repositories.booking_repository import BookingRepository
from reservations.services import notifier
from reservations.timeutil import utcnow

logger = logging.getLogger(__name__)


def reminder_window(now: datetime) -> tuple[datetime, datetime]:
    """The whole hour that contains ``now + lead``."""
    target = now + timedelta(hours=settings.REMINDER_LEAD_HOURS)
    start = target.replace(minute=0, second=0, microsecond=0)
    return start, start + timedelta(hours=1)


def send_due_reminders(
    repo: BookingRepository,
    mailer: notifier.Notifier,
    now: Optional[datetime] = None,
) -> int:
    """Send one reminder per due booking and stamp it; returns how many were sent.

    Bookings already stamped are skipped, so running twice in the same hour
    sends nothing the second time. A failed send leaves the stamp empty and
    the booking is retried on the next run.
    """
    now = now or utcnow()
    window_start, window_end = reminder_window(now)
    due = repo.due_for_reminder(window_start, window_end)
    sent = 0
    for booking in due:
        owner = booking.user
        if owner is None or not owner.email:
            logger.warning("Booking %s has no owner email; no reminder", booking.display_id)
            continue
        if notifier.deliver(mailer, notifier.booking_reminder_message(owner, booking)):
            repo.update_fields(booking, {"reminder_sent_at": now})
            sent += 1
    logger.info("Reminder run for %s - %s: %d due, %d sent", window_start, window_end, len(due), sent)
    return sent
