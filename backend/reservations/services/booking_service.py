"""Booking lifecycle — conflict detection, status transitions, audit and notifications.

Responsibilities:
- Conflict detection: strict half-open overlap per venue. Creation runs it as
  an advisory check. Approval, and edits of an approved booking, go through
  ``BookingRepository.claim_slot``: per-venue lock, write, then re-check in
  the same transaction, so two approved bookings on one venue never overlap
  even when two administrators approve at once.
- Status state machine: Pending -> Approved | Rejected | Cancelled,
  Approved -> Cancelled. Unknown targets are rejected before any lookup.
- Audit log: one row per administrator action, written after the status
  commit. A failed audit write is rolled back alone and reported.
- Notifications: enqueued after commit, never affect the response.
"""
import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from reservations.config import settings
from reservations.errors import InvalidInputError, InvalidStatusError, NotFoundError, VenueConflictError
from reservations.models.audit_log import AuditAction
from reservations.models.booking import Booking, BookingStatus, ALLOWED_TRANSITIONS
from reservations.models.user import User
from reservations.repositories.booking_repository import BookingRepository
from reservations.services import notifier
from reservations.timeutil import stored_utc, to_utc

logger = logging.getLogger(__name__)

NOTIFY_STATUSES = frozenset({BookingStatus.approved, BookingStatus.rejected, BookingStatus.cancelled})

_SCHEDULE_FIELDS = ("venue", "start_datetime", "end_datetime")


def validate_range(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    """Return the range normalised to UTC; reject end <= start."""
    start_utc, end_utc = to_utc(start), to_utc(end)
    if end_utc <= start_utc:
        raise InvalidInputError("End time must be after start time")
    return start_utc, end_utc


def conflict_statuses() -> tuple[BookingStatus, ...]:
    if settings.CONFLICT_INCLUDES_PENDING:
        return (BookingStatus.approved, BookingStatus.pending)
    return (BookingStatus.approved,)


def check_conflict(
    repo: BookingRepository,
    venue: str,
    start_utc: datetime,
    end_utc: datetime,
    statuses: Optional[Iterable[BookingStatus]] = None,
    exclude_id: Optional[int] = None,
) -> None:
    """Raise ``VenueConflictError`` if ``venue`` is taken for any part of the range.

    Back-to-back ranges (one ending exactly when the other starts) do not
    conflict; bookings on other venues are never considered.

    The range must already be normalised and checked by ``validate_range``.
    """
    overlapping = repo.find_overlapping(
        venue, start_utc, end_utc, statuses or conflict_statuses(), exclude_id=exclude_id,
    )
    if overlapping:
        logger.info(
            "Venue conflict on '%s' for %s - %s with booking(s) %s",
            venue, start_utc, end_utc, [b.display_id for b in overlapping],
        )
        raise VenueConflictError()


def parse_status(value: Any) -> BookingStatus:
    try:
        return BookingStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in BookingStatus)
        raise InvalidStatusError(f"Invalid status. Must be one of: {allowed}")


def get_booking(repo: BookingRepository, booking_id: int) -> Booking:
    booking = repo.get(booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def record_audit(
    repo: BookingRepository,
    booking_id: int,
    admin_id: str,
    action: AuditAction,
    notes: Optional[str] = None,
) -> bool:
    """Append an audit row. Failure is logged and reported, never raised."""
    try:
        repo.insert_audit_log(booking_id=booking_id, admin_id=admin_id, action=action, notes=notes)
    except SQLAlchemyError:
        repo.rollback()
        logger.exception(
            "Audit log write failed for booking %s (action %s by %s)", booking_id, action.value, admin_id,
        )
        return False
    return True


def create_booking(
    repo: BookingRepository,
    user: User,
    fields: dict[str, Any],
    queue: notifier.NotificationQueue,
) -> Booking:
    """Validate, run the advisory conflict check, insert as Pending, notify the requester."""
    start_utc, end_utc = validate_range(fields["start_datetime"], fields["end_datetime"])
    check_conflict(repo, fields["venue"], start_utc, end_utc)

    booking = repo.insert_booking(
        user_id=user.id,
        venue=fields["venue"],
        event_name=fields["event_name"],
        purpose=fields["purpose"],
        attendees=fields["attendees"],
        start_datetime=start_utc,
        end_datetime=end_utc,
        additional_needs=fields.get("additional_needs"),
        status=BookingStatus.pending,
    )
    logger.info("Booking %s created by %s for '%s'", booking.display_id, user.id, booking.venue)

    queue.enqueue(notifier.booking_request_message(user, booking))
    return booking


def transition_status(
    repo: BookingRepository,
    booking_id: int,
    target: Any,
    admin: User,
    queue: notifier.NotificationQueue,
    notes: Optional[str] = None,
) -> tuple[Booking, bool]:
    """Move a booking to ``target``. Returns the booking and whether the audit row was written."""
    new_status = parse_status(target)
    booking = get_booking(repo, booking_id)
    old_status = booking.status

    if new_status not in ALLOWED_TRANSITIONS[old_status]:
        raise InvalidStatusError(f"Cannot change status from {old_status.value} to {new_status.value}")

    if new_status == BookingStatus.approved:
        if not repo.claim_slot(booking, {"status": new_status}):
            raise VenueConflictError()
    else:
        booking = repo.update_status(booking, new_status)
    logger.info("Booking %s: %s -> %s by admin %s", booking.display_id, old_status.value, new_status.value, admin.id)

    audit_logged = record_audit(repo, booking.id, admin.id, AuditAction(new_status.value), notes)
    _notify_status(queue, booking)
    return booking, audit_logged


def update_booking(
    repo: BookingRepository,
    booking_id: int,
    updates: dict[str, Any],
    admin: User,
    queue: notifier.NotificationQueue,
) -> tuple[Booking, bool]:
    """Administrator edit. A ``status`` key goes through the state machine rules."""
    updates = dict(updates)
    notes = updates.pop("notes", None)
    status_value = updates.pop("status", None)
    new_status = parse_status(status_value) if status_value is not None else None

    booking = get_booking(repo, booking_id)
    old_status = booking.status
    status_changed = new_status is not None and new_status != old_status
    if status_changed and new_status not in ALLOWED_TRANSITIONS[old_status]:
        raise InvalidStatusError(f"Cannot change status from {old_status.value} to {new_status.value}")

    start_utc = to_utc(updates["start_datetime"]) if updates.get("start_datetime") else stored_utc(booking.start_datetime)
    end_utc = to_utc(updates["end_datetime"]) if updates.get("end_datetime") else stored_utc(booking.end_datetime)
    if end_utc <= start_utc:
        raise InvalidInputError("End time must be after start time")
    if "start_datetime" in updates:
        updates["start_datetime"] = start_utc
    if "end_datetime" in updates:
        updates["end_datetime"] = end_utc

    effective_status = new_status if status_changed else old_status
    schedule_changed = any(field in updates for field in _SCHEDULE_FIELDS)
    if status_changed:
        updates["status"] = new_status
    if schedule_changed:
        # A moved booking is due a fresh reminder.
        updates["reminder_sent_at"] = None

    if effective_status == BookingStatus.approved and (schedule_changed or status_changed):
        if not repo.claim_slot(booking, updates):
            raise VenueConflictError()
    else:
        booking = repo.update_fields(booking, updates)
    logger.info("Booking %s updated by admin %s (%s)", booking.display_id, admin.id, ", ".join(sorted(updates)))

    action = AuditAction(new_status.value) if status_changed else AuditAction.updated
    audit_logged = record_audit(repo, booking.id, admin.id, action, notes)
    if status_changed:
        _notify_status(queue, booking)
    return booking, audit_logged


def delete_booking(repo: BookingRepository, booking_id: int, admin: User) -> bool:
    booking = get_booking(repo, booking_id)
    display_id = booking.display_id
    repo.delete(booking)
    logger.info("Booking %s deleted by admin %s", display_id, admin.id)
    return record_audit(repo, booking_id, admin.id, AuditAction.deleted)


def _notify_status(queue: notifier.NotificationQueue, booking: Booking) -> None:
    if booking.status not in NOTIFY_STATUSES:
        return
    owner = booking.user
    if owner is None or not owner.email:
        logger.warning("Booking %s has no owner email; skipping notification", booking.display_id)
        return
    queue.enqueue(notifier.booking_status_message(owner, booking))
