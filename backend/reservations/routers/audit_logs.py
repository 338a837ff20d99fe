"""Audit log routes — manual entries and the enriched admin listing."""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from reservations.database import get_db
from reservations.deps import require_admin, get_booking_repository
from reservations.errors import InvalidInputError, UpstreamError
from reservations.models.audit_log import AuditLog, AuditAction
from reservations.models.booking import Booking, format_display_id
from reservations.models.user import User
from reservations.repositories.booking_repository import BookingRepository
from reservations.schemas.booking import AuditLogCreate, AuditLogOut, AuditLogEntry, AuditLogList
from reservations.services import booking_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=AuditLogOut, status_code=status.HTTP_201_CREATED)
def create_audit_log(
    payload: AuditLogCreate,
    admin: User = Depends(require_admin),
    repo: BookingRepository = Depends(get_booking_repository),
):
    """Record a manual administrator action (e.g. ``Reviewed``) against a booking."""
    try:
        action = AuditAction(payload.action)
    except ValueError:
        allowed = ", ".join(a.value for a in AuditAction)
        raise InvalidInputError(f"Invalid action. Must be one of: {allowed}")

    booking = booking_service.get_booking(repo, payload.booking_id)
    try:
        entry = repo.insert_audit_log(booking.id, admin.id, action, payload.notes)
    except SQLAlchemyError:
        repo.rollback()
        logger.exception("Audit log insert failed for booking %s", booking.display_id)
        raise UpstreamError("Failed to create audit log")
    logger.info("Audit log created: booking %s, action %s, admin %s", booking.display_id, action.value, admin.id)
    return entry


@router.get("", response_model=AuditLogList)
def list_audit_logs(db: Session = Depends(get_db), _: User = Depends(require_admin)):
    """Audit rows joined with booking, booker and admin details, newest first."""
    logs = db.query(AuditLog).order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).all()
    if not logs:
        return AuditLogList(items=[], count=0)

    booking_ids = {log.booking_id for log in logs}
    bookings = {b.id: b for b in db.query(Booking).filter(Booking.id.in_(booking_ids)).all()}
    user_ids = {log.admin_id for log in logs} | {b.user_id for b in bookings.values()}
    users = {u.id: u for u in db.query(User).filter(User.id.in_(user_ids)).all()}

    items = []
    for log in logs:
        booking = bookings.get(log.booking_id)
        admin = users.get(log.admin_id)
        booker = users.get(booking.user_id) if booking else None
        items.append(AuditLogEntry(
            id=log.id,
            booking_id=log.booking_id,
            display_id=format_display_id(log.booking_id),
            event_name=booking.event_name if booking else "N/A",
            booker_email=booker.email if booker else "Unknown",
            action=log.action.value,
            notes=log.notes,
            admin_name=admin.full_name if admin else "N/A",
            admin_email=admin.email if admin else "N/A",
            created_at=log.created_at,
        ))
    return AuditLogList(items=items, count=len(items))
