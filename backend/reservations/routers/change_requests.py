"""ChangeRequest API routes — user-submitted requests reviewed by an administrator.

A change request never edits its booking; an approved request is applied by
the administrator through the booking edit endpoint.
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from reservations.database import get_db
from reservations.deps import get_current_user, require_admin
from reservations.errors import ForbiddenError, InvalidStatusError, NotFoundError
from reservations.models.booking import Booking
from reservations.models.change_request import ChangeRequest, RequestStatus
from reservations.models.user import User
from reservations.schemas.change_request import ChangeRequestCreate, ChangeRequestReview, ChangeRequestOut
from reservations.services import notifier
from reservations.services.notifier import NotificationQueue, get_notification_queue
from reservations.timeutil import utcnow

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_change_request(db: Session, request_id: int) -> ChangeRequest:
    cr = db.query(ChangeRequest).filter(ChangeRequest.id == request_id).first()
    if not cr:
        raise NotFoundError("Change request not found")
    return cr


@router.post("", status_code=status.HTTP_201_CREATED)
def create_change_request(
    payload: ChangeRequestCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Submit a change request against one of the caller's bookings."""
    booking = db.query(Booking).filter(Booking.id == payload.booking_id).first()
    if not booking:
        raise NotFoundError("Booking not found")
    if booking.user_id != user.id:
        raise ForbiddenError("You can only request changes to your own bookings")

    cr = ChangeRequest(
        booking_id=booking.id,
        user_id=user.id,
        event_name=booking.event_name,
        description=payload.description,
        status=RequestStatus.pending,
    )
    db.add(cr)
    db.commit()
    db.refresh(cr)
    logger.info("ChangeRequest %s created for booking %s by user %s", cr.id, booking.display_id, user.id)
    return {
        "message": "Change request submitted successfully",
        "change_request": ChangeRequestOut.model_validate(cr).model_dump(mode="json"),
    }


@router.get("/my", response_model=list[ChangeRequestOut])
def my_change_requests(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return (
        db.query(ChangeRequest)
        .filter(ChangeRequest.user_id == user.id)
        .order_by(ChangeRequest.created_at.desc(), ChangeRequest.id.desc())
        .all()
    )


@router.get("", response_model=list[ChangeRequestOut])
def list_change_requests(
    booking_id: int | None = None,
    status_filter: str | None = None,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """List change requests, optionally filtered by booking or status."""
    query = db.query(ChangeRequest)
    if booking_id is not None:
        query = query.filter(ChangeRequest.booking_id == booking_id)
    if status_filter:
        try:
            query = query.filter(ChangeRequest.status == RequestStatus(status_filter))
        except ValueError:
            raise InvalidStatusError(f"Invalid status filter: {status_filter}")
    return query.order_by(ChangeRequest.created_at.desc(), ChangeRequest.id.desc()).all()


@router.patch("/{request_id}")
def review_change_request(
    request_id: int,
    payload: ChangeRequestReview,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
    queue: NotificationQueue = Depends(get_notification_queue),
):
    """Approve or reject a pending change request and notify the requester."""
    try:
        new_status = RequestStatus(payload.status)
    except ValueError:
        raise InvalidStatusError("Invalid status. Must be 'Approved' or 'Rejected'")
    if new_status == RequestStatus.pending:
        raise InvalidStatusError("Invalid status. Must be 'Approved' or 'Rejected'")

    cr = _get_change_request(db, request_id)
    if cr.status != RequestStatus.pending:
        raise InvalidStatusError(f"Change request is already {cr.status.value}")

    cr.status = new_status
    cr.admin_notes = payload.admin_notes
    cr.updated_at = utcnow()
    db.commit()
    db.refresh(cr)
    logger.info("ChangeRequest %s %s by admin %s", request_id, new_status.value.lower(), admin.id)

    requester = db.query(User).filter(User.id == cr.user_id).first()
    if requester and requester.email:
        queue.enqueue(notifier.change_request_message(requester, cr))
    else:
        logger.warning("ChangeRequest %s has no requester email; skipping notification", request_id)

    return {
        "message": "Change request updated successfully",
        "change_request": ChangeRequestOut.model_validate(cr).model_dump(mode="json"),
    }


@router.delete("/{request_id}")
def delete_change_request(request_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    cr = _get_change_request(db, request_id)
    db.delete(cr)
    db.commit()
    logger.info("ChangeRequest %s deleted by admin %s", request_id, admin.id)
    return {"message": "Change request deleted successfully"}
