"""Booking API routes — delegates to booking_service for invariant enforcement."""
import logging

from fastapi import APIRouter, Depends, status

from reservations.deps import get_current_user, require_admin, get_booking_repository
from reservations.errors import ForbiddenError
from reservations.models.booking import BookingStatus
from reservations.models.user import User
from reservations.repositories.booking_repository import BookingRepository
from reservations.schemas.booking import (
    BookingCreate,
    BookingUpdate,
    BookingOut,
    BookingEnvelope,
    BookingList,
    BookingStatusResult,
    StatusUpdate,
)
from reservations.services import booking_service
from reservations.services.notifier import NotificationQueue, get_notification_queue
from reservations.timeutil import utcnow

logger = logging.getLogger(__name__)
router = APIRouter()

# Fields an edit may not null out.
_REQUIRED_FIELDS = ("event_name", "purpose", "attendees", "venue", "start_datetime", "end_datetime", "status")


def _listing(bookings) -> BookingList:
    items = [BookingOut.model_validate(b) for b in bookings]
    return BookingList(items=items, count=len(items))


@router.post("", response_model=BookingEnvelope, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    user: User = Depends(get_current_user),
    repo: BookingRepository = Depends(get_booking_repository),
    queue: NotificationQueue = Depends(get_notification_queue),
):
    """Create a Pending booking; 409 when the venue is already taken."""
    booking = booking_service.create_booking(repo, user, payload.model_dump(), queue)
    return BookingEnvelope(booking=BookingOut.model_validate(booking))


@router.get("/my", response_model=list[BookingOut])
def my_bookings(
    user: User = Depends(get_current_user),
    repo: BookingRepository = Depends(get_booking_repository),
):
    """The caller's own bookings ordered by start time."""
    return repo.list_by_user(user.id)


@router.get("", response_model=list[BookingOut])
def list_bookings(
    _: User = Depends(require_admin),
    repo: BookingRepository = Depends(get_booking_repository),
):
    """All live (Pending and Approved) bookings, latest first."""
    return repo.list_by_status((BookingStatus.pending, BookingStatus.approved), descending=True)


@router.get("/pending/list", response_model=BookingList)
def pending_bookings(
    _: User = Depends(require_admin),
    repo: BookingRepository = Depends(get_booking_repository),
):
    return _listing(repo.list_by_status((BookingStatus.pending,)))


@router.get("/upcoming/list", response_model=BookingList)
def upcoming_bookings(
    _: User = Depends(require_admin),
    repo: BookingRepository = Depends(get_booking_repository),
):
    """Approved and Pending bookings that have not started yet (calendar view)."""
    return _listing(repo.list_by_status(
        (BookingStatus.approved, BookingStatus.pending), starting_after=utcnow(),
    ))


@router.get("/approved/list", response_model=BookingList)
def decided_bookings(
    _: User = Depends(require_admin),
    repo: BookingRepository = Depends(get_booking_repository),
):
    """Approved and Rejected bookings (manage-events view)."""
    return _listing(repo.list_by_status((BookingStatus.approved, BookingStatus.rejected)))


@router.get("/{booking_id}", response_model=BookingOut)
def get_booking(
    booking_id: int,
    user: User = Depends(get_current_user),
    repo: BookingRepository = Depends(get_booking_repository),
):
    booking = booking_service.get_booking(repo, booking_id)
    if booking.user_id != user.id and not user.is_admin:
        raise ForbiddenError("Not your booking")
    return booking


@router.patch("/{booking_id}/status", response_model=BookingStatusResult)
def update_booking_status(
    booking_id: int,
    payload: StatusUpdate,
    admin: User = Depends(require_admin),
    repo: BookingRepository = Depends(get_booking_repository),
    queue: NotificationQueue = Depends(get_notification_queue),
):
    """Approve / reject / cancel. Writes an audit row and notifies the owner."""
    booking, audit_logged = booking_service.transition_status(
        repo, booking_id, payload.status, admin, queue, notes=payload.notes,
    )
    return BookingStatusResult(booking=BookingOut.model_validate(booking), audit_logged=audit_logged)


@router.patch("/{booking_id}", response_model=BookingStatusResult)
def update_booking(
    booking_id: int,
    payload: BookingUpdate,
    admin: User = Depends(require_admin),
    repo: BookingRepository = Depends(get_booking_repository),
    queue: NotificationQueue = Depends(get_notification_queue),
):
    """Administrator edit of booking details."""
    updates = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if not (value is None and field in _REQUIRED_FIELDS)
    }
    booking, audit_logged = booking_service.update_booking(repo, booking_id, updates, admin, queue)
    return BookingStatusResult(booking=BookingOut.model_validate(booking), audit_logged=audit_logged)


@router.delete("/{booking_id}")
def delete_booking(
    booking_id: int,
    admin: User = Depends(require_admin),
    repo: BookingRepository = Depends(get_booking_repository),
):
    audit_logged = booking_service.delete_booking(repo, booking_id, admin)
    return {"message": f"Booking {booking_id} deleted successfully", "audit_logged": audit_logged}
