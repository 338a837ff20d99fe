"""Dashboard count routes."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from reservations.database import get_db
from reservations.deps import require_admin, get_booking_repository
from reservations.models.booking import BookingStatus
from reservations.models.user import User
from reservations.repositories.booking_repository import BookingRepository
from reservations.timeutil import utcnow

router = APIRouter()


@router.get("/counts")
def metrics_counts(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
    repo: BookingRepository = Depends(get_booking_repository),
):
    return {
        "total_users": db.query(User).count(),
        "total_bookings": repo.count(),
        "pending": repo.count((BookingStatus.pending,)),
        "upcoming": repo.count((BookingStatus.approved,), starting_after=utcnow()),
    }
