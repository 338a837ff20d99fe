"""Per-venue calendar routes."""
import logging
from datetime import date

from fastapi import APIRouter, Depends, Query

from reservations.deps import get_current_user, get_booking_repository
from reservations.models.booking import BookingStatus
from reservations.models.user import User
from reservations.repositories.booking_repository import BookingRepository
from reservations.schemas.booking import BookingOut, TakenSlot
from reservations.timeutil import local_day_bounds

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/venue/{venue}/bookings", response_model=list[BookingOut])
def venue_bookings(
    venue: str,
    _: User = Depends(get_current_user),
    repo: BookingRepository = Depends(get_booking_repository),
):
    """Pending and Approved bookings for a venue."""
    return repo.list_for_venue(venue.strip(), (BookingStatus.pending, BookingStatus.approved))


@router.get("/venue/{venue}/available", response_model=list[TakenSlot])
def venue_taken_slots(
    venue: str,
    day: date = Query(..., alias="date"),
    _: User = Depends(get_current_user),
    repo: BookingRepository = Depends(get_booking_repository),
):
    """Approved ranges for a venue on a facility-local calendar day."""
    window_start, window_end = local_day_bounds(day)
    return repo.list_for_venue(
        venue.strip(), (BookingStatus.approved,), window_start=window_start, window_end=window_end,
    )
