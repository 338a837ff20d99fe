"""Venue routes."""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reservations.database import get_db
from reservations.deps import get_current_user, require_admin
from reservations.errors import InvalidInputError, NotFoundError
from reservations.models.user import User
from reservations.models.venue import Venue, ALLOWED_AREAS
from reservations.schemas.venue import VenueCreate, VenueUpdate, VenueOut

logger = logging.getLogger(__name__)
router = APIRouter()


def _validate(area, capacity_min, capacity_max) -> None:
    if area is not None and area not in ALLOWED_AREAS:
        raise InvalidInputError("Invalid area selected")
    if capacity_min is not None and capacity_max is not None and capacity_min > capacity_max:
        raise InvalidInputError("capacity_min cannot exceed capacity_max")


def _commit(db: Session, venue: Venue) -> Venue:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise InvalidInputError("A venue with this name already exists")
    db.refresh(venue)
    return venue


@router.get("", response_model=list[VenueOut])
def list_venues(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    """Active venues only."""
    return db.query(Venue).filter(Venue.is_active.is_(True)).order_by(Venue.name).all()


@router.post("", response_model=VenueOut, status_code=status.HTTP_201_CREATED)
def create_venue(payload: VenueCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    _validate(payload.area, payload.capacity_min, payload.capacity_max)
    venue = Venue(**payload.model_dump(), is_active=True)
    db.add(venue)
    venue = _commit(db, venue)
    logger.info("Venue '%s' (%s) created by admin %s", venue.name, venue.id, admin.id)
    return venue


@router.patch("/{venue_id}", response_model=VenueOut)
def update_venue(
    venue_id: int,
    payload: VenueUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if not venue:
        raise NotFoundError("Venue not found")
    updates = payload.model_dump(exclude_unset=True)
    _validate(
        updates.get("area"),
        updates.get("capacity_min", venue.capacity_min),
        updates.get("capacity_max", venue.capacity_max),
    )
    for field, value in updates.items():
        if value is None and field in ("name", "area", "is_active"):
            continue
        setattr(venue, field, value)
    venue = _commit(db, venue)
    logger.info("Venue %s updated by admin %s", venue_id, admin.id)
    return venue
