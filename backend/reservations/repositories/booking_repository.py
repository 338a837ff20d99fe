"""Booking repository — the only place booking queries are built.

The conflict detector and the status state machine talk to the record store
exclusively through this class, so tests can drive them against an in-memory
SQLite session or a hand-written double.
"""
import logging
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reservations.models.audit_log import AuditLog, AuditAction
from reservations.models.booking import Booking, BookingStatus
from reservations.models.change_request import ChangeRequest
from reservations.timeutil import stored_utc

logger = logging.getLogger(__name__)


class BookingRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, booking_id: int) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def find_overlapping(
        self,
        venue: str,
        start: datetime,
        end: datetime,
        statuses: Iterable[BookingStatus],
        exclude_id: Optional[int] = None,
    ) -> list[Booking]:
        """Bookings on ``venue`` whose range strictly overlaps ``[start, end)``."""
        query = self.db.query(Booking).filter(
            Booking.venue == venue,
            Booking.status.in_(list(statuses)),
            Booking.start_datetime < end,
            Booking.end_datetime > start,
        )
        if exclude_id is not None:
            query = query.filter(Booking.id != exclude_id)
        return query.order_by(Booking.start_datetime).all()

    def insert_booking(self, **fields) -> Booking:
        booking = Booking(**fields)
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def update_fields(self, booking: Booking, updates: dict) -> Booking:
        for field, value in updates.items():
            setattr(booking, field, value)
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def update_status(self, booking: Booking, status: BookingStatus) -> Booking:
        booking.status = status
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def lock_venue(self, venue: str) -> None:
        """Serialise approvals on ``venue`` until the current transaction ends.

        Postgres takes a transaction-scoped advisory lock. SQLite needs none:
        the write in ``claim_slot`` holds the database write lock until commit.
        """
        if self.db.get_bind().dialect.name == "postgresql":
            self.db.execute(text("SELECT pg_advisory_xact_lock(hashtext(:venue))"), {"venue": venue})

    def claim_slot(self, booking: Booking, updates: dict) -> bool:
        """Apply ``updates`` to a booking that will be Approved, if its slot is free.

        The write is flushed first and the overlap query runs inside the same
        transaction, so a competing approval either is already visible or is
        blocked until this one commits. Returns False, with everything rolled
        back, when another Approved booking overlaps.
        """
        booking_id = booking.id
        self.lock_venue(updates.get("venue", booking.venue))
        for field, value in updates.items():
            setattr(booking, field, value)
        try:
            self.db.flush()
        except IntegrityError:
            # ex_bookings_approved_overlap on Postgres
            self.db.rollback()
            logger.info("Booking %s rejected by the approved-overlap constraint", booking_id)
            return False

        clashes = self.find_overlapping(
            booking.venue,
            stored_utc(booking.start_datetime),
            stored_utc(booking.end_datetime),
            (BookingStatus.approved,),
            exclude_id=booking.id,
        )
        if clashes:
            clash_ids = [b.id for b in clashes]
            self.db.rollback()
            logger.info("Booking %s overlaps approved booking(s) %s", booking_id, clash_ids)
            return False

        self.db.commit()
        self.db.refresh(booking)
        return True

    def delete(self, booking: Booking) -> None:
        self.db.query(ChangeRequest).filter(ChangeRequest.booking_id == booking.id).delete()
        self.db.delete(booking)
        self.db.commit()

    def insert_audit_log(
        self,
        booking_id: int,
        admin_id: str,
        action: AuditAction,
        notes: Optional[str] = None,
    ) -> AuditLog:
        entry = AuditLog(booking_id=booking_id, admin_id=admin_id, action=action, notes=notes)
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def rollback(self) -> None:
        self.db.rollback()

    # Listings --------------------------------------------------------------

    def list_by_user(self, user_id: str) -> list[Booking]:
        return (
            self.db.query(Booking)
            .filter(Booking.user_id == user_id)
            .order_by(Booking.start_datetime)
            .all()
        )

    def list_by_status(
        self,
        statuses: Iterable[BookingStatus],
        starting_after: Optional[datetime] = None,
        descending: bool = False,
    ) -> list[Booking]:
        query = self.db.query(Booking).filter(Booking.status.in_(list(statuses)))
        if starting_after is not None:
            query = query.filter(Booking.start_datetime >= starting_after)
        order = Booking.start_datetime.desc() if descending else Booking.start_datetime
        return query.order_by(order).all()

    def list_for_venue(
        self,
        venue: str,
        statuses: Iterable[BookingStatus],
        window_start: Optional[datetime] = None,
        window_end: Optional[datetime] = None,
    ) -> list[Booking]:
        query = self.db.query(Booking).filter(
            Booking.venue == venue,
            Booking.status.in_(list(statuses)),
        )
        if window_start is not None:
            query = query.filter(Booking.start_datetime >= window_start)
        if window_end is not None:
            query = query.filter(Booking.start_datetime < window_end)
        return query.order_by(Booking.start_datetime).all()

    def due_for_reminder(self, window_start: datetime, window_end: datetime) -> list[Booking]:
        return (
            self.db.query(Booking)
            .filter(
                Booking.status == BookingStatus.approved,
                Booking.start_datetime >= window_start,
                Booking.start_datetime < window_end,
                Booking.reminder_sent_at.is_(None),
            )
            .order_by(Booking.start_datetime)
            .all()
        )

    def count(self, statuses: Optional[Iterable[BookingStatus]] = None,
              starting_after: Optional[datetime] = None) -> int:
        query = self.db.query(Booking)
        if statuses is not None:
            query = query.filter(Booking.status.in_(list(statuses)))
        if starting_after is not None:
            query = query.filter(Booking.start_datetime >= starting_after)
        return query.count()
