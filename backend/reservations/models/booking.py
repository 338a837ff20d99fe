"""Booking ORM model and status enumeration."""
import enum

from sqlalchemy import CheckConstraint, Column, Integer, String, Text, DateTime, ForeignKey, Enum as SAEnum, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from reservations.database import Base


class BookingStatus(str, enum.Enum):
    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"
    cancelled = "Cancelled"


# Legal targets per current status. Rejected and Cancelled are terminal.
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.pending: frozenset({BookingStatus.approved, BookingStatus.rejected, BookingStatus.cancelled}),
    BookingStatus.approved: frozenset({BookingStatus.cancelled}),
    BookingStatus.rejected: frozenset(),
    BookingStatus.cancelled: frozenset(),
}


def format_display_id(booking_id: int) -> str:
    return f"BK-{booking_id:06d}"


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_venue_status_start", "venue", "status", "start_datetime"),
        CheckConstraint("end_datetime > start_datetime", name="ck_bookings_range"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    venue = Column(String(150), nullable=False)
    event_name = Column(String(255), nullable=False)
    purpose = Column(Text, nullable=False)
    attendees = Column(Integer, nullable=False)
    start_datetime = Column(DateTime(timezone=True), nullable=False)
    end_datetime = Column(DateTime(timezone=True), nullable=False)
    additional_needs = Column(Text, nullable=True)
    status = Column(SAEnum(BookingStatus), nullable=False, default=BookingStatus.pending)
    reminder_sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", lazy="joined")

    @property
    def display_id(self) -> str | None:
        return format_display_id(self.id) if self.id is not None else None
