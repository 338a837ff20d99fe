"""AuditLog ORM model — append-only record of administrator actions."""
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func

from reservations.database import Base


class AuditAction(str, enum.Enum):
    reviewed = "Reviewed"
    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"
    cancelled = "Cancelled"
    updated = "Updated"
    deleted = "Deleted"


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # No FK: rows must outlive a deleted booking.
    booking_id = Column(Integer, nullable=False, index=True)
    admin_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    action = Column(SAEnum(AuditAction), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
