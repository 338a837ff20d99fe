"""Venue ORM model."""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from sqlalchemy.sql import func

from reservations.database import Base

ALLOWED_AREAS = (
    "Main Worship Hall",
    "Phase 2 Area 1",
    "Phase 2 Area 2",
    "NxtGen Room",
)


class Venue(Base):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False, unique=True)
    area = Column(String(50), nullable=False)
    capacity_min = Column(Integer, nullable=True)
    capacity_max = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
