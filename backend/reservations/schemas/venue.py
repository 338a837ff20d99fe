"""Pydantic schemas for Venues."""
from typing import Optional

from pydantic import BaseModel, Field

from reservations.timeutil import UTCDateTime


class VenueCreate(BaseModel):
    name: str = Field(min_length=1)
    area: str
    capacity_min: Optional[int] = Field(default=None, ge=0)
    capacity_max: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None


class VenueUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    area: Optional[str] = None
    capacity_min: Optional[int] = Field(default=None, ge=0)
    capacity_max: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class VenueOut(BaseModel):
    id: int
    name: str
    area: str
    capacity_min: Optional[int] = None
    capacity_max: Optional[int] = None
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[UTCDateTime] = None

    model_config = {"from_attributes": True}
