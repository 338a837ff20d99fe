"""Pydantic schemas for ChangeRequests."""
from typing import Optional

from pydantic import BaseModel, Field

from reservations.models.change_request import RequestStatus
from reservations.timeutil import UTCDateTime


class ChangeRequestCreate(BaseModel):
    booking_id: int
    description: str = Field(min_length=1)


class ChangeRequestReview(BaseModel):
    status: str
    admin_notes: Optional[str] = None


class ChangeRequestOut(BaseModel):
    id: int
    booking_id: int
    user_id: str
    event_name: str
    description: str
    status: RequestStatus
    admin_notes: Optional[str] = None
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None

    model_config = {"from_attributes": True}
