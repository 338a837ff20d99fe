"""Pydantic schemas for Bookings and audit logs."""
from __future__ import annotations
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from reservations.models.audit_log import AuditAction
from reservations.models.booking import BookingStatus
from reservations.timeutil import UTCDateTime


class BookingCreate(BaseModel):
    event_name: str = Field(min_length=1)
    purpose: str = Field(min_length=1)
    attendees: int = Field(gt=0)
    venue: str = Field(min_length=1)
    start_datetime: datetime
    end_datetime: datetime
    additional_needs: Optional[str] = None


class BookingUpdate(BaseModel):
    event_name: Optional[str] = Field(default=None, min_length=1)
    purpose: Optional[str] = Field(default=None, min_length=1)
    attendees: Optional[int] = Field(default=None, gt=0)
    venue: Optional[str] = Field(default=None, min_length=1)
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None
    additional_needs: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class StatusUpdate(BaseModel):
    # Kept as a plain string so an unknown value reaches the state machine
    # and is rejected there with a 400.
    status: str
    notes: Optional[str] = None


class BookingOut(BaseModel):
    id: int
    display_id: str
    user_id: str
    venue: str
    event_name: str
    purpose: str
    attendees: int
    start_datetime: UTCDateTime
    end_datetime: UTCDateTime
    additional_needs: Optional[str] = None
    status: BookingStatus
    reminder_sent_at: Optional[UTCDateTime] = None
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None

    model_config = {"from_attributes": True}


class TakenSlot(BaseModel):
    start_datetime: UTCDateTime
    end_datetime: UTCDateTime

    model_config = {"from_attributes": True}


class BookingEnvelope(BaseModel):
    booking: BookingOut


class BookingStatusResult(BaseModel):
    booking: BookingOut
    audit_logged: bool


class BookingList(BaseModel):
    items: list[BookingOut]
    count: int


class AuditLogCreate(BaseModel):
    booking_id: int
    action: str
    notes: Optional[str] = None


class AuditLogOut(BaseModel):
    id: int
    booking_id: int
    admin_id: str
    action: AuditAction
    notes: Optional[str] = None
    created_at: Optional[UTCDateTime] = None

    model_config = {"from_attributes": True}


class AuditLogEntry(BaseModel):
    """Audit row joined with booking, booker and admin details for the admin table."""

    id: int
    booking_id: int
    display_id: str
    event_name: str
    booker_email: str
    action: str
    notes: Optional[str] = None
    admin_name: str
    admin_email: str
    created_at: Optional[UTCDateTime] = None


class AuditLogList(BaseModel):
    items: list[AuditLogEntry]
    count: int
