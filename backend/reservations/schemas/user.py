"""Pydantic schemas for auth, users and profiles."""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from reservations.models.user import Role
from reservations.timeutil import UTCDateTime


class SignupRequest(BaseModel):
    full_name: str = Field(min_length=1)
    email: EmailStr
    contact_number: str = Field(min_length=1)
    role: str
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserOut(BaseModel):
    id: str
    full_name: str
    email: str
    contact_number: str
    role: Role
    created_at: Optional[UTCDateTime] = None

    model_config = {"from_attributes": True}


class TokenUser(BaseModel):
    id: str
    email: str
    full_name: str
    role: Role

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    token: str
    user: TokenUser


class ProfileUpdate(BaseModel):
    """Self-service profile fields. Unknown keys such as ``role`` are dropped."""

    full_name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    contact_number: Optional[str] = Field(default=None, min_length=1)

    model_config = {"extra": "ignore"}


class RoleUpdate(BaseModel):
    role: str
