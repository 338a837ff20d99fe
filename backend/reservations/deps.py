"""Shared FastAPI dependencies: authentication, authorization, repositories."""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from reservations.database import get_db
from reservations.errors import AuthError, ForbiddenError
from reservations.models.user import User
from reservations.repositories.booking_repository import BookingRepository
from reservations.security import decode_access_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to a stored user; the stored role is authoritative."""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthError("No token provided")
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        raise AuthError("Invalid or expired token")

    user = db.query(User).filter(User.id == payload["id"]).first()
    if not user:
        raise AuthError("Invalid or expired token")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        logger.info("User %s denied admin access", user.id)
        raise ForbiddenError("Admin access only")
    return user


def get_booking_repository(db: Session = Depends(get_db)) -> BookingRepository:
    return BookingRepository(db)
