"""Session tokens and password hashing."""
import logging
import re
from datetime import timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from reservations.config import settings
from reservations.timeutil import utcnow

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

_PASSWORD_RULES = (
    (re.compile(r".{12,}", re.DOTALL), "At least 12 characters"),
    (re.compile(r"[A-Z]"), "At least 1 uppercase letter (A-Z)"),
    (re.compile(r"[a-z]"), "At least 1 lowercase letter (a-z)"),
    (re.compile(r"[0-9]"), "At least 1 number (0-9)"),
    (re.compile(r"[^A-Za-z0-9\s]"), "At least 1 special character (!@#$%^&* etc)"),
)


def password_problems(password: str) -> list[str]:
    """Return the unmet password rules; empty when the password is acceptable."""
    return [message for pattern, message in _PASSWORD_RULES if not pattern.search(password or "")]


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        logger.warning("Unrecognised password hash format")
        return False


def create_access_token(user_id: str, email: str, role: str, expires_minutes: int) -> str:
    payload = {
        "id": user_id,
        "email": email,
        "role": role,
        "exp": utcnow() + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a token. Raises ``JWTError`` when invalid or expired."""
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    if not payload.get("id"):
        raise JWTError("Token carries no subject")
    return payload
