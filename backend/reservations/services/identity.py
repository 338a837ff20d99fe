"""Identity provider — validates credentials and returns a base identity.

The shipped provider keeps bcrypt hashes on the user record. A hosted
provider can be swapped in through ``get_identity_provider``.
"""
import logging
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from reservations.database import get_db
from reservations.models.user import User
from reservations.security import hash_password, verify_password

logger = logging.getLogger(__name__)


class IdentityProvider:
    def register(self, user: User, password: str) -> None:
        raise NotImplementedError

    def authenticate(self, email: str, password: str) -> Optional[User]:
        raise NotImplementedError


class LocalIdentityProvider(IdentityProvider):
    def __init__(self, db: Session):
        self.db = db

    def register(self, user: User, password: str) -> None:
        user.password_hash = hash_password(password)

    def authenticate(self, email: str, password: str) -> Optional[User]:
        user = self.db.query(User).filter(User.email == email.lower()).first()
        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", email)
            return None
        return user


def get_identity_provider(db: Session = Depends(get_db)) -> IdentityProvider:
    return LocalIdentityProvider(db)
