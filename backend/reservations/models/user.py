"""User ORM model and the closed role enumeration."""
import enum
import uuid

from sqlalchemy import Column, String, DateTime, Enum as SAEnum
from sqlalchemy.sql import func

from reservations.database import Base


class Role(str, enum.Enum):
    admin = "Admin"
    ministry_head = "Ministry Head"
    cos = "COS"
    dgroup_leader = "DGroup Leader"


# Roles a user may pick at signup; Admin is granted by another admin.
SIGNUP_ROLES = frozenset({Role.ministry_head, Role.cos, Role.dgroup_leader})


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name = Column(String(150), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    contact_number = Column(String(50), nullable=False)
    role = Column(SAEnum(Role), nullable=False, default=Role.dgroup_leader)
    password_hash = Column(String(255), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == Role.admin
