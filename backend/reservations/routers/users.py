"""User routes — current user, admin role management and profile self-service."""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reservations.database import get_db
from reservations.deps import get_current_user, require_admin
from reservations.errors import NotFoundError, InvalidInputError
from reservations.models.user import User
from reservations.schemas.user import UserOut, ProfileUpdate, RoleUpdate
from reservations.services.auth_service import parse_role

logger = logging.getLogger(__name__)
router = APIRouter()
profile_router = APIRouter()


@router.get("/me", response_model=UserOut)
def get_me(user: User = Depends(get_current_user)):
    return user


@router.get("/summary")
def users_summary(db: Session = Depends(get_db), _: User = Depends(require_admin)):
    return {"total_users": db.query(User).count()}


@router.get("", response_model=list[UserOut])
def list_users(db: Session = Depends(get_db), _: User = Depends(require_admin)):
    return db.query(User).order_by(User.full_name).all()


@router.patch("/{user_id}/role", response_model=UserOut)
def change_role(
    user_id: str,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """The only way a role changes after signup."""
    role = parse_role(payload.role)
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    old_role = user.role
    user.role = role
    db.commit()
    db.refresh(user)
    logger.info("Admin %s changed role of %s from %s to %s", admin.id, user_id, old_role.value, role.value)
    return user


@profile_router.get("/my", response_model=UserOut)
def get_my_profile(user: User = Depends(get_current_user)):
    return user


@profile_router.patch("/my")
def update_my_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Self-service update. ``role`` is not part of the schema and is dropped."""
    updates = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    if "email" in updates:
        updates["email"] = updates["email"].lower()
    for field, value in updates.items():
        setattr(user, field, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise InvalidInputError("Email is already in use")
    db.refresh(user)
    logger.info("User %s updated profile (%s)", user.id, ", ".join(sorted(updates)) or "no changes")
    return {"message": "Profile updated", "user": UserOut.model_validate(user).model_dump(mode="json")}
