"""Signup and login on top of the identity provider."""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reservations.config import settings
from reservations.errors import AuthError, ForbiddenError, InvalidInputError, UpstreamError
from reservations.models.user import User, Role, SIGNUP_ROLES
from reservations.security import create_access_token, password_problems
from reservations.services.identity import IdentityProvider

logger = logging.getLogger(__name__)


def parse_role(value: str) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise InvalidInputError("Invalid role selected.")


def signup(
    db: Session,
    provider: IdentityProvider,
    full_name: str,
    email: str,
    contact_number: str,
    role: str,
    password: str,
) -> User:
    user_role = parse_role(role)
    if user_role not in SIGNUP_ROLES:
        raise InvalidInputError("Invalid role selected.")

    problems = password_problems(password)
    if problems:
        raise InvalidInputError("Password must contain: " + "; ".join(problems))

    email = email.lower()
    if db.query(User).filter(User.email == email).first():
        raise UpstreamError("An account with this email already exists", status_code=400)

    user = User(full_name=full_name, email=email, contact_number=contact_number, role=user_role)
    provider.register(user, password)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise UpstreamError("An account with this email already exists", status_code=400)
    db.refresh(user)
    logger.info("User %s signed up as %s", user.id, user.role.value)
    return user


def login(provider: IdentityProvider, email: str, password: str) -> tuple[str, User]:
    user = provider.authenticate(email, password)
    if user is None:
        raise AuthError("Invalid credentials")
    token = create_access_token(user.id, user.email, user.role.value, settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    logger.info("User %s logged in", user.id)
    return token, user


def admin_login(provider: IdentityProvider, email: str, password: str) -> tuple[str, User]:
    user = provider.authenticate(email, password)
    if user is None:
        raise AuthError("Invalid credentials")
    if not user.is_admin:
        raise ForbiddenError("Not authorized as admin")
    token = create_access_token(user.id, user.email, user.role.value, settings.ADMIN_TOKEN_EXPIRE_MINUTES)
    logger.info("Admin %s logged in", user.id)
    return token, user


def ensure_bootstrap_admin(db: Session, provider: IdentityProvider) -> None:
    """Create the configured first administrator if it does not exist yet."""
    email = settings.BOOTSTRAP_ADMIN_EMAIL.lower()
    if not email or not settings.BOOTSTRAP_ADMIN_PASSWORD:
        return
    if db.query(User).filter(User.email == email).first():
        return
    user = User(
        full_name=settings.BOOTSTRAP_ADMIN_NAME,
        email=email,
        contact_number="",
        role=Role.admin,
    )
    provider.register(user, settings.BOOTSTRAP_ADMIN_PASSWORD)
    db.add(user)
    db.commit()
    logger.info("Bootstrap admin %s created", email)
