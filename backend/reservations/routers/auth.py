"""Signup and login routes."""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from reservations.database import get_db
from reservations.schemas.user import SignupRequest, LoginRequest, LoginResponse, TokenUser
from reservations.services import auth_service
from reservations.services.identity import IdentityProvider, get_identity_provider

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    db: Session = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    """Create an account. Admin cannot be self-selected."""
    auth_service.signup(
        db,
        provider,
        full_name=payload.full_name,
        email=payload.email,
        contact_number=payload.contact_number,
        role=payload.role,
        password=payload.password,
    )
    return {"message": "Account created."}


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, provider: IdentityProvider = Depends(get_identity_provider)):
    token, user = auth_service.login(provider, payload.email, payload.password)
    return LoginResponse(token=token, user=TokenUser.model_validate(user))


@router.post("/admin/login", response_model=LoginResponse)
def admin_login(payload: LoginRequest, provider: IdentityProvider = Depends(get_identity_provider)):
    """Login that additionally requires the Admin role (403 otherwise)."""
    token, user = auth_service.admin_login(provider, payload.email, payload.password)
    return LoginResponse(token=token, user=TokenUser.model_validate(user))
