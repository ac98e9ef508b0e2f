"""
Router for account endpoints.

Handles:
- Registration
- Login (bearer token issuance)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..database import get_db
from ..models import AuthResponse, LoginRequest, RegisterRequest
from ..models_db import User
from ..security import hash_password, issue_access_token, verify_password
from ..services.exceptions import ServiceValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(user: User, settings: Settings) -> AuthResponse:
    token, expires_at = issue_access_token(user, settings)
    return AuthResponse(token=token, email=user.email, expires_at=expires_at.isoformat())


@router.post("/register", response_model=AuthResponse)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    """Create an account and return a bearer token for it."""
    if payload.password != payload.confirm_password:
        raise ServiceValidationError("Passwords do not match")

    email = payload.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise ServiceValidationError("Email already registered")

    user = User(
        email=email,
        password_hash=hash_password(payload.password, rounds=settings.bcrypt_rounds),
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("Registered user %s", user.id)
    return _auth_response(user, settings)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    """Exchange email and password for a bearer token."""
    email = payload.email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    return _auth_response(user, settings)
