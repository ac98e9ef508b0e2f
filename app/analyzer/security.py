"""
Password hashing and bearer token handling.

Passwords are hashed with bcrypt; access tokens are HS256 JWTs carrying
the user id in ``sub``.
"""

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import Settings, get_settings
from .database import get_db
from .models_db import User

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def hash_password(plain: str, rounds: int = 12) -> str:
    salt = bcrypt.gensalt(rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def issue_access_token(user: User, settings: Settings) -> tuple[str, datetime]:
    """
    Create an access token for a user.

    Returns:
        The encoded token and its expiry time (UTC).
    """
    now = int(time.time())
    expires = now + settings.access_token_ttl_seconds
    body = {
        "iss": settings.jwt_issuer,
        "iat": now,
        "exp": expires,
        "sub": str(user.id),
        "email": user.email,
    }
    token = jwt.encode(body, settings.jwt_secret, algorithm="HS256")
    return token, datetime.fromtimestamp(expires, tz=timezone.utc)


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """
    Validate a token and return its claims.

    Raises:
        jwt.InvalidTokenError: If the token is malformed, forged or expired.
    """
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=["HS256"],
        issuer=settings.jwt_issuer,
        options={"require": ["exp", "sub"]},
    )


def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    """Dependency resolving the bearer credential to the calling user."""
    if not creds or creds.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        claims = decode_access_token(creds.credentials, settings)
        user_id = uuid.UUID(claims["sub"])
    except (jwt.InvalidTokenError, ValueError) as e:
        logger.info("Rejected bearer token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )
    return user
