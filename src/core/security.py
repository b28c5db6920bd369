"""Security utilities for authentication."""
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import logging

from src.app.config import settings

logger = logging.getLogger(__name__)

ADMIN_ROLE = "Admin"


def create_access_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token carrying the user's identity claims."""
    now = datetime.utcnow()
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
        "google_id": user.google_id or "",
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "exp": expire,
    }
    if user.is_admin:
        to_encode["role"] = ADMIN_ROLE

    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate JWT token (signature, issuer, audience, expiry)."""
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            options={"leeway": 0},
        )
    except JWTError as exc:
        logger.debug("JWT validation failed: %s", exc)
        return None


def get_user_id_from_token(token: str) -> int:
    """Return the user id encoded in a valid token, or 0."""
    payload = decode_token(token)
    if not payload:
        return 0
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return 0


def token_expires_in_seconds() -> int:
    return settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
