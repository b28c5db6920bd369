"""Dependencies for API endpoints."""
from fastapi import Depends, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
import logging

from src.app.exceptions import ApiError
from src.db.base import get_db
from src.models.user import User
from src.core.security import decode_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

BEARER_HEADERS = {"WWW-Authenticate": "Bearer"}


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user from JWT token."""
    if credentials is None or not credentials.credentials:
        raise ApiError(
            status.HTTP_401_UNAUTHORIZED,
            "UNAUTHORIZED",
            "Authentication required",
            headers=BEARER_HEADERS,
        )

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise ApiError(
            status.HTTP_401_UNAUTHORIZED,
            "INVALID_TOKEN",
            "Invalid or expired token",
            headers=BEARER_HEADERS,
        )

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        user_id = 0

    user = db.query(User).filter(User.id == user_id).first() if user_id else None
    if user is None:
        logger.warning(f"Token refers to unknown user: {payload.get('sub')}")
        raise ApiError(
            status.HTTP_401_UNAUTHORIZED,
            "INVALID_USER",
            "User no longer exists",
            headers=BEARER_HEADERS,
        )

    return user


def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Verify user is an admin (checked against the database row)."""
    if not current_user.is_admin:
        raise ApiError(
            status.HTTP_403_FORBIDDEN,
            "FORBIDDEN",
            "Admin access required"
        )
    return current_user


def get_client_ip(request: Request) -> str:
    """Extract client IP address."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"
