"""
Core package initializer.

This package provides core utilities such as JWT token handling and
request rate limiting.
"""

from .security import (
    ADMIN_ROLE,
    create_access_token,
    decode_token,
    get_user_id_from_token,
    token_expires_in_seconds,
)
from .rate_limiter import limiter

__all__ = [
    # Security
    "ADMIN_ROLE",
    "create_access_token",
    "decode_token",
    "get_user_id_from_token",
    "token_expires_in_seconds",
    # Rate limiting
    "limiter",
]
