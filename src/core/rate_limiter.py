# core/rate_limiter.py
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from src.app.config import settings


def client_key(request: Request) -> str:
    """Rate-limit key: first X-Forwarded-For hop, else the peer address."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(key_func=client_key, enabled=settings.RATE_LIMIT_ENABLED)
