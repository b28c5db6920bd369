"""Import all models for Alembic."""
from .base import TimestampMixin, utcnow
from .enums import MediaType
from .user import User
from .media_file import MediaFile

__all__ = [
    "TimestampMixin",
    "utcnow",
    "MediaType",
    "User",
    "MediaFile",
]
