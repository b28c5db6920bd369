"""Base model with common fields and utilities."""
from datetime import datetime
from sqlalchemy import Column, DateTime


def utcnow() -> datetime:
    """Naive UTC timestamp, the convention used for every stored datetime."""
    return datetime.utcnow()


class TimestampMixin:
    """Mixin for the created_at timestamp."""
    
    created_at = Column(DateTime, default=utcnow, nullable=False)
