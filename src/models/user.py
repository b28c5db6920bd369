"""User model."""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from src.db.base import Base
from .base import TimestampMixin, utcnow


class User(Base, TimestampMixin):
    """Album member. Admins can manage other members."""
    
    __tablename__ = 'users'
    
    id = Column(Integer, primary_key=True, index=True)
    # Filled in on the first Google login
    google_id = Column(String(255), unique=True, nullable=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    last_login_at = Column(DateTime, default=utcnow, nullable=False)
    
    media_files = relationship(
        'MediaFile',
        back_populates='uploader',
        cascade='all, delete-orphan',
        passive_deletes=True,
    )
    
    def __repr__(self) -> str:
        return f'<User(id={self.id}, email={self.email}, is_admin={self.is_admin})>'
