"""Media file model."""
from sqlalchemy import Column, Integer, BigInteger, Float, String, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship

from src.db.base import Base
from .base import utcnow
from .enums import MediaType


class MediaFile(Base):
    """Uploaded photo or video stored under the date-based picture directory."""
    
    __tablename__ = 'media_files'
    
    id = Column(Integer, primary_key=True, index=True)
    
    # Storage info
    file_name = Column(String(255), nullable=False, index=True)
    original_file_name = Column(String(255), nullable=False)
    file_path = Column(String(500), nullable=False)
    thumbnail_path = Column(String(500), nullable=False, default='')
    
    # File metadata
    content_type = Column(String(100), nullable=False)
    media_type = Column(SQLEnum(MediaType), nullable=False, default=MediaType.image)
    file_size = Column(BigInteger, nullable=False)
    
    taken_at = Column(DateTime, nullable=False, index=True)
    uploaded_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    uploaded_by = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    
    # Extracted metadata
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    duration_seconds = Column(Float, nullable=True)
    camera_model = Column(String(255), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    
    uploader = relationship('User', back_populates='media_files')
    
    def __repr__(self) -> str:
        return f'<MediaFile(id={self.id}, file_name={self.file_name}, file_path={self.file_path})>'
