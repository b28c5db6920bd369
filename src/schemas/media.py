"""Media schemas for API responses."""
from datetime import datetime
from typing import Optional

from src.models.enums import MediaType
from src.schemas.common import CamelModel


class MediaFileResponse(CamelModel):
    """Stored photo or video with its extracted metadata."""
    id: int
    file_name: str
    original_file_name: str
    content_type: str
    media_type: MediaType
    file_size: int
    taken_at: datetime
    uploaded_at: datetime
    uploaded_by: int
    thumbnail_path: str = ""

    width: Optional[int] = None
    height: Optional[int] = None
    duration_seconds: Optional[float] = None
    camera_model: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class MediaUploadResponse(CamelModel):
    """Result of a successful upload."""
    id: int
    file_name: str
    original_file_name: str
    content_type: str
    file_size: int
    taken_at: datetime
    uploaded_at: datetime
    thumbnail_path: str = ""
    message: str = "File uploaded successfully"
