"""Thumbnail endpoints."""
import calendar
import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from src.api.deps import get_current_user
from src.app.dependencies import get_thumbnail_service
from src.app.exceptions import ApiError
from src.db.base import get_db
from src.models.media_file import MediaFile
from src.models.user import User
from src.repositories.media_repo import MediaRepository
from src.services.media.thumbnails import THUMBNAIL_CONTENT_TYPE, ThumbnailService

logger = logging.getLogger(__name__)

router = APIRouter()

CACHE_CONTROL = "public, max-age=3600"


def thumbnail_etag(media: MediaFile) -> str:
    """Quoted ETag derived from the id and upload time, both immutable."""
    return f'"{media.id}-{calendar.timegm(media.uploaded_at.timetuple())}"'


def etag_matches(if_none_match: str, etag: str) -> bool:
    candidates = [tag.strip() for tag in if_none_match.split(",")]
    return "*" in candidates or etag in candidates or f"W/{etag}" in candidates


def serve_thumbnail(
    media_id: int,
    request: Request,
    db: Session,
    thumbnails: ThumbnailService
) -> Response:
    """Build the cached JPEG response for a media file's thumbnail."""
    media = MediaRepository(db).get_media_file(media_id)
    if media is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, "MEDIA_NOT_FOUND", "Media file not found")

    if not media.thumbnail_path:
        raise ApiError(status.HTTP_404_NOT_FOUND, "THUMBNAIL_NOT_FOUND", "Thumbnail not found")

    etag = thumbnail_etag(media)
    headers = {"Cache-Control": CACHE_CONTROL, "ETag": etag}

    if_none_match = request.headers.get("if-none-match")
    if if_none_match and etag_matches(if_none_match, etag):
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)

    stream = thumbnails.open_thumbnail(media.thumbnail_path)
    if stream is None:
        logger.warning(f"Thumbnail file missing for media {media_id}: {media.thumbnail_path}")
        raise ApiError(
            status.HTTP_404_NOT_FOUND,
            "THUMBNAIL_FILE_NOT_FOUND",
            "Thumbnail file not found"
        )

    with stream:
        content = stream.read()
    return Response(content=content, media_type=THUMBNAIL_CONTENT_TYPE, headers=headers)


@router.get("/{media_id}", response_class=Response)
def get_thumbnail(
    media_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    thumbnails: ThumbnailService = Depends(get_thumbnail_service)
):
    """JPEG thumbnail; honours If-None-Match."""
    return serve_thumbnail(media_id, request, db, thumbnails)
