"""Media endpoints: upload, listing, download and deletion."""
import os
import shutil
import tempfile
import uuid
from datetime import datetime
from typing import Optional
import logging

from fastapi import APIRouter, Depends, File, Query, Request, Response, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.api.deps import get_current_user
from src.api.v1.endpoints.thumbnails import serve_thumbnail
from src.app.config import settings
from src.app.dependencies import (
    get_file_storage,
    get_metadata_service,
    get_thumbnail_service,
)
from src.app.exceptions import ApiError
from src.core.rate_limiter import limiter
from src.db.base import get_db
from src.models.media_file import MediaFile
from src.models.user import User
from src.repositories.media_repo import MediaRepository
from src.schemas.common import ApiResponse, PagedResult
from src.schemas.media import MediaFileResponse, MediaUploadResponse
from src.services.media.metadata import MetadataService
from src.services.media.thumbnails import ThumbnailError, ThumbnailService
from src.services.storage.local import FileStorageService, StorageError
from src.utils.validators import (
    get_extension,
    get_media_type,
    guess_content_type,
    validate_upload,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _upload_size(file: UploadFile) -> int:
    if file.size is not None:
        return file.size
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    return size


def _spool_to_temp(file: UploadFile, suffix: str) -> str:
    """Copy the upload to a named temp file and return its path."""
    file.file.seek(0)
    with tempfile.NamedTemporaryFile(
        delete=False,
        suffix=suffix,
        dir=settings.TEMP_DIRECTORY or None
    ) as tmp:
        shutil.copyfileobj(file.file, tmp)
        return tmp.name


def _get_media_or_404(db: Session, media_id: int) -> MediaFile:
    media = MediaRepository(db).get_media_file(media_id)
    if media is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, "FILE_NOT_FOUND", "File not found")
    return media


@router.post("/upload", response_model=ApiResponse[MediaUploadResponse])
@limiter.limit(settings.UPLOAD_RATE_LIMIT)
def upload_media(
    request: Request,
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: FileStorageService = Depends(get_file_storage),
    thumbnails: ThumbnailService = Depends(get_thumbnail_service),
    metadata_service: MetadataService = Depends(get_metadata_service)
):
    """
    Upload a photo or video.

    - Validates presence, size and extension
    - Files are stored under <picture dir>/<YYYYMMDD>/ using the capture date
    - A thumbnail failure does not fail the upload
    """
    filename = file.filename if file else None
    size = _upload_size(file) if file and filename else 0

    validation = validate_upload(
        filename,
        size,
        max_size=settings.MAX_FILE_SIZE_BYTES,
        allowed_extensions=settings.allowed_extensions,
    )
    if not validation.is_valid:
        logger.warning(f"Upload rejected for {current_user.email}: {validation.error_code} ({filename})")
        raise ApiError(status.HTTP_400_BAD_REQUEST, validation.error_code, validation.error_message)

    extension = f".{get_extension(filename)}"
    content_type = guess_content_type(filename, file.content_type)
    media_type = get_media_type(filename)

    temp_path = None
    saved_path = None
    thumbnail_path = ""
    try:
        temp_path = _spool_to_temp(file, extension)

        metadata = metadata_service.extract_metadata(temp_path, content_type)
        taken_at = metadata.date_taken or datetime.utcnow()

        saved_path = storage.save_file(temp_path, f"{uuid.uuid4()}{extension}", taken_at)
        stored_name = saved_path.rsplit("/", 1)[-1]

        try:
            thumbnail_path = thumbnails.generate_thumbnail(
                temp_path, stored_name, media_type, taken_at
            )
        except ThumbnailError as e:
            logger.warning(f"Thumbnail generation failed for {saved_path}: {e}")
            thumbnail_path = ""

        media = MediaRepository(db).add_media_file(MediaFile(
            file_name=stored_name,
            original_file_name=filename,
            file_path=saved_path,
            thumbnail_path=thumbnail_path,
            content_type=content_type,
            media_type=media_type,
            file_size=size,
            taken_at=taken_at,
            uploaded_at=datetime.utcnow(),
            uploaded_by=current_user.id,
            width=metadata.width,
            height=metadata.height,
            duration_seconds=metadata.duration_seconds,
            camera_model=metadata.camera_model,
            latitude=metadata.latitude,
            longitude=metadata.longitude,
        ))
    except (StorageError, SQLAlchemyError, OSError) as e:
        db.rollback()
        logger.error(f"Upload failed for {filename}: {e}", exc_info=True)
        if saved_path:
            storage.delete_file(saved_path)
        if thumbnail_path:
            thumbnails.delete_thumbnail(thumbnail_path)
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "UPLOAD_ERROR",
            "An error occurred while uploading the file"
        )
    finally:
        if temp_path and os.path.exists(temp_path):
            os.remove(temp_path)

    logger.info(
        f"File uploaded by {current_user.email}: {media.file_path} "
        f"(taken at {media.taken_at.isoformat()})"
    )
    result = MediaUploadResponse(
        id=media.id,
        file_name=media.file_name,
        original_file_name=media.original_file_name,
        content_type=media.content_type,
        file_size=media.file_size,
        taken_at=media.taken_at,
        uploaded_at=media.uploaded_at,
        thumbnail_path=media.thumbnail_path,
    )
    return ApiResponse[MediaUploadResponse].ok(result, result.message)


@router.get("", response_model=ApiResponse[PagedResult[MediaFileResponse]])
def list_media(
    page: int = Query(1, description="1-based page number"),
    page_size: Optional[int] = Query(None, alias="pageSize", description="Items per page"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """All media, newest capture date first. Out-of-range paging values are clamped."""
    items, total, page, page_size = MediaRepository(db).get_page(page, page_size)
    result = PagedResult[MediaFileResponse](
        items=[MediaFileResponse.model_validate(item) for item in items],
        total_count=total,
        page=page,
        page_size=page_size,
    )
    return ApiResponse[PagedResult[MediaFileResponse]].ok(result)


@router.get("/thumbnail/{media_id}", response_class=Response)
def get_media_thumbnail(
    media_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    thumbnails: ThumbnailService = Depends(get_thumbnail_service)
):
    return serve_thumbnail(media_id, request, db, thumbnails)


@router.get("/{media_id}", response_model=ApiResponse[MediaFileResponse])
def get_media(
    media_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    media = _get_media_or_404(db, media_id)
    return ApiResponse[MediaFileResponse].ok(MediaFileResponse.model_validate(media))


@router.get("/{media_id}/content", response_class=FileResponse)
def get_media_content(
    media_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: FileStorageService = Depends(get_file_storage)
):
    """Stream the original file inline."""
    media = _get_media_or_404(db, media_id)
    if not storage.file_exists(media.file_path):
        logger.warning(f"Original missing for media {media_id}: {media.file_path}")
        raise ApiError(status.HTTP_404_NOT_FOUND, "FILE_NOT_FOUND", "File not found")

    return FileResponse(
        storage.get_full_path(media.file_path),
        media_type=media.content_type,
        filename=media.original_file_name,
        content_disposition_type="inline",
    )


@router.delete("/{media_id}", response_model=ApiResponse[None])
def delete_media(
    media_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: FileStorageService = Depends(get_file_storage),
    thumbnails: ThumbnailService = Depends(get_thumbnail_service)
):
    """Delete a file. Only the uploader or an admin may do this."""
    media = _get_media_or_404(db, media_id)
    if media.uploaded_by != current_user.id and not current_user.is_admin:
        raise ApiError(
            status.HTTP_403_FORBIDDEN,
            "FORBIDDEN",
            "Only the uploader or an admin can delete this file"
        )

    file_path, thumbnail_path = media.file_path, media.thumbnail_path
    MediaRepository(db).delete_media_file(media_id)

    storage.delete_file(file_path)
    if thumbnail_path:
        thumbnails.delete_thumbnail(thumbnail_path)

    logger.info(f"Media {media_id} deleted by {current_user.email}")
    return ApiResponse[None].ok(message="File deleted successfully")
