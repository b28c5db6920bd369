# src/app/dependencies.py
from functools import lru_cache

from .config import get_settings
from src.services.admin import AdminService
from src.services.auth.google import GoogleAuthService
from src.services.media.metadata import MetadataService
from src.services.media.thumbnails import ThumbnailService
from src.services.storage.local import FileStorageService


@lru_cache
def get_file_storage() -> FileStorageService:
    return FileStorageService(get_settings().PICTURE_DIRECTORY)


@lru_cache
def get_thumbnail_service() -> ThumbnailService:
    settings = get_settings()
    return ThumbnailService(settings.THUMBNAIL_DIRECTORY, settings.THUMBNAIL_MAX_SIZE)


@lru_cache
def get_metadata_service() -> MetadataService:
    return MetadataService(ffprobe_binary=get_settings().FFPROBE_BINARY)


@lru_cache
def get_admin_service() -> AdminService:
    return AdminService(get_settings().admin_users)


def get_google_auth_service() -> GoogleAuthService:
    return GoogleAuthService(
        client_id=get_settings().GOOGLE_CLIENT_ID,
        admin_service=get_admin_service(),
    )
