"""
Services package initializer.

Re-exports the service classes so callers can import from
`src.services` instead of deep module paths.
"""

from .admin import AdminService
from .auth import GoogleAuthService, GoogleIdentity
from .media.metadata import MediaMetadata, MetadataService
from .media.thumbnails import ThumbnailError, ThumbnailService
from .storage.local import FileStorageService, StorageError

__all__ = [
    "AdminService",
    "GoogleAuthService",
    "GoogleIdentity",
    "MediaMetadata",
    "MetadataService",
    "ThumbnailError",
    "ThumbnailService",
    "FileStorageService",
    "StorageError",
]
