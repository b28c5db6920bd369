# src/utils/validators.py

import mimetypes
import os
from dataclasses import dataclass
from typing import Iterable, Optional

from src.models.enums import MediaType

# ---------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "heic"}
VIDEO_EXTENSIONS = {"mp4", "mov"}

# mimetypes does not know every camera format
EXTRA_CONTENT_TYPES = {
    "heic": "image/heic",
    "mov": "video/quicktime",
}

GENERIC_CONTENT_TYPES = {"", "application/octet-stream"}


# ---------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------

@dataclass
class FileValidationResult:
    """Outcome of an upload check."""
    is_valid: bool = True
    error_code: str = ""
    error_message: str = ""

    @classmethod
    def failure(cls, code: str, message: str) -> "FileValidationResult":
        return cls(is_valid=False, error_code=code, error_message=message)


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def get_extension(filename: Optional[str]) -> str:
    """Lower-cased extension without the dot ('' when absent)."""
    if not filename:
        return ""
    return os.path.splitext(filename)[1].lower().lstrip(".")


def is_image_file(filename: str) -> bool:
    return get_extension(filename) in IMAGE_EXTENSIONS


def is_video_file(filename: str) -> bool:
    return get_extension(filename) in VIDEO_EXTENSIONS


def get_media_type(filename: str) -> MediaType:
    return MediaType.video if is_video_file(filename) else MediaType.image


def guess_content_type(filename: str, declared: Optional[str] = None) -> str:
    """Prefer the client's content type unless it is missing or generic."""
    if declared and declared.lower() not in GENERIC_CONTENT_TYPES:
        return declared.lower()

    ext = get_extension(filename)
    if ext in EXTRA_CONTENT_TYPES:
        return EXTRA_CONTENT_TYPES[ext]

    guessed, _ = mimetypes.guess_type(filename or "")
    return guessed or "application/octet-stream"


# ---------------------------------------------------------------------
# Main Validator
# ---------------------------------------------------------------------

def validate_upload(
    filename: Optional[str],
    size: Optional[int],
    *,
    max_size: int,
    allowed_extensions: Iterable[str],
) -> FileValidationResult:
    """
    Validate an uploaded file before it is stored.

    Checks run in order: presence, size, extension.

    Args:
        filename: Client supplied file name
        size: File size in bytes
        max_size: Upper size bound in bytes
        allowed_extensions: Extensions without dot, lower-case

    Returns:
        FileValidationResult
    """
    if not filename or not size:
        return FileValidationResult.failure("EMPTY_FILE", "No file was selected")

    if size > max_size:
        return FileValidationResult.failure(
            "INVALID_FILE_SIZE",
            f"File size exceeds the limit. Files up to {max_size // (1024 * 1024)}MB can be uploaded",
        )

    allowed = [ext.lower().lstrip(".") for ext in allowed_extensions]
    ext = get_extension(filename)
    if not ext or ext not in allowed:
        return FileValidationResult.failure(
            "INVALID_FILE_EXTENSION",
            f"File type is not allowed. Supported formats: {', '.join(e.upper() for e in allowed)}",
        )

    return FileValidationResult()
