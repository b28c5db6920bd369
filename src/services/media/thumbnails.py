"""Thumbnail generation: Pillow for still images, OpenCV for the first video frame."""
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Optional

import cv2
from PIL import Image, ImageOps

from src.models.enums import MediaType
from src.services.storage.local import (
    StorageError,
    date_based_path,
    resolve_under,
    unique_file_name,
)

logger = logging.getLogger(__name__)

THUMBNAIL_CONTENT_TYPE = "image/jpeg"
JPEG_QUALITY = 90


class ThumbnailError(Exception):
    """Raised when a thumbnail cannot be produced."""
    pass


def fit_within(width: int, height: int, max_size: int) -> tuple[int, int]:
    """Scale (width, height) down to fit a max_size box, keeping aspect ratio. Never upscales."""
    scale = min(max_size / width, max_size / height, 1.0)
    return max(1, round(width * scale)), max(1, round(height * scale))


class ThumbnailService:
    """Writes JPEG thumbnails as <thumb dir>/<YYYYMMDD>/<stem>.jpg."""

    def __init__(self, thumbnail_directory: str, max_size: int = 300):
        self.thumbnail_directory = Path(thumbnail_directory)
        self.max_size = max_size
        if not self.thumbnail_directory.exists():
            self.thumbnail_directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created thumbnail directory: {self.thumbnail_directory}")

    def generate_date_based_path(self, date: datetime) -> str:
        return date_based_path(date)

    def get_full_path(self, relative_path: str) -> Path:
        return resolve_under(self.thumbnail_directory, relative_path)

    def _prepare_target(self, file_name: str, date_taken: Optional[datetime]) -> tuple[Path, str]:
        date_dir = self.generate_date_based_path(date_taken or datetime.now())
        target_directory = self.thumbnail_directory / date_dir
        if not target_directory.is_dir():
            target_directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created thumbnail directory: {target_directory}")

        thumbnail_name = unique_file_name(
            target_directory, os.path.splitext(file_name)[0] + ".jpg"
        )
        return target_directory / thumbnail_name, f"{date_dir}/{thumbnail_name}"

    @staticmethod
    def _discard(target_path: Optional[Path]) -> None:
        """Remove a partially written thumbnail."""
        if target_path is not None and target_path.is_file():
            target_path.unlink()

    def _render_image(self, source_file_path: str, target_path: Path) -> None:
        with Image.open(source_file_path) as img:
            img = ImageOps.exif_transpose(img)
            if img.mode != "RGB":
                img = img.convert("RGB")
            img.thumbnail((self.max_size, self.max_size))
            img.save(target_path, "JPEG", quality=JPEG_QUALITY)

    def _render_video(self, source_file_path: str, target_path: Path) -> None:
        capture = cv2.VideoCapture(source_file_path)
        try:
            ok, frame = capture.read()
        finally:
            capture.release()

        if not ok or frame is None:
            raise ThumbnailError("Could not read a frame from the video")

        height, width = frame.shape[:2]
        new_size = fit_within(width, height, self.max_size)
        if new_size != (width, height):
            frame = cv2.resize(frame, new_size, interpolation=cv2.INTER_AREA)

        success, buffer = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, JPEG_QUALITY])
        if not success:
            raise ThumbnailError("Could not encode the video frame")

        target_path.write_bytes(buffer.tobytes())

    def generate_image_thumbnail(
        self,
        source_file_path: str,
        file_name: str,
        date_taken: Optional[datetime] = None
    ) -> str:
        """
        Create a JPEG thumbnail for a still image.

        Args:
            source_file_path: Image on disk
            file_name: Name the thumbnail is derived from (extension becomes .jpg)
            date_taken: Capture date used for the directory (defaults to now)

        Returns:
            Relative path of the thumbnail

        Raises:
            ThumbnailError: On any failure, including undecodable or
                over-sized images and unwritable directories
        """
        target_path = None
        try:
            target_path, relative_path = self._prepare_target(file_name, date_taken)
            self._render_image(source_file_path, target_path)
        except Exception as e:
            logger.error(
                f"Failed to generate image thumbnail: {source_file_path} -> {file_name}: {e}",
                exc_info=True,
            )
            self._discard(target_path)
            raise ThumbnailError(f"Image thumbnail failed: {str(e)}") from e

        logger.info(f"Image thumbnail generated successfully: {relative_path}")
        return relative_path

    def generate_video_thumbnail(
        self,
        source_file_path: str,
        file_name: str,
        date_taken: Optional[datetime] = None
    ) -> str:
        """Create a JPEG thumbnail from the first decodable frame of a video."""
        target_path = None
        try:
            target_path, relative_path = self._prepare_target(file_name, date_taken)
            self._render_video(source_file_path, target_path)
        except Exception as e:
            logger.error(
                f"Failed to generate video thumbnail: {source_file_path} -> {file_name}: {e}",
                exc_info=True,
            )
            self._discard(target_path)
            if isinstance(e, ThumbnailError):
                raise
            raise ThumbnailError(f"Video thumbnail failed: {str(e)}") from e

        logger.info(f"Video thumbnail generated successfully: {relative_path}")
        return relative_path

    def generate_thumbnail(
        self,
        source_file_path: str,
        file_name: str,
        media_type: MediaType,
        date_taken: Optional[datetime] = None
    ) -> str:
        if media_type == MediaType.video:
            return self.generate_video_thumbnail(source_file_path, file_name, date_taken)
        return self.generate_image_thumbnail(source_file_path, file_name, date_taken)

    def open_thumbnail(self, relative_path: str) -> Optional[BinaryIO]:
        try:
            full_path = self.get_full_path(relative_path)
            if not full_path.is_file():
                logger.warning(f"Thumbnail not found: {full_path}")
                return None
            return open(full_path, "rb")
        except (OSError, StorageError) as e:
            logger.error(f"Failed to get thumbnail: {relative_path}: {e}")
            return None

    def delete_thumbnail(self, relative_path: str) -> bool:
        try:
            full_path = self.get_full_path(relative_path)
            if not full_path.is_file():
                logger.warning(f"Thumbnail not found for deletion: {full_path}")
                return False
            full_path.unlink()
        except (OSError, StorageError) as e:
            logger.error(f"Failed to delete thumbnail: {relative_path}: {e}")
            return False

        logger.info(f"Thumbnail deleted successfully: {relative_path}")
        return True

    def thumbnail_exists(self, relative_path: str) -> bool:
        if not relative_path:
            return False
        try:
            return self.get_full_path(relative_path).is_file()
        except (OSError, StorageError) as e:
            logger.error(f"Failed to check thumbnail existence: {relative_path}: {e}")
            return False
