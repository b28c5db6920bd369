"""Local disk storage for original media files, bucketed by capture date."""
import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Custom exception for storage service errors."""
    pass


def date_based_path(date: datetime) -> str:
    """Directory name for a capture date: YYYYMMDD."""
    return date.strftime("%Y%m%d")


def unique_file_name(directory: Path, file_name: str) -> str:
    """
    Return a name that does not exist yet in ``directory``.

    Collisions get a counter suffix: photo.jpg -> photo_1.jpg -> photo_2.jpg.
    """
    stem, ext = os.path.splitext(file_name)
    candidate = file_name
    counter = 1
    while (directory / candidate).exists():
        candidate = f"{stem}_{counter}{ext}"
        counter += 1

    if candidate != file_name:
        logger.info(f"File name changed to avoid conflict: {file_name} -> {candidate}")
    return candidate


def resolve_under(base_directory: Path, relative_path: str) -> Path:
    """Join ``relative_path`` onto the base, refusing paths that escape it."""
    base = base_directory.resolve()
    full = (base / relative_path).resolve()
    if full != base and base not in full.parents:
        raise StorageError(f"Path escapes storage directory: {relative_path}")
    return full


class FileStorageService:
    """Stores originals as <base>/<YYYYMMDD>/<name> and hands out relative paths."""

    def __init__(self, base_directory: str):
        self.base_directory = Path(base_directory)
        if not self.base_directory.exists():
            self.base_directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created base directory: {self.base_directory}")

    def generate_date_based_path(self, date: datetime) -> str:
        return date_based_path(date)

    def get_full_path(self, relative_path: str) -> Path:
        return resolve_under(self.base_directory, relative_path)

    def save_file(
        self,
        source_file_path: str,
        file_name: str,
        date_taken: Optional[datetime] = None
    ) -> str:
        """
        Copy a file into the date-based directory layout.

        Args:
            source_file_path: File to copy
            file_name: Desired name in the target directory
            date_taken: Capture date (defaults to now)

        Returns:
            Relative path "<YYYYMMDD>/<final name>"

        Raises:
            StorageError: If the copy fails
        """
        target_date = date_taken or datetime.now()
        date_dir = self.generate_date_based_path(target_date)
        target_directory = self.base_directory / date_dir

        try:
            if not target_directory.exists():
                target_directory.mkdir(parents=True, exist_ok=True)
                logger.info(f"Created directory: {target_directory}")

            final_name = unique_file_name(target_directory, file_name)
            shutil.copyfile(source_file_path, target_directory / final_name)
        except OSError as e:
            logger.error(f"Failed to save file: {source_file_path} -> {file_name}: {e}")
            raise StorageError(f"Failed to save file: {str(e)}")

        relative_path = f"{date_dir}/{final_name}"
        logger.info(f"File saved successfully: {relative_path}")
        return relative_path

    def open_file(self, relative_path: str) -> Optional[BinaryIO]:
        """Open a stored file for reading, or None if it does not exist."""
        try:
            full_path = self.get_full_path(relative_path)
            if not full_path.is_file():
                logger.warning(f"File not found: {full_path}")
                return None
            return open(full_path, "rb")
        except (OSError, StorageError) as e:
            logger.error(f"Failed to get file: {relative_path}: {e}")
            return None

    def delete_file(self, relative_path: str) -> bool:
        """Delete a stored file. Returns False when missing or on failure."""
        try:
            full_path = self.get_full_path(relative_path)
            if not full_path.is_file():
                logger.warning(f"File not found for deletion: {full_path}")
                return False
            full_path.unlink()
        except (OSError, StorageError) as e:
            logger.error(f"Failed to delete file: {relative_path}: {e}")
            return False

        logger.info(f"File deleted successfully: {relative_path}")
        return True

    def file_exists(self, relative_path: str) -> bool:
        if not relative_path:
            return False
        try:
            return self.get_full_path(relative_path).is_file()
        except (OSError, StorageError) as e:
            logger.error(f"Failed to check file existence: {relative_path}: {e}")
            return False
