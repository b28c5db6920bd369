"""Media file repository for database operations."""
from sqlalchemy.orm import Session
from sqlalchemy import func, desc
from typing import Optional, List, Tuple
import logging

from src.app.config import settings
from src.repositories.base import BaseRepository
from src.models.media_file import MediaFile

logger = logging.getLogger(__name__)


class MediaRepository(BaseRepository[MediaFile]):
    """Repository for media file database operations."""

    def __init__(self, db: Session):
        super().__init__(MediaFile, db)

    @staticmethod
    def normalize_paging(page: Optional[int], page_size: Optional[int]) -> Tuple[int, int]:
        """Clamp page to >= 1 and page size to [1, MAX_PAGE_SIZE]."""
        page = page if page and page > 0 else 1
        if page_size is None:
            page_size = settings.DEFAULT_PAGE_SIZE
        page_size = max(1, min(page_size, settings.MAX_PAGE_SIZE))
        return page, page_size

    def get_page(
        self,
        page: Optional[int] = 1,
        page_size: Optional[int] = None
    ) -> Tuple[List[MediaFile], int, int, int]:
        """
        Get one page of media, newest capture date first.

        Args:
            page: 1-based page number
            page_size: Items per page

        Returns:
            Tuple of (items, total count, effective page, effective page size)
        """
        page, page_size = self.normalize_paging(page, page_size)

        total = self.db.query(func.count(MediaFile.id)).scalar() or 0
        items = (
            self.db.query(MediaFile)
            .order_by(
                desc(MediaFile.taken_at),
                desc(MediaFile.uploaded_at),
                desc(MediaFile.id),
            )
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return items, total, page, page_size

    def add_media_file(self, media: MediaFile) -> MediaFile:
        self.db.add(media)
        self.db.commit()
        self.db.refresh(media)
        logger.info(f"Media file added: id={media.id}, path={media.file_path}")
        return media

    def get_media_file(self, media_id: int) -> Optional[MediaFile]:
        return self.get(media_id)

    def delete_media_file(self, media_id: int) -> bool:
        deleted = self.delete(media_id)
        if deleted:
            logger.info(f"Media file deleted: id={media_id}")
        return deleted

    def count_by_uploader(self, user_id: int) -> int:
        return self.count(filters={"uploaded_by": user_id})
