"""User repository for database operations."""
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Optional, List, Tuple
from datetime import datetime

from src.repositories.base import BaseRepository
from src.models.user import User
from src.models.media_file import MediaFile


class UserRepository(BaseRepository[User]):
    """Repository for user database operations."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def get_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive e-mail lookup."""
        if not email:
            return None
        return (
            self.db.query(User)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )

    def get_by_google_id(self, google_id: str) -> Optional[User]:
        if not google_id:
            return None
        return self.get_by_field('google_id', google_id)

    def _with_media_counts(self):
        media_count = func.count(MediaFile.id).label('media_files_count')
        return (
            self.db.query(User, media_count)
            .outerjoin(MediaFile, MediaFile.uploaded_by == User.id)
            .group_by(User.id)
        )

    def list_with_media_counts(self) -> List[Tuple[User, int]]:
        """
        All users with the number of files each uploaded.

        Returns:
            List of (user, media count) ordered by e-mail
        """
        rows = self._with_media_counts().order_by(User.email).all()
        return [(user, count) for user, count in rows]

    def get_with_media_count(self, user_id: int) -> Optional[Tuple[User, int]]:
        row = self._with_media_counts().filter(User.id == user_id).first()
        if row is None:
            return None
        return row[0], row[1]

    def create_user(
        self,
        email: str,
        name: str,
        is_admin: bool = False,
        google_id: Optional[str] = None,
        last_login_at: Optional[datetime] = None
    ) -> User:
        """
        Create new user record. E-mail is stored lower-case.

        Args:
            email: E-mail address
            name: Display name
            is_admin: Admin flag
            google_id: Google subject id, when already known
            last_login_at: Defaults to now

        Returns:
            Created User instance
        """
        user_dict = {
            'email': email.strip().lower(),
            'name': name,
            'is_admin': is_admin,
            'google_id': google_id or None,
        }
        if last_login_at:
            user_dict['last_login_at'] = last_login_at
        return self.create(user_dict)

    def media_count(self, user_id: int) -> int:
        return (
            self.db.query(func.count(MediaFile.id))
            .filter(MediaFile.uploaded_by == user_id)
            .scalar()
        ) or 0
