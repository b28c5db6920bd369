"""Admin allow-list lookups."""
from typing import Iterable, Optional
from sqlalchemy.orm import Session
import logging

from src.app.config import settings
from src.models.user import User

logger = logging.getLogger(__name__)


class AdminService:
    """Answers "is this person an admin" from config and the users table."""

    def __init__(self, admin_emails: Optional[Iterable[str]] = None):
        if admin_emails is None:
            admin_emails = settings.admin_users
        self._admin_emails = [email.strip().lower() for email in admin_emails if email.strip()]

    def is_admin_user(self, email: Optional[str]) -> bool:
        """Case-insensitive check against the configured allow-list."""
        if not email:
            return False
        return email.strip().lower() in self._admin_emails

    def get_admin_emails(self) -> list[str]:
        return list(self._admin_emails)

    @staticmethod
    def is_user_admin(db: Session, user_id: int) -> bool:
        user = db.query(User).filter(User.id == user_id).first()
        return bool(user and user.is_admin)
