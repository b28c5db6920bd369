"""Google Sign-In: verify the ID token and map it onto a local user."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
import logging

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token

from src.app.config import settings
from src.models.user import User
from src.repositories.user_repo import UserRepository
from src.services.admin import AdminService

logger = logging.getLogger(__name__)


@dataclass
class GoogleIdentity:
    """The subset of the ID token payload we use."""
    subject: str
    email: str
    name: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "GoogleIdentity":
        return cls(
            subject=str(payload["sub"]),
            email=str(payload.get("email", "")).strip().lower(),
            name=payload.get("name") or None,
        )


class GoogleAuthService:
    """Authenticates Google ID tokens against pre-registered users and the admin allow-list."""

    def __init__(
        self,
        client_id: Optional[str] = None,
        admin_service: Optional[AdminService] = None
    ):
        self.client_id = settings.GOOGLE_CLIENT_ID if client_id is None else client_id
        self.admin_service = admin_service or AdminService()

    def verify_token(self, token: str) -> Optional[GoogleIdentity]:
        """
        Validate the ID token with Google's public keys.

        Returns:
            GoogleIdentity or None when the token is rejected
        """
        try:
            payload = google_id_token.verify_oauth2_token(
                token, google_requests.Request(), audience=self.client_id
            )
        except (ValueError, google_exceptions.GoogleAuthError) as e:
            logger.warning(f"Google token validation failed: {e}")
            return None

        if not payload.get("email"):
            logger.warning("Google token carries no e-mail")
            return None
        return GoogleIdentity.from_payload(payload)

    def authenticate(self, db: Session, token: str) -> Optional[User]:
        """
        Log a user in with a Google ID token.

        Only users already registered by e-mail or allow-listed admins
        may sign in. A first login links the Google account to the row.
        """
        if not self.client_id:
            logger.error("Google client id is not configured")
            return None

        identity = self.verify_token(token)
        if identity is None:
            return None

        repo = UserRepository(db)
        now = datetime.utcnow()

        user = repo.get_by_google_id(identity.subject)
        if user:
            user.last_login_at = now
            repo.commit()
            logger.info(f"User logged in: {user.email}")
            return user

        is_admin = self.admin_service.is_admin_user(identity.email)
        user = repo.get_by_email(identity.email)

        if user is None and not is_admin:
            logger.warning(f"User not authorized: {identity.email}")
            return None

        if user:
            user.google_id = identity.subject
            if identity.name:
                user.name = identity.name
            if is_admin:
                user.is_admin = True
            user.last_login_at = now
            repo.commit()
            repo.refresh(user)
            logger.info(f"Google account linked for user: {user.email}")
            return user

        user = repo.create_user(
            email=identity.email,
            name=identity.name or identity.email,
            is_admin=True,
            google_id=identity.subject,
            last_login_at=now,
        )
        logger.info(f"Admin user created on first login: {user.email}")
        return user
