"""Authentication endpoints."""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
import logging

from src.app.config import settings
from src.app.dependencies import get_google_auth_service
from src.app.exceptions import ApiError
from src.db.base import get_db
from src.models.user import User
from src.schemas.auth import AuthResponse, GoogleLoginRequest, UserInfo
from src.schemas.common import ApiResponse
from src.services.auth.google import GoogleAuthService
from src.core.rate_limiter import limiter
from src.core.security import create_access_token, token_expires_in_seconds
from src.api.deps import get_current_user, get_client_ip

logger = logging.getLogger(__name__)

router = APIRouter()


def to_user_info(user: User) -> UserInfo:
    return UserInfo(id=user.id, email=user.email, name=user.name, is_admin=user.is_admin)


@router.post("/google-login", response_model=ApiResponse[AuthResponse])
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def google_login(
    request: Request,
    payload: GoogleLoginRequest,
    db: Session = Depends(get_db),
    google_auth: GoogleAuthService = Depends(get_google_auth_service)
):
    """
    Exchange a Google ID token for an API access token.

    - Only pre-registered users and allow-listed admins are accepted
    - The first login links the Google account to the user
    """
    if not payload.id_token or not payload.id_token.strip():
        raise ApiError(status.HTTP_400_BAD_REQUEST, "INVALID_REQUEST", "ID token is required")

    user = google_auth.authenticate(db, payload.id_token.strip())
    if user is None:
        logger.warning(f"Google login rejected from {get_client_ip(request)}")
        raise ApiError(
            status.HTTP_401_UNAUTHORIZED,
            "UNAUTHORIZED",
            "Invalid Google token or user not authorized"
        )

    auth = AuthResponse(
        access_token=create_access_token(user),
        token_type="Bearer",
        expires_in=token_expires_in_seconds(),
        user=to_user_info(user),
    )
    logger.info(f"User logged in successfully: {user.email}")
    return ApiResponse[AuthResponse].ok(auth, "Login successful")


@router.get("/user-info", response_model=ApiResponse[UserInfo])
def user_info(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Return the identity behind the bearer token."""
    user = db.query(User).filter(User.id == current_user.id).first()
    if user is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", "User not found")
    return ApiResponse[UserInfo].ok(to_user_info(user))


@router.post("/logout", response_model=ApiResponse[None])
def logout(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the client drops its copy."""
    logger.info(f"User logged out: {current_user.email}")
    return ApiResponse[None].ok(message="Logout successful")


@router.get("/validate-token", response_model=ApiResponse[None])
def validate_token(current_user: User = Depends(get_current_user)):
    return ApiResponse[None].ok(message="Token is valid")
