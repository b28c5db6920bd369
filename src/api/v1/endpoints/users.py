"""User management endpoints (admin only)."""
from typing import List
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.deps import get_current_admin
from src.app.dependencies import get_admin_service
from src.app.exceptions import ApiError
from src.db.base import get_db
from src.models.user import User
from src.repositories.user_repo import UserRepository
from src.schemas.common import ApiResponse
from src.schemas.user import (
    CreateUserRequest,
    UpdateUserRequest,
    UserDetails,
    UserListItem,
)
from src.services.admin import AdminService

logger = logging.getLogger(__name__)

router = APIRouter()


def to_details(user: User, media_count: int) -> UserDetails:
    return UserDetails(
        id=user.id,
        email=user.email,
        name=user.name,
        is_admin=user.is_admin,
        created_at=user.created_at,
        last_login_at=user.last_login_at,
        media_files_count=media_count,
        google_id=user.google_id,
    )


@router.get("", response_model=ApiResponse[List[UserListItem]])
def list_users(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """All users with their upload counts, ordered by e-mail."""
    rows = UserRepository(db).list_with_media_counts()
    items = [
        UserListItem(
            id=user.id,
            email=user.email,
            name=user.name,
            is_admin=user.is_admin,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
            media_files_count=count,
        )
        for user, count in rows
    ]
    return ApiResponse[List[UserListItem]].ok(items)


@router.get("/{user_id}", response_model=ApiResponse[UserDetails])
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    row = UserRepository(db).get_with_media_count(user_id)
    if row is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", "User not found")
    return ApiResponse[UserDetails].ok(to_details(*row))


@router.post("", response_model=ApiResponse[UserDetails], status_code=status.HTTP_201_CREATED)
def create_user(
    payload: CreateUserRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    """
    Pre-register a member.

    Allow-listed e-mails always become admins.
    """
    repo = UserRepository(db)
    if repo.get_by_email(payload.email):
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "USER_EXISTS",
            "A user with this e-mail already exists"
        )

    user = repo.create_user(
        email=payload.email,
        name=payload.name.strip(),
        is_admin=payload.is_admin or admin_service.is_admin_user(payload.email),
    )
    logger.info(f"User created by {current_admin.email}: {user.email} (admin={user.is_admin})")
    return ApiResponse[UserDetails].ok(to_details(user, 0), "User created successfully")


@router.put("/{user_id}", response_model=ApiResponse[UserDetails])
def update_user(
    user_id: int,
    payload: UpdateUserRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    """Update name and admin flag. Allow-listed admins cannot be demoted."""
    repo = UserRepository(db)
    user = repo.get(user_id)
    if user is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", "User not found")

    changes = {}
    if payload.name and payload.name.strip():
        changes["name"] = payload.name.strip()
    if payload.is_admin is not None:
        changes["is_admin"] = payload.is_admin or admin_service.is_admin_user(user.email)

    user = repo.update(user_id, changes)
    logger.info(f"User updated by {current_admin.email}: {user.email} (admin={user.is_admin})")
    return ApiResponse[UserDetails].ok(
        to_details(user, repo.media_count(user.id)),
        "User updated successfully"
    )


@router.delete("/{user_id}", response_model=ApiResponse[None])
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Delete a user that owns no media."""
    repo = UserRepository(db)
    user = repo.get(user_id)
    if user is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", "User not found")

    if repo.media_count(user_id) > 0:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "USER_HAS_MEDIA",
            "Cannot delete a user who still owns media files"
        )

    email = user.email
    repo.delete(user_id)
    logger.info(f"User deleted by {current_admin.email}: {email}")
    return ApiResponse[None].ok(message="User deleted successfully")
