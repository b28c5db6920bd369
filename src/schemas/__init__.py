"""
API schemas package.

Request/response models for authentication, media and user management.
All of them serialize with camelCase keys.
"""

from .common import ApiResponse, CamelModel, PagedResult
from .auth import AuthResponse, GoogleLoginRequest, UserInfo
from .media import MediaFileResponse, MediaUploadResponse
from .user import CreateUserRequest, UpdateUserRequest, UserDetails, UserListItem

__all__ = [
    "ApiResponse",
    "CamelModel",
    "PagedResult",
    "AuthResponse",
    "GoogleLoginRequest",
    "UserInfo",
    "MediaFileResponse",
    "MediaUploadResponse",
    "CreateUserRequest",
    "UpdateUserRequest",
    "UserDetails",
    "UserListItem",
]
