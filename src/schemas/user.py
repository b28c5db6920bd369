"""User management schemas (admin only)."""
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from src.schemas.common import CamelModel


class UserListItem(CamelModel):
    id: int
    email: str
    name: str
    is_admin: bool
    created_at: datetime
    last_login_at: datetime
    media_files_count: int = 0


class UserDetails(UserListItem):
    google_id: Optional[str] = None


class CreateUserRequest(CamelModel):
    """Pre-register a member so they can sign in with Google."""
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
    is_admin: bool = False


class UpdateUserRequest(CamelModel):
    """Blank or missing fields are left unchanged."""
    name: Optional[str] = Field(None, max_length=255)
    is_admin: Optional[bool] = None
