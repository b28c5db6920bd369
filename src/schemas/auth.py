"""Authentication schemas."""
from pydantic import Field

from src.schemas.common import CamelModel


class GoogleLoginRequest(CamelModel):
    """Google ID token obtained by the SPA."""
    id_token: str = ""


class UserInfo(CamelModel):
    """Identity of the logged-in user."""
    id: int
    email: str
    name: str
    is_admin: bool


class AuthResponse(CamelModel):
    """Issued access token."""
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserInfo
