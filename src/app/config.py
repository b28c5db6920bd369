"""Application configuration using Pydantic Settings."""
from functools import lru_cache
from typing import Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings (environment variables or .env)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = Field("Album App")
    ENVIRONMENT: str = Field("development")
    DEBUG: bool = Field(False)
    API_PREFIX: str = Field("/api")
    LOG_LEVEL: str = Field("INFO")
    CORS_ORIGINS: str = Field("http://localhost:4200")

    # Database
    DB_URL: Optional[str] = Field(None)
    DB_USER: str = Field("postgres")
    DB_PASSWORD: str = Field("postgres")
    DB_HOST: str = Field("localhost")
    DB_PORT: int = Field(5432)
    DB_NAME: str = Field("albumapp")
    DB_POOL_SIZE: int = Field(5)
    DB_MAX_OVERFLOW: int = Field(10)
    AUTO_CREATE_TABLES: bool = Field(False)

    @computed_field
    @property
    def DATABASE_URL(self) -> str:
        if self.DB_URL:
            return self.DB_URL
        return (
            f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    # JWT
    JWT_SECRET_KEY: str = Field(...)
    JWT_ALGORITHM: str = Field("HS256")
    JWT_ISSUER: str = Field("AlbumApp")
    JWT_AUDIENCE: str = Field("AlbumApp")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60)

    # Google OAuth
    GOOGLE_CLIENT_ID: str = Field("")

    # Comma separated e-mails that are always admins
    ADMIN_USERS: str = Field("")

    # File storage
    PICTURE_DIRECTORY: str = Field("/data/pict")
    THUMBNAIL_DIRECTORY: str = Field("/data/thumb")
    TEMP_DIRECTORY: str = Field("")
    MAX_FILE_SIZE_BYTES: int = Field(100 * 1024 * 1024)
    ALLOWED_EXTENSIONS: str = Field("jpg,jpeg,png,heic,mp4,mov")
    THUMBNAIL_MAX_SIZE: int = Field(300)
    FFPROBE_BINARY: str = Field("ffprobe")

    # Pagination
    DEFAULT_PAGE_SIZE: int = Field(20)
    MAX_PAGE_SIZE: int = Field(100)

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = Field(True)
    LOGIN_RATE_LIMIT: str = Field("10/minute")
    UPLOAD_RATE_LIMIT: str = Field("60/minute")

    @property
    def admin_users(self) -> list[str]:
        return [email.lower() for email in _split_csv(self.ADMIN_USERS)]

    @property
    def allowed_extensions(self) -> list[str]:
        return [ext.lower().lstrip(".") for ext in _split_csv(self.ALLOWED_EXTENSIONS)]

    @property
    def cors_origins(self) -> list[str]:
        return _split_csv(self.CORS_ORIGINS)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
