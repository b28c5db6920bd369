"""
Shared test configuration.

Environment is set before anything under ``src`` is imported because
settings, the engine and the rate limiter are created at import time.
"""
import os
import tempfile

_storage_root = tempfile.mkdtemp(prefix="albumapp-tests-")

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("ADMIN_USERS", "admin@example.com")
os.environ.setdefault("PICTURE_DIRECTORY", os.path.join(_storage_root, "pict"))
os.environ.setdefault("THUMBNAIL_DIRECTORY", os.path.join(_storage_root, "thumb"))
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from datetime import datetime

import pytest
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.db.base import Base
from src.models import MediaFile, MediaType, User
from src.services.media.thumbnails import ThumbnailService
from src.services.storage.local import FileStorageService


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, autoflush=False)
    session = Session()
    yield session
    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def storage(tmp_path):
    return FileStorageService(str(tmp_path / "pict"))


@pytest.fixture
def thumbnail_service(tmp_path):
    return ThumbnailService(str(tmp_path / "thumb"), max_size=300)


@pytest.fixture
def make_user(db_session):
    """Factory for persisted users."""
    def _make_user(email="member@example.com", name="Member", is_admin=False, google_id=None):
        user = User(email=email, name=name, is_admin=is_admin, google_id=google_id)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_media(db_session):
    """Factory for persisted media rows (no files on disk)."""
    counter = {"n": 0}

    def _make_media(uploader, taken_at=None, uploaded_at=None, thumbnail_path="", **kwargs):
        counter["n"] += 1
        taken_at = taken_at or datetime(2024, 3, 15, 12, 0, 0)
        media = MediaFile(
            file_name=kwargs.pop("file_name", f"file-{counter['n']}.jpg"),
            original_file_name=kwargs.pop("original_file_name", f"IMG_{counter['n']}.jpg"),
            file_path=kwargs.pop("file_path", f"{taken_at:%Y%m%d}/file-{counter['n']}.jpg"),
            thumbnail_path=thumbnail_path,
            content_type=kwargs.pop("content_type", "image/jpeg"),
            media_type=kwargs.pop("media_type", MediaType.image),
            file_size=kwargs.pop("file_size", 1024),
            taken_at=taken_at,
            uploaded_at=uploaded_at or datetime(2024, 4, 1, 8, 0, 0),
            uploaded_by=uploader.id,
            **kwargs,
        )
        db_session.add(media)
        db_session.commit()
        db_session.refresh(media)
        return media
    return _make_media


@pytest.fixture
def sample_jpeg(tmp_path):
    """A 640x480 JPEG on disk."""
    path = tmp_path / "sample.jpg"
    Image.new("RGB", (640, 480), color=(200, 30, 30)).save(path, "JPEG")
    return path
