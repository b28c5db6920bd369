"""
Integration test configuration
"""
import pytest
from fastapi.testclient import TestClient

from src.app.main import app
from src.app.dependencies import (
    get_admin_service,
    get_file_storage,
    get_google_auth_service,
    get_metadata_service,
    get_thumbnail_service,
)
from src.core.security import create_access_token
from src.db.base import get_db
from src.services.admin import AdminService
from src.services.auth.google import GoogleAuthService
from src.services.media.metadata import MetadataService


@pytest.fixture
def admin_service():
    return AdminService(["admin@example.com"])


@pytest.fixture
def client(db_session, storage, thumbnail_service, admin_service):
    """FastAPI test client with dependency overrides."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_storage] = lambda: storage
    app.dependency_overrides[get_thumbnail_service] = lambda: thumbnail_service
    app.dependency_overrides[get_metadata_service] = lambda: MetadataService()
    app.dependency_overrides[get_admin_service] = lambda: admin_service
    app.dependency_overrides[get_google_auth_service] = lambda: GoogleAuthService(
        client_id="test-client-id", admin_service=admin_service
    )

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()


@pytest.fixture
def member(make_user):
    return make_user(email="member@example.com", name="Member")


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@example.com", name="Admin", is_admin=True)


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def member_headers(member):
    return auth_headers(member)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)
