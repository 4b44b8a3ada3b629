"""Pytest fixtures for API integration tests.

Each test gets a fresh application on an in-memory SQLite database. The
lifespan creates the schema, so the client is always used as a context
manager. Cloudinary is replaced by an in-memory fake.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import SecretStr

from atelier.presentation.api.app import API_V1_PREFIX, create_app
from atelier.presentation.api.dependencies import get_image_storage
from atelier_config.settings import Settings
from tests.shared.fixtures.api import (
    FakeImageStorage,
    bearer,
    promote_to_admin,
    register,
)


@pytest.fixture
def api_v1_prefix() -> str:
    """Get the API v1 prefix for building URLs."""
    return API_V1_PREFIX


@pytest.fixture
def api_settings() -> Settings:
    """Test API settings with debug enabled."""
    return Settings(
        # Required security settings
        jwt_access_secret=SecretStr("test-access-secret-for-testing-only"),
        jwt_refresh_secret=SecretStr("test-refresh-secret-for-testing-only"),
        environment="development",
        database_url="sqlite+aiosqlite:///:memory:",
        # API settings
        api_host="127.0.0.1",
        api_port=8000,
        api_debug=True,
        api_cors_origins="http://localhost:3000",
        api_cookie_secure=False,  # Allow HTTP in tests
        bcrypt_rounds=4,
        max_image_size_bytes=1024,
        log_level="WARNING",
    )


@pytest.fixture
def image_storage() -> FakeImageStorage:
    return FakeImageStorage()


@pytest.fixture
def app(api_settings, image_storage) -> FastAPI:
    app = create_app(settings=api_settings)
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    return app


@pytest.fixture
def test_client(app):
    """Create a test client with an in-memory database."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def registered_user(test_client) -> dict:
    """Register a user and return the register response body."""
    return register(test_client)


@pytest.fixture
def auth_headers(registered_user) -> dict:
    """Get auth headers for a registered user."""
    return bearer(registered_user["token"])


@pytest.fixture
def admin_headers(test_client, app) -> dict:
    body = register(test_client, name="Boss", email="boss@example.com")
    promote_to_admin(test_client, app, "boss@example.com")
    return bearer(body["token"])
