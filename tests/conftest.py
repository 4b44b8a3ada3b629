"""Root pytest configuration.

Test Structure:
    tests/
    ├── unit/                  # Fast, isolated tests (no database)
    │   ├── atelier_auth/      # Password hashing, JWT tokens
    │   ├── atelier_config/    # Settings
    │   ├── domain/            # Entities and the error taxonomy
    │   ├── application/       # Services with mocked repositories
    │   ├── infrastructure/    # Google and Cloudinary adapters
    │   └── presentation/      # Error normalization and rendering
    ├── integration/           # aiosqlite databases, no network
    │   ├── persistence/       # SQLAlchemy repositories
    │   ├── api/               # FastAPI TestClient end to end
    │   └── cli/               # Typer commands
    └── shared/fixtures/       # Helpers imported by the tests

Environment Variables:
    No external services are needed. JWT secrets are set below so that
    ``get_settings()`` works without a .env file.
"""

import os

import pytest

from atelier_config import clear_settings_cache

TEST_ACCESS_SECRET = "test-access-secret-for-testing-only"  # NOQA: S105
TEST_REFRESH_SECRET = "test-refresh-secret-for-testing-only"  # NOQA: S105

os.environ.setdefault("JWT_ACCESS_SECRET", TEST_ACCESS_SECRET)
os.environ.setdefault("JWT_REFRESH_SECRET", TEST_REFRESH_SECRET)


@pytest.fixture(scope="session", autouse=True)
def configure_app_settings():
    """Start every test session with freshly loaded settings."""
    clear_settings_cache()
    yield
    clear_settings_cache()
