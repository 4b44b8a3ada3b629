"""Fixtures for repository tests against an in-memory SQLite database."""

import pytest

from atelier.infrastructure.persistence.sqlalchemy import Database


@pytest.fixture
async def database():
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_schema()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session() as session:
        yield session
