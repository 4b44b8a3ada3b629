"""Database engine and session factory."""

import logging
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from atelier.infrastructure.persistence.sqlalchemy.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the async engine (connection pool) and the session factory.

    Created once per application and closed on shutdown with ``dispose``.

    Parameters
    ----------
    url
        SQLAlchemy async database URL, e.g. ``postgresql+asyncpg://...`` or
        ``sqlite+aiosqlite:///./data/atelier.db``
    echo
        Log every SQL statement
    """

    def __init__(self, url: str, echo: bool = False):
        self._url = url
        self._engine = create_async_engine(url, echo=echo, **self._engine_options(url))
        self._session_maker = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @staticmethod
    def _engine_options(url: str) -> dict:
        parsed = make_url(url)
        if not parsed.drivername.startswith("sqlite"):
            return {"pool_pre_ping": True}

        database = parsed.database or ""
        if database in ("", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty DB
            return {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }

        Path(database).parent.mkdir(parents=True, exist_ok=True)
        return {}

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        return self._session_maker

    def session(self) -> AsyncSession:
        return self._session_maker()

    async def create_schema(self) -> None:
        """Create all missing tables (idempotent)."""
        logger.info("Ensuring all database tables exist...")
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema is up to date")

    async def drop_schema(self) -> None:
        """Drop all tables. Intended for tests and development resets."""
        logger.warning("Dropping all database tables...")
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self._engine.dispose()
        logger.info("Database connections closed")

    def __repr__(self) -> str:
        safe_url = make_url(self._url).render_as_string(hide_password=True)
        return f"Database(url={safe_url!r})"
