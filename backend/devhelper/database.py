"""
DevHelper Backend — Database Handle & Session Management
==========================================================

What:  The `Database` handle (async engine + session factory), the declarative
       `Base`, and the per-request session dependency.
How:   One `Database` is created by the app factory and stored on
       `app.state.database`. The lifespan handler opens it at startup and
       disposes it at shutdown; nothing connects at import time.
Who:   Route handlers receive sessions through `Depends(get_db_session)`;
       tests build their own `Database` against a temporary SQLite file.

Connection pooling (PostgreSQL):
    pool_size / max_overflow come from settings; pool_pre_ping validates a
    connection before it is handed out; connections are recycled hourly.
    SQLite URLs (tests, local hacking) skip the pool sizing arguments.
"""

import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from devhelper.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic reads for migrations and the
    tests use for `create_all`.
    """
    pass


class Database:
    """
    Store handle with an explicit open/close lifecycle.

    Lifecycle:
        Database(settings)  → configured, not connected
        open()              → engine and session factory created
        session()           → new AsyncSession (one per request)
        close()             → pool disposed; handle can be reopened
    """

    def __init__(self, settings: Settings):
        self.url = settings.database_url
        self._settings = settings
        self.engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def open(self) -> None:
        if self.is_open:
            return

        kwargs = {"echo": self._settings.log_level == "DEBUG"}
        if not self._settings.is_sqlite:
            kwargs.update(
                pool_size=self._settings.db_pool_size,
                max_overflow=self._settings.db_max_overflow,
                pool_pre_ping=self._settings.db_pool_pre_ping,
                pool_recycle=3600,
            )

        self.engine = create_async_engine(self.url, **kwargs)
        # expire_on_commit=False: models stay readable after the service commits
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Database engine created for %s", self.engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        """Dispose all pooled connections. Safe to call on a closed handle."""
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self._session_factory = None
        logger.info("Database engine disposed")

    def session(self) -> AsyncSession:
        if self._session_factory is None:
            raise RuntimeError("Database is not open; call Database.open() first")
        return self._session_factory()

    async def create_all(self) -> None:
        """Create every table known to `Base.metadata` (tests and local dev)."""
        # Models register themselves with Base on import
        import devhelper.models  # noqa: F401

        if self.engine is None:
            raise RuntimeError("Database is not open; call Database.open() first")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Run SELECT 1; used by the health endpoint."""
        if self.engine is None:
            return False
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency providing one AsyncSession per request.

    Services commit their own writes. This dependency rolls back whatever is
    left uncommitted when the handler raises, and always closes the session
    so the connection returns to the pool.

    Example usage in a route:
        @router.get("/snippets")
        async def snippets(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
