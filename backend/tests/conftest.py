"""
DevHelper Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file (aiosqlite) with the schema
       created from the ORM metadata, a mock text generator, and an app
       built by create_app() around both. No PostgreSQL and no Gemini calls.

Fixture Hierarchy:
    mock_db_session    AsyncMock standing in for AsyncSession (error paths)
    settings           Settings pointing at a per-test SQLite file
    database           opened Database with all tables created
    db_session         AsyncSession on that database
    fake_generator     AsyncMock implementing TextGenerator
    app                create_app(settings, database, fake_generator)
    test_client        HTTPX AsyncClient over ASGITransport (cookie jar kept)
    login              async helper: register + log in a user on a client
"""

import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Override settings for testing BEFORE any devhelper imports; the service
# singletons read them at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["GEMINI_API_KEY"] = "test-key-not-real"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from devhelper.config import Settings  # noqa: E402
from devhelper.database import Database  # noqa: E402
from devhelper.main import create_app  # noqa: E402
from devhelper.services.llm_base import TextGenerator  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_list_fails(mock_db_session):
            mock_db_session.execute.side_effect = SQLAlchemyError("down")
            with pytest.raises(DatabaseError):
                await snippet_service.list_snippets(mock_db_session, user_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'devhelper.db'}",
        session_secret="test-session-secret",
        gemini_api_key="test-key-not-real",
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(settings) -> AsyncGenerator[Database, None]:
    db = Database(settings)
    db.open()
    await db.create_all()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
def fake_generator():
    generator = AsyncMock(spec=TextGenerator)
    generator.generate.return_value = "def add(a, b):\n    return a + b\n"
    generator.health_check.return_value = True
    return generator


@pytest.fixture
def app(settings, database, fake_generator):
    return create_app(config=settings, database=database, generator=fake_generator)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    Redirects are not followed, so tests can assert on 303 + Location.
    The lifespan does not run; the `database` fixture has already opened
    the store.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def other_client(app):
    """A second browser, for ownership tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def login():
    """
    Register (if needed) and log in `username` on `client`.

    Usage:
        await login(test_client, "alice")
    """

    async def _login(client: AsyncClient, username: str = "alice", password: str = "s3cret!"):
        await client.post("/register", data={"username": username, "password": password})
        response = await client.post("/login", data={"username": username, "password": password})
        assert response.status_code == 303
        assert response.headers["location"] == "/snippets"
        return response

    return _login
