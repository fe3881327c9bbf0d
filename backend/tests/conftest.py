"""
TechNotes Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (mocked DB, real in-memory DB,
       API client, bearer tokens).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for pure unit tests
    ├── db_engine: in-memory SQLite (aiosqlite) with all tables created
    ├── session_factory / db_session: real AsyncSessions on that engine
    ├── test_client: HTTPX AsyncClient wired to the app, DB dependency overridden
    └── auth_headers: Authorization header with a valid bearer token
"""

import os
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

# Override settings BEFORE any technotes import: the settings singleton and
# the module-level engine are created at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ACCESS_TOKEN_SECRET"] = "test-access-token-secret-0123456789abcdef"
os.environ["BCRYPT_ROUNDS"] = "4"  # Fast hashing in tests
os.environ["LOG_LEVEL"] = "WARNING"

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import technotes.models  # noqa: F401  (registers tables with Base)
from technotes.config import settings
from technotes.database import Base, get_db_session


def make_token(username="admin", roles=None, secret=None, expires_in=timedelta(minutes=15)):
    """Build a signed access token shaped like the ones the login service issues."""
    payload = {
        "UserInfo": {"username": username, "roles": roles or ["Admin"]},
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(
        payload,
        secret or settings.access_token_secret,
        algorithm=settings.jwt_algorithm,
    )


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_x(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite database with the full schema.

    StaticPool keeps ONE connection, so every session in the test sees the
    same in-memory database. Foreign keys are switched on so ON DELETE
    RESTRICT behaves as it does on PostgreSQL.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """A real AsyncSession for service-level tests."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    Provides an async HTTP test client for endpoint testing.

    How:   ASGITransport routes requests straight into the app; the
           get_db_session dependency is swapped for one bound to the
           in-memory test database.
    """
    from technotes.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Authorization header carrying a valid bearer token."""
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def token_factory():
    """Returns make_token() so tests can build expired or foreign-signed tokens."""
    return make_token
