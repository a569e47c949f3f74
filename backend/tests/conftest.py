"""
Pytest configuration and fixtures.

This file is automatically discovered by pytest and provides
shared fixtures for all test modules.

Every test gets its own SQLite database file (aiosqlite, NullPool) with the
schema created from the models, a ProfileStore bound to it, and an
in-memory theme snapshot cache. The API client routes all of them into the
app through ``app.dependency_overrides``.

References:
-----------
- Pytest Fixtures: https://docs.pytest.org/en/stable/fixture.html
- FastAPI Testing: https://fastapi.tiangolo.com/tutorial/testing/
"""

import os
import tempfile
from collections.abc import AsyncGenerator
from datetime import timedelta
from pathlib import Path

# Settings are read at import time, so the environment must be in place
# before anything under ``app`` is imported.
_TEST_DIR = Path(tempfile.mkdtemp(prefix="linkpage-tests-"))
os.environ["APP_ENV"] = "testing"
os.environ["DEBUG"] = "false"
os.environ["SECRET_KEY"] = "linkpage-test-suite-signing-key-0123456789abcdef"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR / 'app.db'}"
os.environ["THEME_CACHE_BACKEND"] = "memory"
os.environ["PUBLIC_BASE_URL"] = "https://links.test/"
os.environ["LOG_FORMAT"] = "text"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

import app.models  # noqa: E402, F401
from app.core.security import create_access_token  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.deps import get_db, get_db_override, get_profile_store  # noqa: E402
from app.db.session import create_session_factory  # noqa: E402
from app.main import app  # noqa: E402
from app.services.profile_store import ProfileStore  # noqa: E402
from app.services.theme.cache import InMemorySnapshotCache, get_snapshot_cache  # noqa: E402


# ================================
# Database Fixtures
# ================================

@pytest_asyncio.fixture
async def test_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Engine on a fresh SQLite file with all tables created.

    NullPool hands every session its own connection, so sessions opened
    by the store and by a test never share one.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(test_engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A plain session for arranging rows directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(session_factory) -> ProfileStore:
    return ProfileStore(session_factory)


@pytest.fixture
def snapshot_cache() -> InMemorySnapshotCache:
    return InMemorySnapshotCache()


# ================================
# FastAPI Client Fixtures
# ================================

@pytest_asyncio.fixture
async def client(
    session_factory,
    store: ProfileStore,
    snapshot_cache: InMemorySnapshotCache,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client talking to the app in-process.

    Usage:
        async def test_something(client: AsyncClient):
            response = await client.get("/api/profile/jane-doe")
            assert response.status_code == 200
    """
    app.dependency_overrides[get_db] = get_db_override(session_factory)
    app.dependency_overrides[get_profile_store] = lambda: store
    app.dependency_overrides[get_snapshot_cache] = lambda: snapshot_cache

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ================================
# User Fixtures
# ================================

@pytest.fixture
def sample_user_data() -> dict:
    """Registration payload; the display name becomes slug "jane-doe"."""
    return {
        "displayName": "Jane Doe",
        "email": "jane@example.com",
        "password": "secret1",
    }


@pytest_asyncio.fixture
async def registered_user(client: AsyncClient, sample_user_data: dict) -> dict:
    """
    Register Jane through the API.

    Returns the register response body: {"user": {...}, "token": "..."}
    """
    response = await client.post("/api/auth/register", json=sample_user_data)
    assert response.status_code == 201, response.text
    return response.json()


@pytest_asyncio.fixture
async def other_user(client: AsyncClient) -> dict:
    response = await client.post(
        "/api/auth/register",
        json={"displayName": "John Roe", "email": "john@example.com", "password": "secret2"},
    )
    assert response.status_code == 201, response.text
    return response.json()


# ================================
# Authentication Fixtures
# ================================

@pytest.fixture
def auth_headers(registered_user: dict) -> dict[str, str]:
    """
    Authorization header carrying Jane's token.

    Usage:
        async def test_protected_endpoint(client: AsyncClient, auth_headers: dict):
            response = await client.get("/api/auth/me", headers=auth_headers)
            assert response.status_code == 200
    """
    return {"Authorization": f"Bearer {registered_user['token']}"}


@pytest.fixture
def expired_token(registered_user: dict) -> str:
    """A correctly signed token for Jane that expired an hour ago."""
    return create_access_token(
        data={"sub": registered_user["user"]["id"]},
        expires_delta=timedelta(hours=-1),
    )
