"""
Database Dependencies for FastAPI Routes

Routes declare what they need and FastAPI provides it:

    @router.get("/me")
    async def me(db: AsyncSession = Depends(get_db)):
        ...

    @router.get("/profile/{segment}")
    async def get_public(segment: str, store: ProfileStoreDep):
        ...

Two flavours are exposed:

1. ``get_db``: one AsyncSession per request, for simple
   lookups (auth, user rows).
2. ``get_profile_store`` / ``ProfileStoreDep``: the ProfileStore, which
   opens its own sessions so it can run a whole aggregate write in one
   transaction and read the aggregate back in one statement.

Tests swap either one through ``app.dependency_overrides``.

Learning Resources:
- FastAPI Dependencies: https://fastapi.tiangolo.com/tutorial/dependencies/
"""

from collections.abc import AsyncGenerator, Callable
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import AsyncSessionLocal, get_session
from app.services.profile_store import ProfileStore


# ================================
# Database Session Dependency
# ================================

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session.

    The session is rolled back on error and always closed afterwards.
    Changes must be committed explicitly: ``await db.commit()``.

    Yields:
        AsyncSession: Database session for the current request
    """
    async for session in get_session():
        yield session


# ================================
# Profile Store Dependency
# ================================

_profile_store = ProfileStore(AsyncSessionLocal)


def get_profile_store() -> ProfileStore:
    """Provide the process-wide ProfileStore bound to the main engine."""
    return _profile_store


ProfileStoreDep = Annotated[ProfileStore, Depends(get_profile_store)]


# ================================
# Testing Helpers
# ================================

def get_db_override(
    session_factory: Callable[[], AsyncSession],
) -> Callable[[], AsyncGenerator[AsyncSession, None]]:
    """
    Create a ``get_db`` override backed by another session factory.

    Usage in Tests:
        app.dependency_overrides[get_db] = get_db_override(test_session_factory)
        ...
        app.dependency_overrides.clear()

    Args:
        session_factory: Factory producing sessions on the test database

    Returns:
        A dependency that yields a fresh session per request
    """
    async def _override() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    return _override


__all__ = [
    "get_db",
    "get_profile_store",
    "ProfileStoreDep",
    "get_db_override",
]
