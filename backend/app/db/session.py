"""
Database Session Management

This module handles the database connection lifecycle and session management.

Architecture Flow:
------------------
Application Start → Create Engine → Connection Pool Ready
↓
API Request → Get Session → Execute Queries → Commit/Rollback → Close Session
↓
Application Shutdown → Dispose Engine → Close All Connections

Drivers:
--------
- postgresql+asyncpg://  deployment
- sqlite+aiosqlite://    test-suite and quick local runs

Learning Resources:
- SQLAlchemy Engine: https://docs.sqlalchemy.org/en/20/core/engines.html
- Async Sessions: https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


# ================================
# Database Engine Configuration
# ================================

def get_engine_config() -> dict[str, Any]:
    """
    Configure the database engine based on environment and driver.

    Pool Types:
    -----------
    1. AsyncAdaptedQueuePool (development/production on PostgreSQL):
       - Keeps DB_POOL_SIZE connections open
       - Can open DB_MAX_OVERFLOW extra connections under load
       - pool_pre_ping detects connections dropped by the server

    2. NullPool (testing/staging, and always for SQLite):
       - Opens a connection per checkout and closes it afterwards
       - ProfileStore.get_profile reads on three sessions at once, and
         each gets its own SQLite connection this way
    """
    config: dict[str, Any] = {
        "echo": settings.DB_ECHO,
    }

    if settings.uses_sqlite:
        logger.info(
            "configuring_database_engine",
            environment=settings.APP_ENV,
            pool_type="NullPool",
            driver="aiosqlite",
        )
        config["poolclass"] = NullPool
        return config

    config.update({
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        # Tag our connections in pg_stat_activity
        "connect_args": {
            "server_settings": {
                "application_name": settings.APP_NAME,
            }
        },
    })

    if settings.is_development or settings.is_production:
        logger.info(
            "configuring_database_engine",
            environment=settings.APP_ENV,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )
        config.update({
            "poolclass": AsyncAdaptedQueuePool,
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_timeout": 30,
        })
        if settings.is_production:
            config["pool_recycle"] = 7200

    else:
        logger.info(
            "configuring_database_engine",
            environment=settings.APP_ENV,
            pool_type="NullPool",
        )
        config["poolclass"] = NullPool

    return config


def create_engine(url: str | None = None) -> AsyncEngine:
    """
    Create the async database engine.

    Args:
        url: Override for settings.DATABASE_URL (used by tests)

    Returns:
        AsyncEngine: The database engine instance
    """
    engine_config = get_engine_config()

    engine = create_async_engine(
        url or settings.DATABASE_URL,
        **engine_config
    )

    logger.info(
        "database_engine_created",
        dialect=engine.dialect.name,
        pool_size=engine_config.get("pool_size", "NullPool"),
    )

    return engine


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Build a session factory for ``bind``.

    expire_on_commit=False keeps loaded rows readable after commit, which
    the store relies on when converting rows to response models.
    """
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


# ================================
# Global Engine Instance
# ================================
# One engine per process; it owns the connection pool.
engine: AsyncEngine = create_engine()


# ================================
# Session Factory
# ================================
AsyncSessionLocal = create_session_factory(engine)


# ================================
# Session Lifecycle Functions
# ================================

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session for a single request.

    Code before yield opens the session, code after it runs even when the
    route raised: the transaction is rolled back and the session closed.

    Yields:
        AsyncSession: A database session for this request
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session

        except Exception as e:
            logger.error(
                "database_session_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Initialize the database.

    Verifies the connection; in development also creates missing tables.
    Other environments are expected to run ``alembic upgrade head``.

    Called from: app.main.lifespan() startup event
    """
    logger.info("initializing_database")

    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))

        logger.info("database_connection_successful")

        if settings.is_development:
            # Importing the models registers their tables on Base.metadata
            from app.db.base import Base
            import app.models  # noqa: F401

            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

            logger.info("database_tables_created")

    except Exception as e:
        logger.error(
            "database_initialization_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise


async def close_db() -> None:
    """
    Close the database connection pool.

    Called from: app.main.lifespan() shutdown event
    """
    logger.info("closing_database_connections")

    try:
        await engine.dispose()

        logger.info("database_connections_closed")

    except Exception as e:
        logger.error(
            "database_closure_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        # Don't raise - we're shutting down anyway


# ================================
# Database Health Check
# ================================

async def check_db_health() -> bool:
    """
    Check if the database is healthy and responsive.

    Returns:
        bool: True if database is healthy, False otherwise
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    except Exception as e:
        logger.error(
            "database_health_check_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        return False
