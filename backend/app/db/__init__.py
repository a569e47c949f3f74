"""Database utilities and session management."""

from app.db.base import Base, BaseModel, TimestampMixin, String50, String100, String255, String500, String2048
from app.db.session import (
    AsyncSessionLocal,
    check_db_health,
    close_db,
    create_session_factory,
    engine,
    get_session,
    init_db,
)

__all__ = [
    # Base classes
    "Base",
    "BaseModel",
    "TimestampMixin",
    # String types
    "String50",
    "String100",
    "String255",
    "String500",
    "String2048",
    # Session management
    "engine",
    "AsyncSessionLocal",
    "create_session_factory",
    "get_session",
    "init_db",
    "close_db",
    "check_db_health",
]
