"""
Database Base Classes and Common Utilities

This module provides the foundation for all database models in the application.

Key Concepts:
--------------
1. DeclarativeBase: SQLAlchemy's base class that enables ORM functionality
2. TimestampMixin: created_at / updated_at on every table
3. BaseModel: TimestampMixin plus an auto-incrementing integer id

Users carry their own string identifier (see app.core.identifiers), so the
``users`` table uses TimestampMixin directly; profile, link and theme rows
use BaseModel.

Learning Resources:
- SQLAlchemy Declarative Base: https://docs.sqlalchemy.org/en/20/orm/declarative_config.html
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, MetaData, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, registry


# ================================
# Naming Convention for Constraints
# ================================
# Consistent constraint names keep Alembic autogenerate stable.
#
# Format examples:
# - ix_links_user_id: Index on 'links' table, 'user_id' column
# - fk_profiles_user_id_users: Foreign key from 'profiles.user_id' to 'users'
# - uq_users_slug: Unique constraint on 'users.slug'
convention = {
    "ix": "ix_%(column_0_label)s",  # Index
    "uq": "uq_%(table_name)s_%(column_0_name)s",  # Unique constraint
    "ck": "ck_%(table_name)s_%(constraint_name)s",  # Check constraint
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",  # Foreign key
    "pk": "pk_%(table_name)s",  # Primary key
}

metadata = MetaData(naming_convention=convention)

orm_registry = registry(metadata=metadata)


def utcnow() -> datetime:
    """Timezone-aware 'now' in UTC; used for every timestamp we write."""
    return datetime.now(timezone.utc)


# ================================
# Base DeclarativeBase Class
# ================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Usage:
        class Link(Base):
            __tablename__ = "links"
            id: Mapped[int] = mapped_column(primary_key=True)
    """

    registry = orm_registry

    metadata = metadata

    __tablename__: str


# ================================
# Timestamp Mixin
# ================================
class TimestampMixin:
    """
    Adds created_at / updated_at columns.

    - created_at is set once on insert
    - updated_at is set on insert and refreshed on every ORM update

    Bulk upserts (ProfileStore.save_profile) bypass ``onupdate`` and stamp
    updated_at themselves.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="Timestamp when record was created (UTC)"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        comment="Timestamp when record was last updated (UTC)"
    )


class CommonTableAttributes(TimestampMixin):
    """TimestampMixin plus an auto-incrementing integer primary key."""

    id: Mapped[int] = mapped_column(
        primary_key=True,
        autoincrement=True,
        comment="Auto-incrementing primary key"
    )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id})"


# ================================
# Convenient Base Model
# ================================
class BaseModel(Base, CommonTableAttributes):
    """
    Ready-to-use base class for rows keyed by an integer id.

    Every model automatically gets id, created_at, updated_at and dict().
    """

    __abstract__ = True


# ================================
# String Length Constraints
# ================================
String50 = String(50)  # Example: tokens like "rounded-lg", hex colors
String100 = String(100)  # Example: display names, slugs
String255 = String(255)  # Example: email, link titles
String500 = String(500)  # Example: bio
String2048 = String(2048)  # Example: URLs (avatar, link target, background image)
