"""
Profile Models

The three records that make up a user's public page, each keyed by user id:

1. Profile - name, bio, avatar, verified badge, secondary background token
2. Link    - one row per link; ``order`` is the position in the saved list
3. Theme   - the visual settings; nested groups stored as JSON

Database Tables:
----------------
- profiles: at most one row per user (unique user_id)
- links: many rows per user, ordered by ``order``
- themes: at most one row per user (unique user_id)

All three are written together by ProfileStore.save_profile and removed
together by ProfileStore.delete_profile. ``user_id`` is an opaque key with no
foreign key to ``users``: the store only cares that the three records share
it, and deletes them as a unit itself.
"""

from typing import Any

from sqlalchemy import JSON, Boolean, Integer
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import BaseModel, String50, String100, String255, String500, String2048

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class Profile(BaseModel):
    """
    Public profile header.

    Table: profiles
    ---------------
    Inherits id, created_at and updated_at from BaseModel. Upserted by
    user_id, so created_at keeps the time of the first save.
    """

    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(
        String100,
        unique=True,
        nullable=False,
        comment="Owner key; one profile per user"
    )

    name: Mapped[str] = mapped_column(
        String100,
        nullable=False,
        comment="Name shown on the public page"
    )

    bio: Mapped[str] = mapped_column(
        String500,
        default="",
        nullable=False,
    )

    avatar_url: Mapped[str] = mapped_column(
        String2048,
        default="",
        nullable=False,
    )

    verified: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Show the verified badge next to the name"
    )

    secondary_bg: Mapped[str] = mapped_column(
        String50,
        default="bg-secondary",
        nullable=False,
        comment="Background style token for the card area"
    )

    def __repr__(self) -> str:
        return f"Profile(user_id={self.user_id}, name={self.name})"


class Link(BaseModel):
    """
    A single link on the public page.

    ``client_id`` is the id the editor generated for the link; it round
    trips unchanged so the editor can keep its own keys stable.
    """

    __tablename__ = "links"

    user_id: Mapped[str] = mapped_column(
        String100,
        index=True,
        nullable=False,
    )

    client_id: Mapped[str] = mapped_column(
        String100,
        nullable=False,
        comment="Link id assigned by the editor"
    )

    title: Mapped[str] = mapped_column(String255, nullable=False)

    url: Mapped[str] = mapped_column(String2048, nullable=False)

    order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Zero-based position in the saved list"
    )

    def __repr__(self) -> str:
        return f"Link(user_id={self.user_id}, order={self.order}, title={self.title})"


class Theme(BaseModel):
    """
    Persisted theme settings.

    Token columns hold the raw option names (e.g. "rose", "rounded-lg");
    ``font_colors`` and ``effects`` hold the nested groups as JSON. Reads go
    through merge_theme_settings so a partial or outdated document still
    yields a complete ThemeSettings.
    """

    __tablename__ = "themes"

    user_id: Mapped[str] = mapped_column(
        String100,
        unique=True,
        nullable=False,
    )

    color_theme: Mapped[str] = mapped_column(String50, nullable=False)
    gradient: Mapped[str] = mapped_column(String50, nullable=False)
    pattern: Mapped[str] = mapped_column(String50, nullable=False)
    pattern_color: Mapped[str] = mapped_column(String50, nullable=False)
    font: Mapped[str] = mapped_column(String50, nullable=False)
    font_colors: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    button_style: Mapped[str] = mapped_column(String50, nullable=False)
    border_radius: Mapped[str] = mapped_column(String50, nullable=False)
    background_color: Mapped[str] = mapped_column(String50, nullable=False)
    background_gradient: Mapped[str] = mapped_column(String50, nullable=False)
    background_image: Mapped[str] = mapped_column(String2048, nullable=False, default="")
    effects: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)

    def __repr__(self) -> str:
        return f"Theme(user_id={self.user_id}, color_theme={self.color_theme})"
