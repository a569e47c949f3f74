"""
User Model

Registered accounts. A user signs up with a display name, email and
password; the display name is turned into the public page slug once, at
registration, and never recomputed.

Database Tables:
----------------
- users: account data and credentials

The page records in app.models.profile are keyed by users.id.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.identifiers import new_user_id
from app.db.base import Base, TimestampMixin, String100, String255


class User(Base, TimestampMixin):
    """
    User account model.

    Table: users
    ------------
    - id: "usr_" + 32 hex chars, generated at registration. Used as the
      key for the profile, links and theme of this user.
    - email: stored trimmed and lowercased, unique
    - slug: derived from display_name, unique, part of the public URL
    - hashed_password: bcrypt hash, never returned by the API

    Registration Flow:
    ------------------
    1. Normalize email, derive slug
    2. Reject duplicate email / duplicate slug (400)
    3. Hash password, insert row
    4. Issue a 7-day JWT carrying id, email and display name
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_user_id,
        comment="Tagged user identifier (usr_<hex>)"
    )

    # ================================
    # Account Fields
    # ================================

    display_name: Mapped[str] = mapped_column(
        String100,
        nullable=False,
        comment="Name the user registered with"
    )

    email: Mapped[str] = mapped_column(
        String255,
        unique=True,
        index=True,
        nullable=False,
        comment="Normalized (lowercased) email. Must be unique."
    )
    # Login looks users up by email on every attempt, hence the index.

    hashed_password: Mapped[str] = mapped_column(
        String255,
        nullable=False,
        comment="bcrypt hash of the password"
    )

    slug: Mapped[str] = mapped_column(
        String100,
        unique=True,
        index=True,
        nullable=False,
        comment="Public page slug derived from display_name"
    )
    # Public pages resolve {baseUrl}/{slug} through this column.

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, slug={self.slug})"
