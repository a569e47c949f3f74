"""
Database Models

Import models from this module to ensure they're registered with SQLAlchemy:

    from app.models import User, Profile, Link, Theme

This ensures that:
1. Alembic can detect all models for migrations
2. Relationships resolve correctly
"""

from app.models.profile import Link, Profile, Theme
from app.models.user import User

__all__ = [
    "User",
    "Profile",
    "Link",
    "Theme",
]
