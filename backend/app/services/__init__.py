"""Business logic services."""

from app.services.profile_store import ProfileStore
from app.services.public_profile import resolve_public_profile

__all__ = [
    "ProfileStore",
    "resolve_public_profile",
]
