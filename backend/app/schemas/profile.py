"""
Profile schemas (Pydantic models for request/response).

The public page is an aggregate of three records keyed by user id:

    {
        "profile": {"userId": "usr_...", "name": "Jane Doe", "bio": "", ...},
        "links": [{"id": "l1", "title": "Blog", "url": "https://...", "order": 0}],
        "theme": {"userId": "usr_...", "colorTheme": "rose", ...}
    }

The save request envelope accepts any JSON shape for profile and links so
that authentication is checked before the body is. ProfileInput and
LinkInput are then applied to those parts; their length limits match the
columns they are stored in, and missing fields are filled with defaults.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.theme import ThemeRecord


# ================================
# Stored Records
# ================================

class ProfileData(CamelModel):
    """Profile header of a public page."""
    user_id: str
    name: str
    bio: str = ""
    avatar_url: str = ""
    verified: bool = False
    secondary_bg: str = "bg-secondary"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LinkData(CamelModel):
    """
    One link. ``id`` is the editor-assigned link id; ``order`` is its
    position in the list.
    """
    id: str
    title: str
    url: str
    order: int = 0


class UserProfile(CamelModel):
    """Everything needed to render a public page."""
    profile: ProfileData
    links: list[LinkData] = Field(default_factory=list)
    theme: ThemeRecord


# ================================
# Save Request / Response
# ================================

class ProfileInput(CamelModel):
    """Editable profile fields. ``name`` is checked by the route."""
    name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    avatar_url: Optional[str] = Field(None, max_length=2048)
    verified: Optional[bool] = None
    secondary_bg: Optional[str] = Field(None, max_length=50)


class LinkInput(CamelModel):
    id: str = Field(..., min_length=1, max_length=100)
    title: str = Field("", max_length=255)
    url: str = Field("", max_length=2048)


class SaveProfileRequest(CamelModel):
    """
    POST /api/profile/save

    Example request:
        {
            "token": "eyJhbGciOi...",       # optional if sent as Bearer
            "profile": {"name": "Jane Doe", "bio": "Hi"},
            "links": [{"id": "l1", "title": "Blog", "url": "https://jane.dev"}],
            "themeSettings": {"colorTheme": "rose"}
        }
    """
    token: Any = None
    profile: Any = None
    links: Any = None
    theme_settings: Any = None


class SaveProfileResponse(CamelModel):
    user_id: str
    share_url: str
    slug: str


# ================================
# Availability / Delete
# ================================

class AvailabilityRequest(CamelModel):
    name: Optional[str] = None


class AvailabilityResponse(CamelModel):
    """``userId`` is the slug the name would get."""
    user_id: str
    available: bool


class DeleteProfileResponse(CamelModel):
    success: bool
