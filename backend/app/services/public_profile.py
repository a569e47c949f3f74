"""
Public page resolution.

``GET /api/profile/{segment}`` receives whatever followed the base URL:
either a user id or a slug. User ids have a fixed, tagged format
(``usr_`` + 32 hex chars) that no slug can match, so the dispatch is a
format check rather than a guess:

    usr_0f8f...  -> ProfileStore.get_profile
    jane-doe     -> ProfileStore.get_profile_by_slug
    2024         -> ProfileStore.get_profile_by_slug

Every kind of miss comes back as None; the route turns that into a single
404 response.
"""

from typing import Optional

from app.core.identifiers import looks_like_user_id
from app.core.logging import get_logger
from app.schemas.profile import UserProfile
from app.services.profile_store import ProfileStore

logger = get_logger(__name__)


async def resolve_public_profile(store: ProfileStore, segment: str) -> Optional[UserProfile]:
    """
    Resolve a public URL segment to a page.

    Args:
        store: Profile store to read from
        segment: User id or slug from the URL

    Returns:
        The page, or None if nothing matches
    """
    segment = segment.strip()
    if not segment:
        return None

    if looks_like_user_id(segment):
        page = await store.get_profile(segment)
        lookup = "user_id"
    else:
        page = await store.get_profile_by_slug(segment.lower())
        lookup = "slug"

    if page is None:
        logger.info("public_profile_not_found", segment=segment, lookup=lookup)
    return page
