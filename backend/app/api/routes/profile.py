"""
Profile endpoints.

This module provides:
- Public page lookup by user id or slug (no auth)
- Derived theme values for a public page (no auth)
- Recently updated profiles (no auth)
- Saving the caller's page (auth)
- Deleting the caller's page (auth)
- Slug availability check for a display name (no auth)

Domain errors raised here (AuthError, ValidationError, NotFoundError,
PersistenceError) are turned into responses by the handlers in app.main.
"""

from typing import Optional
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_user, oauth2_scheme, user_from_token
from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.core.identifiers import generate_slug
from app.core.logging import get_logger
from app.db.deps import ProfileStoreDep, get_db
from app.models.user import User
from app.schemas.profile import (
    AvailabilityRequest,
    AvailabilityResponse,
    DeleteProfileResponse,
    LinkInput,
    ProfileData,
    ProfileInput,
    SaveProfileRequest,
    SaveProfileResponse,
    UserProfile,
)
from app.services.public_profile import resolve_public_profile
from app.services.theme.merge import merge_theme_settings
from app.services.theme.palette import ThemePresentation, resolve_presentation

logger = get_logger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])

PROFILE_NOT_FOUND = "Profile not found"


def share_url(slug: str) -> str:
    return f"{settings.PUBLIC_BASE_URL}/{slug}"


_links_adapter = TypeAdapter(list[LinkInput])


def _field_errors(section: str, exc: PydanticValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join([section, *(str(part) for part in error.get("loc", ()))])
        messages.append(f"{location}: {error.get('msg', 'Invalid value')}")
    return "; ".join(messages)


def parse_page_fields(payload: SaveProfileRequest) -> tuple[ProfileInput, list[LinkInput]]:
    """
    Validate the profile and links parts of a save request.

    Runs after authentication. Field limits follow the storage columns, so
    anything that passes here fits the database.
    """
    try:
        fields = ProfileInput.model_validate(payload.profile or {})
    except PydanticValidationError as exc:
        raise ValidationError(_field_errors("profile", exc)) from exc
    try:
        links = _links_adapter.validate_python(payload.links or [])
    except PydanticValidationError as exc:
        raise ValidationError(_field_errors("links", exc)) from exc
    return fields, links


def validate_link(link: LinkInput) -> None:
    """Links need a title and an absolute http(s) URL."""
    if not link.title.strip():
        raise ValidationError("Every link needs a title")
    parsed = urlparse(link.url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(
            f"Link '{link.title}' needs a valid URL including http:// or https://"
        )


async def _load_public_page(store: ProfileStoreDep, segment: str) -> UserProfile:
    page = await resolve_public_profile(store, segment)
    if page is None:
        raise NotFoundError(PROFILE_NOT_FOUND)
    return page


# ================================
# Listing
# ================================

@router.get("", response_model=list[ProfileData])
async def list_profiles(
    store: ProfileStoreDep,
    limit: int = Query(settings.PROFILE_LIST_LIMIT, ge=1, le=100),
):
    """Most recently updated public profiles."""
    return await store.list_profiles(limit=limit)


# ================================
# Save
# ================================

@router.post("/save", response_model=SaveProfileResponse)
async def save_profile(
    payload: SaveProfileRequest,
    store: ProfileStoreDep,
    bearer_token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
):
    """
    Save the caller's whole page (profile, links, theme).

    The credential may come as ``Authorization: Bearer <jwt>`` or as
    ``token`` in the body; the header wins when both are present.

    Missing profile fields get their defaults (bio "", avatarUrl "",
    verified false, secondaryBg "bg-secondary"); themeSettings is merged
    over the default theme. Links are stored in the order given.

    Response:
        {"userId": "usr_...", "shareUrl": "https://.../jane-doe", "slug": "jane-doe"}

    Raises:
        401: credential missing or invalid (checked first)
        400: profile name missing, a field too long or of the wrong type,
             link without title or http(s) URL
        500: storage failure, nothing saved
    """
    body_token = payload.token if isinstance(payload.token, str) else None
    user = await user_from_token(db, bearer_token or body_token)

    fields, links = parse_page_fields(payload)
    name = (fields.name or "").strip()
    if not name:
        raise ValidationError("Profile name is required")

    for link in links:
        validate_link(link)

    profile = ProfileData(
        user_id=user.id,
        name=name,
        bio=fields.bio if fields.bio is not None else "",
        avatar_url=fields.avatar_url if fields.avatar_url is not None else "",
        verified=fields.verified if fields.verified is not None else False,
        secondary_bg=fields.secondary_bg or "bg-secondary",
    )
    theme = merge_theme_settings(payload.theme_settings)

    await store.save_profile(user.id, profile, links, theme)

    return SaveProfileResponse(user_id=user.id, share_url=share_url(user.slug), slug=user.slug)


# ================================
# Slug Availability
# ================================

@router.post("/check-availability", response_model=AvailabilityResponse)
async def check_availability(
    payload: AvailabilityRequest,
    store: ProfileStoreDep,
    db: AsyncSession = Depends(get_db),
):
    """
    Would this display name get a free public URL?

    The name is turned into a slug; it is available when no stored page is
    keyed by it and no registered user owns it.

    Response:
        {"userId": "jane-doe", "available": true}
    """
    if not payload.name or not payload.name.strip():
        raise ValidationError("Name is required")

    candidate = generate_slug(payload.name)
    if not candidate:
        return AvailabilityResponse(user_id=candidate, available=False)

    taken = await db.execute(select(User.id).where(User.slug == candidate))
    available = taken.scalar_one_or_none() is None and await store.is_user_id_available(candidate)

    return AvailabilityResponse(user_id=candidate, available=available)


# ================================
# Public Page
# ================================

@router.get("/{segment}", response_model=UserProfile)
async def get_public_profile(segment: str, store: ProfileStoreDep):
    """
    Public page by user id (``usr_...``) or slug.

    Raises:
        404: nothing stored under that id or slug
    """
    return await _load_public_page(store, segment)


@router.get("/{segment}/presentation", response_model=ThemePresentation)
async def get_public_presentation(segment: str, store: ProfileStoreDep):
    """Palette, gradients and CSS variables for a public page's theme."""
    page = await _load_public_page(store, segment)
    return resolve_presentation(page.theme)


# ================================
# Delete
# ================================

@router.delete("/{user_id}", response_model=DeleteProfileResponse)
async def delete_profile(
    user_id: str,
    store: ProfileStoreDep,
    current_user: User = Depends(get_current_user),
):
    """
    Delete a page (profile, links and theme together).

    Only the owner may delete it. The account itself is kept.

    Raises:
        401: not authenticated
        403: page belongs to someone else
        500: storage failure, nothing deleted
    """
    if current_user.id != user_id:
        logger.warning("profile_delete_forbidden", user_id=user_id, requested_by=current_user.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own profile",
        )

    success = await store.delete_profile(user_id)
    return DeleteProfileResponse(success=success)
