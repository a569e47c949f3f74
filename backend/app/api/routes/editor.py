"""
Theme editor endpoints.

The editor works on a live copy of the caller's theme that lives in the
snapshot cache, separate from the saved page: edits show up in the
preview immediately and only reach the public page on POST /profile/save.

Each request opens a ThemeSettingsSession for the caller, hydrates it
(cached snapshot, else the saved theme, else defaults), applies the
operation and closes it again.

The snapshot cache client is synchronous: hydration runs in a worker thread
and the handlers are plain functions, which FastAPI runs in its threadpool.
"""

import asyncio
from collections.abc import AsyncIterator
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends

from app.core.auth import get_current_user
from app.db.deps import ProfileStoreDep
from app.models.user import User
from app.schemas.common import CamelModel
from app.schemas.theme import ThemeSettings
from app.services.theme.cache import SnapshotCache, get_snapshot_cache
from app.services.theme.editor import ThemeSettingsSession
from app.services.theme.palette import ThemePresentation

router = APIRouter(prefix="/editor", tags=["editor"])


class EditorThemeResponse(CamelModel):
    """Effective settings plus the values derived from them."""
    settings: ThemeSettings
    presentation: ThemePresentation


async def get_theme_session(
    store: ProfileStoreDep,
    current_user: User = Depends(get_current_user),
    cache: SnapshotCache = Depends(get_snapshot_cache),
) -> AsyncIterator[ThemeSettingsSession]:
    """Hydrated editor session for the caller, closed after the request."""
    session = ThemeSettingsSession(cache, current_user.id)
    saved = await store.get_theme(current_user.id)
    await asyncio.to_thread(session.hydrate, fallback=saved)
    try:
        yield session
    finally:
        session.close()


ThemeSessionDep = Annotated[ThemeSettingsSession, Depends(get_theme_session)]


def _response(session: ThemeSettingsSession) -> EditorThemeResponse:
    return EditorThemeResponse(settings=session.settings, presentation=session.presentation)


@router.get("/theme", response_model=EditorThemeResponse)
def get_editor_theme(session: ThemeSessionDep):
    """Current editor theme."""
    return _response(session)


@router.patch("/theme", response_model=EditorThemeResponse)
def update_editor_theme(
    session: ThemeSessionDep,
    changes: dict[str, Any] = Body(..., examples=[{"colorTheme": "rose", "effects": {"cardOpacity": 0.8}}]),
):
    """
    Apply a partial theme, camelCase keys, nested groups allowed.

    Numeric effects are clamped into range and snapped to their step.
    Any invalid value rejects the whole update (400).
    """
    session.apply_updates(changes)
    return _response(session)


@router.post("/theme/reset", response_model=EditorThemeResponse)
def reset_editor_theme(session: ThemeSessionDep):
    """Back to the default theme."""
    session.reset_to_defaults()
    return _response(session)
