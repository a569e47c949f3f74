"""
Theme services: default merging, palette lookups, editor sessions and
their snapshot cache.
"""

from app.services.theme.cache import InMemorySnapshotCache, RedisSnapshotCache, get_snapshot_cache
from app.services.theme.editor import SessionState, ThemeSessionError, ThemeSettingsSession
from app.services.theme.merge import merge_theme_settings
from app.services.theme.palette import resolve_palette, resolve_presentation

__all__ = [
    "InMemorySnapshotCache",
    "RedisSnapshotCache",
    "get_snapshot_cache",
    "SessionState",
    "ThemeSessionError",
    "ThemeSettingsSession",
    "merge_theme_settings",
    "resolve_palette",
    "resolve_presentation",
]
