"""
Merge partial theme documents with the compiled-in defaults.

Theme data arrives from three places that can each be incomplete or stale:
the editor's cached snapshot, the persisted ``themes`` row, and the save
request body. ``merge_theme_settings`` turns any of them into a complete,
valid ThemeSettings:

- a field that is missing, None, the empty string, or of the wrong type
  falls back to its default (independently of its siblings)
- nested groups (fontColors, effects) are merged field by field
- hex color fields must look like a hex color
- option tokens longer than their column fall back to the default
- numeric effects are clamped into their declared range

It never raises.
"""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel

from app.schemas.theme import (
    EFFECT_RANGES,
    EMPTY_ALLOWED_FIELDS,
    HEX_COLOR_FIELDS,
    ThemeSettings,
    is_hex_color,
    max_length_for,
)

M = TypeVar("M", bound=BaseModel)


def _lookup(partial: Mapping[str, Any], name: str, alias: str | None) -> Any:
    # camelCase is the wire spelling; snake_case is accepted as well
    if alias and alias in partial:
        return partial[alias]
    return partial.get(name)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _merge_leaf(name: str, default: Any, raw: Any) -> Any:
    if raw is None:
        return default

    if isinstance(default, bool):
        return raw if isinstance(raw, bool) else default

    if _is_number(default):
        if not _is_number(raw) or raw != raw:  # NaN
            return default
        if name in EFFECT_RANGES:
            return EFFECT_RANGES[name].clamp(raw)
        return type(default)(raw)

    if isinstance(default, str):
        if not isinstance(raw, str):
            return default
        if raw == "" and name not in EMPTY_ALLOWED_FIELDS:
            return default
        if name in HEX_COLOR_FIELDS and not is_hex_color(raw):
            return default
        if len(raw) > max_length_for(name):
            return default
        return raw

    return default


def merge_model(model_cls: type[M], partial: Any) -> M:
    """
    Merge ``partial`` into a fresh instance of ``model_cls``.

    Recurses into fields whose default is itself a model.
    """
    defaults = model_cls()
    if not isinstance(partial, Mapping):
        return defaults

    values: dict[str, Any] = {}
    for name, field in model_cls.model_fields.items():
        default = getattr(defaults, name)
        raw = _lookup(partial, name, field.alias)
        if isinstance(default, BaseModel):
            values[name] = merge_model(type(default), raw)
        else:
            values[name] = _merge_leaf(name, default, raw)

    return model_cls.model_validate(values)


def merge_theme_settings(partial: Any) -> ThemeSettings:
    """
    Build a complete ThemeSettings from a partial document.

    Examples:
        >>> merge_theme_settings(None).color_theme
        'default'
        >>> merge_theme_settings({"effects": {"cardOpacity": 5}}).effects.card_opacity
        1.0
    """
    if isinstance(partial, BaseModel):
        partial = partial.model_dump(by_alias=True)
    return merge_model(ThemeSettings, partial)
