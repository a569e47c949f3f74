"""
Theme editor session.

One ThemeSettingsSession per user editing their page. It owns the live,
effective ThemeSettings and moves through three states:

    UNINITIALIZED --hydrate()--> HYDRATING --> READY --close()--> CLOSED

Hydration reads the user's cached snapshot. A snapshot that is missing,
unparseable or not a JSON object is treated as absent; the session then
starts from the supplied fallback (usually the persisted theme) or from
the compiled-in defaults. Hydration never fails because of cache content.

Once READY, every typed update validates its input, applies it, writes a
new snapshot and notifies listeners registered for the changed field. The
built-in listener keeps ``presentation`` (palette, gradients, CSS
variables) in step with the settings.

Usage:
    session = ThemeSettingsSession(get_snapshot_cache(), user.id)
    session.hydrate(fallback=persisted_theme)
    session.update_card_opacity(1.5)      # stored as 1.0
    session.update_color_theme("rose")
    session.presentation.primary          # "347 77% 50%"
"""

import enum
import json
import math
from collections import defaultdict
from collections.abc import Callable, Mapping
from typing import Any, Optional

from app.core.exceptions import ValidationError
from app.core.logging import get_logger
from app.schemas.theme import (
    ANIMATION_SPEED_RANGE,
    BLUR_INTENSITY_RANGE,
    CARD_OPACITY_RANGE,
    GLASSMORPHISM_OPACITY_RANGE,
    FONT_COLOR_SLOTS,
    MAX_IMAGE_URL_LENGTH,
    MAX_TOKEN_LENGTH,
    FontColors,
    NumericRange,
    ThemeEffects,
    ThemeSettings,
    default_theme_settings,
    is_hex_color,
)
from app.services.theme.cache import SnapshotCache
from app.services.theme.merge import merge_theme_settings
from app.services.theme.palette import Palette, ThemePresentation, resolve_palette, resolve_presentation

logger = get_logger(__name__)

ChangeListener = Callable[[ThemeSettings], None]


class SessionState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    HYDRATING = "hydrating"
    READY = "ready"
    CLOSED = "closed"


class ThemeSessionError(Exception):
    """Raised when an operation is used in the wrong session state."""
    pass


# camelCase or snake_case slot name -> FontColors attribute
_FONT_COLOR_SLOT_NAMES = {
    **{name: name for name in FONT_COLOR_SLOTS},
    **{FontColors.model_fields[name].alias: name for name in FONT_COLOR_SLOTS},
}

_EFFECT_FLAGS = ("shadow", "glassmorphism", "blur_glass")


# ================================
# Input Validation
# ================================

def _require_token(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must be a non-empty option name")
    value = value.strip()
    if len(value) > MAX_TOKEN_LENGTH:
        raise ValidationError(f"{field} must be at most {MAX_TOKEN_LENGTH} characters")
    return value


def _require_hex(field: str, value: Any) -> str:
    if not is_hex_color(value):
        raise ValidationError(f"{field} must be a hex color like #1a2b3c")
    return value


def _require_number(field: str, value: Any, domain: NumericRange) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be a number")
    # ints of any size are finite and clamp fine; only floats can be inf/nan
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"{field} must be a number")
    return domain.snap(value)


def _require_bool(field: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field} must be true or false")
    return value


class ThemeSettingsSession:
    """Live theme settings for one editor, backed by a snapshot cache."""

    # top-level fields whose change affects ``presentation``
    PRESENTATION_FIELDS = (
        "color_theme",
        "gradient",
        "pattern_color",
        "font_colors",
        "border_radius",
        "background_gradient",
        "effects",
    )

    def __init__(self, cache: SnapshotCache, key: str):
        self.cache = cache
        self.key = key
        self.state = SessionState.UNINITIALIZED
        self._settings: Optional[ThemeSettings] = None
        self._presentation: Optional[ThemePresentation] = None
        self._listeners: dict[str, list[ChangeListener]] = defaultdict(list)
        # batch edits collect changed fields and notify once at the end
        self._pending: Optional[set[str]] = None

        for field in self.PRESENTATION_FIELDS:
            self.on_change(field, self._refresh_presentation)

    # ================================
    # Lifecycle
    # ================================

    def hydrate(self, fallback: Any = None) -> ThemeSettings:
        """
        Load the effective settings.

        Args:
            fallback: Partial or complete theme used when no usable snapshot
                      is cached (e.g. the persisted theme). Defaults apply
                      when this is None too.

        Returns:
            A copy of the effective settings
        """
        if self.state is SessionState.CLOSED:
            raise ThemeSessionError("Session is closed")
        if self.state is SessionState.READY:
            return self.settings

        self.state = SessionState.HYDRATING
        snapshot = self._read_snapshot()

        if snapshot is not None:
            self._settings = merge_theme_settings(snapshot)
            source = "snapshot"
        elif fallback is not None:
            self._settings = merge_theme_settings(fallback)
            source = "fallback"
        else:
            self._settings = default_theme_settings()
            source = "defaults"

        self.state = SessionState.READY
        self._write_snapshot()
        self._refresh_presentation(self._settings)

        logger.debug("theme_session_hydrated", key=self.key, source=source)
        return self.settings

    def close(self) -> None:
        """Stop the session. The last snapshot stays in the cache."""
        self._listeners.clear()
        self.state = SessionState.CLOSED

    def on_change(self, field: str, listener: ChangeListener) -> None:
        """Call ``listener(settings)`` whenever top-level ``field`` changes."""
        self._listeners[field].append(listener)

    # ================================
    # Reads
    # ================================

    @property
    def settings(self) -> ThemeSettings:
        """Copy of the effective settings; mutating it changes nothing."""
        return self._current().model_copy(deep=True)

    @property
    def presentation(self) -> ThemePresentation:
        self._current()
        return self._presentation

    def get_theme_colors(self, color_theme: str) -> Palette:
        return resolve_palette(color_theme)

    # ================================
    # Typed Updates
    # ================================

    def update_color_theme(self, value: str) -> None:
        self._set("color_theme", _require_token("colorTheme", value))

    def update_gradient(self, value: str) -> None:
        self._set("gradient", _require_token("gradient", value))

    def update_pattern(self, value: str) -> None:
        self._set("pattern", _require_token("pattern", value))

    def update_pattern_color(self, value: str) -> None:
        self._set("pattern_color", _require_hex("patternColor", value))

    def update_font(self, value: str) -> None:
        self._set("font", _require_token("font", value))

    def update_font_colors(self, slot: str, value: str) -> None:
        """Set one text color; ``slot`` is displayName, bio, linkTitle or linkUrl."""
        name = _FONT_COLOR_SLOT_NAMES.get(slot)
        if name is None:
            raise ValidationError(
                f"Unknown font color slot '{slot}'. "
                "Expected displayName, bio, linkTitle or linkUrl"
            )
        color = _require_hex(f"fontColors.{slot}", value)
        setattr(self._current().font_colors, name, color)
        self._changed("font_colors")

    def update_button_style(self, value: str) -> None:
        self._set("button_style", _require_token("buttonStyle", value))

    def update_border_radius(self, value: str) -> None:
        self._set("border_radius", _require_token("borderRadius", value))

    def update_background_color(self, value: str) -> None:
        self._set("background_color", _require_token("backgroundColor", value))

    def update_background_gradient(self, value: str) -> None:
        self._set("background_gradient", _require_token("backgroundGradient", value))

    def update_background_image(self, value: str) -> None:
        """Image URL, or "" to remove the background image."""
        if not isinstance(value, str):
            raise ValidationError("backgroundImage must be a string")
        if len(value) > MAX_IMAGE_URL_LENGTH:
            raise ValidationError(f"backgroundImage must be at most {MAX_IMAGE_URL_LENGTH} characters")
        self._set("background_image", value.strip())

    def update_card_opacity(self, value: float) -> None:
        self._set_effect("card_opacity", _require_number("cardOpacity", value, CARD_OPACITY_RANGE))

    def update_animation_speed(self, value: float) -> None:
        self._set_effect(
            "animation_speed", _require_number("animationSpeed", value, ANIMATION_SPEED_RANGE)
        )

    def update_glassmorphism_opacity(self, value: float) -> None:
        self._set_effect(
            "glassmorphism_opacity",
            _require_number("glassmorphismOpacity", value, GLASSMORPHISM_OPACITY_RANGE),
        )

    def update_blur_intensity(self, value: float) -> None:
        self._set_effect(
            "blur_intensity", _require_number("blurIntensity", value, BLUR_INTENSITY_RANGE)
        )

    def toggle_shadow(self) -> None:
        self._toggle("shadow")

    def toggle_glassmorphism(self) -> None:
        self._toggle("glassmorphism")

    def toggle_blur_glass(self) -> None:
        self._toggle("blur_glass")

    def reset_to_defaults(self) -> None:
        """Replace every field with a fresh copy of the defaults."""
        self._current()
        self._settings = default_theme_settings()
        self._notify(set(ThemeSettings.model_fields))

    def apply_updates(self, changes: Mapping[str, Any]) -> None:
        """
        Apply a camelCase partial theme as one edit.

        Either every change is applied or, when one fails validation, none
        is and the ValidationError propagates.

        Example:
            session.apply_updates({
                "colorTheme": "teal",
                "fontColors": {"bio": "#333333"},
                "effects": {"cardOpacity": 0.8, "shadow": False},
            })
        """
        before = self.settings
        self._pending = set()
        try:
            for key, value in changes.items():
                self._apply_one(key, value)
        except ValidationError:
            self._settings = before
            self._pending = None
            raise

        changed, self._pending = self._pending, None
        self._notify(changed)

    # ================================
    # Internals
    # ================================

    def _current(self) -> ThemeSettings:
        if self.state is not SessionState.READY or self._settings is None:
            raise ThemeSessionError(f"Theme session is {self.state.value}, not ready")
        return self._settings

    def _set(self, field: str, value: Any) -> None:
        setattr(self._current(), field, value)
        self._changed(field)

    def _set_effect(self, name: str, value: Any) -> None:
        setattr(self._current().effects, name, value)
        self._changed("effects")

    def _toggle(self, name: str) -> None:
        effects = self._current().effects
        setattr(effects, name, not getattr(effects, name))
        self._changed("effects")

    def _changed(self, field: str) -> None:
        if self._pending is not None:
            self._pending.add(field)
        else:
            self._notify({field})

    def _notify(self, fields: set[str]) -> None:
        if not fields:
            return
        self._write_snapshot()
        notified: list[ChangeListener] = []
        for field in fields:
            for listener in self._listeners.get(field, ()):
                # the presentation listener is registered on several fields
                if listener in notified:
                    continue
                notified.append(listener)
                listener(self.settings)

    def _apply_one(self, key: str, value: Any) -> None:
        if key in ("fontColors", "font_colors"):
            if not isinstance(value, Mapping):
                raise ValidationError("fontColors must be an object")
            for slot, color in value.items():
                self.update_font_colors(slot, color)
            return

        if key == "effects":
            if not isinstance(value, Mapping):
                raise ValidationError("effects must be an object")
            for name, effect_value in value.items():
                self._apply_effect(name, effect_value)
            return

        updater = _TOP_LEVEL_UPDATERS.get(key)
        if updater is None:
            raise ValidationError(f"Unknown theme setting '{key}'")
        updater(self, value)

    def _apply_effect(self, name: str, value: Any) -> None:
        field = _EFFECT_NAMES.get(name)
        if field is None:
            raise ValidationError(f"Unknown effect '{name}'")
        if field in _EFFECT_FLAGS:
            if _require_bool(name, value) != getattr(self._current().effects, field):
                self._toggle(field)
            return
        _EFFECT_UPDATERS[field](self, value)

    def _refresh_presentation(self, settings: ThemeSettings) -> None:
        self._presentation = resolve_presentation(settings)

    def _read_snapshot(self) -> Optional[dict[str, Any]]:
        payload = self.cache.load(self.key)
        if payload is None:
            return None
        try:
            snapshot = json.loads(payload)
        except (TypeError, ValueError) as e:
            logger.warning("theme_snapshot_corrupt", key=self.key, error=str(e))
            return None
        if not isinstance(snapshot, dict):
            logger.warning("theme_snapshot_corrupt", key=self.key, error="not an object")
            return None
        return snapshot

    def _write_snapshot(self) -> None:
        self.cache.store(self.key, self._current().model_dump_json(by_alias=True))


def _alias_map(model: type, fields) -> dict[str, str]:
    names = {name: name for name in fields}
    names.update({model.model_fields[name].alias: name for name in fields})
    return names


_TOP_LEVEL_UPDATERS: dict[str, Callable[[ThemeSettingsSession, Any], None]] = {}
for _alias, _name in _alias_map(
    ThemeSettings,
    [name for name in ThemeSettings.model_fields if name not in ("font_colors", "effects")],
).items():
    _TOP_LEVEL_UPDATERS[_alias] = getattr(ThemeSettingsSession, f"update_{_name}")

_EFFECT_NAMES = _alias_map(ThemeEffects, list(ThemeEffects.model_fields))

_EFFECT_UPDATERS: dict[str, Callable[[ThemeSettingsSession, Any], None]] = {
    "card_opacity": ThemeSettingsSession.update_card_opacity,
    "animation_speed": ThemeSettingsSession.update_animation_speed,
    "glassmorphism_opacity": ThemeSettingsSession.update_glassmorphism_opacity,
    "blur_intensity": ThemeSettingsSession.update_blur_intensity,
}
