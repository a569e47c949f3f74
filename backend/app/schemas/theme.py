"""
Theme settings schemas.

ThemeSettings is the complete set of visual options for a public page.
Its defaults are the compiled-in theme every new page starts from:

    {
        "colorTheme": "default",
        "gradient": "none",
        "pattern": "none",
        "patternColor": "#000000",
        "font": "font-sans",
        "fontColors": {"displayName": "#000000", "bio": "#6b7280",
                       "linkTitle": "#000000", "linkUrl": "#6b7280"},
        "buttonStyle": "default",
        "borderRadius": "rounded-lg",
        "backgroundColor": "bg-secondary",
        "backgroundGradient": "none",
        "backgroundImage": "",
        "effects": {"shadow": true, "glassmorphism": false,
                    "glassmorphismOpacity": 0.1, "cardOpacity": 1.0,
                    "animationSpeed": 400, "blurGlass": false,
                    "blurIntensity": 10}
    }

Numeric effects have a fixed domain (min, max, step). Each domain is
declared once in EFFECT_RANGES and reused by the field bounds, the merge
(clamping) and the editor session (clamp + snap).
"""

import re
from datetime import datetime
from typing import NamedTuple, Optional

from pydantic import Field

from app.schemas.common import CamelModel

HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")

# Longest option token and image URL the themes table can hold
MAX_TOKEN_LENGTH = 50
MAX_IMAGE_URL_LENGTH = 2048


def is_hex_color(value: object) -> bool:
    # fullmatch: "$" alone would let a trailing newline through
    return isinstance(value, str) and bool(HEX_COLOR_PATTERN.fullmatch(value))


# ================================
# Numeric Domains
# ================================

class NumericRange(NamedTuple):
    """Closed interval with a slider step."""

    minimum: float
    maximum: float
    step: float
    integer: bool = False

    def clamp(self, value: float) -> float:
        clamped = min(max(value, self.minimum), self.maximum)
        return int(round(clamped)) if self.integer else float(clamped)

    def snap(self, value: float) -> float:
        """Clamp, then round to the nearest step counted from ``minimum``."""
        steps = round((self.clamp(value) - self.minimum) / self.step)
        snapped = self.clamp(self.minimum + steps * self.step)
        if self.integer:
            return int(snapped)
        # drop float noise such as 0.30000000000000004
        return round(snapped, 6)


GLASSMORPHISM_OPACITY_RANGE = NumericRange(0.05, 1.0, 0.05)
CARD_OPACITY_RANGE = NumericRange(0.1, 1.0, 0.1)
ANIMATION_SPEED_RANGE = NumericRange(100, 1000, 50, integer=True)
BLUR_INTENSITY_RANGE = NumericRange(5, 50, 5, integer=True)

EFFECT_RANGES: dict[str, NumericRange] = {
    "glassmorphism_opacity": GLASSMORPHISM_OPACITY_RANGE,
    "card_opacity": CARD_OPACITY_RANGE,
    "animation_speed": ANIMATION_SPEED_RANGE,
    "blur_intensity": BLUR_INTENSITY_RANGE,
}


# ================================
# Theme Settings
# ================================

class FontColors(CamelModel):
    """Hex colors for the four text slots of the page."""
    display_name: str = Field("#000000", pattern=HEX_COLOR_PATTERN.pattern)
    bio: str = Field("#6b7280", pattern=HEX_COLOR_PATTERN.pattern)
    link_title: str = Field("#000000", pattern=HEX_COLOR_PATTERN.pattern)
    link_url: str = Field("#6b7280", pattern=HEX_COLOR_PATTERN.pattern)


FONT_COLOR_SLOTS = tuple(FontColors.model_fields)


class ThemeEffects(CamelModel):
    """Visual effect switches and their intensities."""
    shadow: bool = True
    glassmorphism: bool = False
    glassmorphism_opacity: float = Field(
        0.1,
        ge=GLASSMORPHISM_OPACITY_RANGE.minimum,
        le=GLASSMORPHISM_OPACITY_RANGE.maximum,
    )
    card_opacity: float = Field(
        1.0,
        ge=CARD_OPACITY_RANGE.minimum,
        le=CARD_OPACITY_RANGE.maximum,
    )
    animation_speed: int = Field(
        400,
        ge=ANIMATION_SPEED_RANGE.minimum,
        le=ANIMATION_SPEED_RANGE.maximum,
        description="Transition duration in milliseconds",
    )
    blur_glass: bool = False
    blur_intensity: int = Field(
        10,
        ge=BLUR_INTENSITY_RANGE.minimum,
        le=BLUR_INTENSITY_RANGE.maximum,
        description="Backdrop blur in pixels",
    )


class ThemeSettings(CamelModel):
    """
    Complete theme for a public page.

    String fields other than colors are option tokens understood by the
    frontend ("rose", "sunset", "rounded-lg", "font-serif"...). Unknown
    tokens are stored as-is; presentation lookups fall back to defaults.
    """
    color_theme: str = "default"
    gradient: str = "none"
    pattern: str = "none"
    pattern_color: str = Field("#000000", pattern=HEX_COLOR_PATTERN.pattern)
    font: str = "font-sans"
    font_colors: FontColors = Field(default_factory=FontColors)
    button_style: str = "default"
    border_radius: str = "rounded-lg"
    background_color: str = "bg-secondary"
    background_gradient: str = "none"
    background_image: str = ""
    effects: ThemeEffects = Field(default_factory=ThemeEffects)


HEX_COLOR_FIELDS = frozenset({"pattern_color"}) | frozenset(FONT_COLOR_SLOTS)

# Fields that may legitimately be the empty string
EMPTY_ALLOWED_FIELDS = frozenset({"background_image"})


def max_length_for(name: str) -> int:
    """Column width for a string theme field."""
    return MAX_IMAGE_URL_LENGTH if name == "background_image" else MAX_TOKEN_LENGTH


def default_theme_settings() -> ThemeSettings:
    """A fresh, independent copy of the compiled-in defaults."""
    return ThemeSettings()


class ThemeRecord(ThemeSettings):
    """
    Theme as stored for a user.

    Timestamps are absent when the theme was synthesized from defaults
    because the user never saved one.
    """
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
