"""
Derived presentation values for a theme.

Pure lookups from theme tokens to the concrete values the public page and
the editor preview use:

- color theme token  -> primary / secondary / accent HSL palette
- gradient token     -> CSS ``linear-gradient(...)``
- border radius token -> CSS length
- the whole theme    -> CSS custom properties (``--primary`` etc.)

Unknown tokens never raise: palettes fall back to "default", gradients to
no gradient, border radius to 0.5rem.
"""

from typing import NamedTuple

from app.schemas.common import CamelModel
from app.schemas.theme import ThemeSettings


class HSLColor(NamedTuple):
    """Hue in degrees, saturation and lightness in percent."""

    hue: float
    saturation: float
    lightness: float

    def css(self) -> str:
        """Space separated triple as used in ``hsl(var(--primary))``."""
        return f"{_fmt(self.hue)} {_fmt(self.saturation)}% {_fmt(self.lightness)}%"

    def to_rgb(self) -> tuple[int, int, int]:
        return hsl_to_rgb(self.hue, self.saturation, self.lightness)

    def to_hex(self) -> str:
        return "#{:02x}{:02x}{:02x}".format(*self.to_rgb())


class Palette(NamedTuple):
    primary: HSLColor
    secondary: HSLColor
    accent: HSLColor


def _fmt(value: float) -> str:
    return f"{value:g}"


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> tuple[int, int, int]:
    """
    Convert HSL (degrees, percent, percent) to 8-bit RGB.

    >>> hsl_to_rgb(0, 0, 100)
    (255, 255, 255)
    >>> hsl_to_rgb(217, 91, 60)
    (60, 131, 246)
    """
    s = saturation / 100
    l = lightness / 100
    a = s * min(l, 1 - l)

    def channel(n: int) -> int:
        k = (n + hue / 30) % 12
        value = l - a * max(-1, min(k - 3, 9 - k, 1))
        return round(value * 255)

    return channel(0), channel(8), channel(4)


# ================================
# Lookup Tables
# ================================

DEFAULT_COLOR_THEME = "default"

COLOR_THEMES: dict[str, Palette] = {
    "default": Palette(HSLColor(0, 0, 9), HSLColor(0, 0, 96.1), HSLColor(0, 0, 96.1)),
    "rose": Palette(HSLColor(347, 77, 50), HSLColor(355, 100, 97), HSLColor(347, 77, 92)),
    "green": Palette(HSLColor(160, 84, 39), HSLColor(150, 100, 96), HSLColor(160, 84, 92)),
    "purple": Palette(HSLColor(259, 94, 51), HSLColor(270, 100, 98), HSLColor(259, 94, 93)),
    "orange": Palette(HSLColor(24, 94, 53), HSLColor(30, 100, 97), HSLColor(24, 94, 93)),
    "blue": Palette(HSLColor(217, 91, 60), HSLColor(213, 100, 97), HSLColor(217, 91, 93)),
    "teal": Palette(HSLColor(173, 80, 40), HSLColor(180, 100, 97), HSLColor(173, 80, 93)),
    "pink": Palette(HSLColor(330, 81, 60), HSLColor(327, 100, 97), HSLColor(330, 81, 93)),
}

BACKGROUND_GRADIENTS: dict[str, str] = {
    "sunset": "linear-gradient(135deg, #ff9a9e 0%, #fecfef 50%, #fecfef 100%)",
    "ocean": "linear-gradient(135deg, #667eea 0%, #764ba2 100%)",
    "forest": "linear-gradient(135deg, #134e5e 0%, #71b280 100%)",
    "midnight": "linear-gradient(135deg, #2c3e50 0%, #3498db 100%)",
    "aurora": "linear-gradient(135deg, #a8edea 0%, #fed6e3 100%)",
    "fire": "linear-gradient(135deg, #ff9a56 0%, #ff6b6b 100%)",
    "purple": "linear-gradient(135deg, #667eea 0%, #764ba2 100%)",
    "pink": "linear-gradient(135deg, #f093fb 0%, #f5576c 100%)",
    "neon": "linear-gradient(135deg, #00f5ff 0%, #ff00ff 50%, #ffff00 100%)",
    "tropical": "linear-gradient(135deg, #ff6b35 0%, #f7931e 50%, #ffe66d 100%)",
    "galaxy": "linear-gradient(135deg, #1a1a2e 0%, #16213e 50%, #0f3460 100%)",
    "emerald": "linear-gradient(135deg, #50c878 0%, #228b22 100%)",
    "crimson": "linear-gradient(135deg, #dc143c 0%, #8b0000 100%)",
    "lavender": "linear-gradient(135deg, #e6e6fa 0%, #dda0dd 100%)",
}

DEFAULT_BORDER_RADIUS = "0.5rem"

BORDER_RADIUS_VALUES: dict[str, str] = {
    "rounded-none": "0px",
    "rounded-sm": "0.125rem",
    "rounded": "0.25rem",
    "rounded-lg": "0.5rem",
}


def resolve_palette(color_theme: str) -> Palette:
    return COLOR_THEMES.get(color_theme, COLOR_THEMES[DEFAULT_COLOR_THEME])


def resolve_gradient_css(token: str) -> str:
    """CSS for a gradient token; "" for "none" or anything unknown."""
    return BACKGROUND_GRADIENTS.get(token, "")


def resolve_border_radius(token: str) -> str:
    return BORDER_RADIUS_VALUES.get(token, DEFAULT_BORDER_RADIUS)


# ================================
# Presentation
# ================================

class ThemePresentation(CamelModel):
    """Everything the page needs to paint a theme, already resolved."""

    color_theme: str
    primary: str
    secondary: str
    accent: str
    primary_hex: str
    background_gradient_css: str
    card_gradient_css: str
    border_radius: str
    css_variables: dict[str, str]


def css_variables(settings: ThemeSettings) -> dict[str, str]:
    """Custom properties applied to the page root."""
    palette = resolve_palette(settings.color_theme)
    effects = settings.effects
    colors = settings.font_colors
    return {
        "--primary": palette.primary.css(),
        "--secondary": palette.secondary.css(),
        "--accent": palette.accent.css(),
        "--pattern-color": settings.pattern_color,
        "--font-color-display-name": colors.display_name,
        "--font-color-bio": colors.bio,
        "--font-color-link-title": colors.link_title,
        "--font-color-link-url": colors.link_url,
        "--glassmorphism-opacity": _fmt(effects.glassmorphism_opacity),
        "--blur-intensity": f"{effects.blur_intensity}px",
        "--animation-speed": f"{effects.animation_speed}ms",
        "--card-opacity": _fmt(effects.card_opacity),
        "--card-border-radius": resolve_border_radius(settings.border_radius),
    }


def resolve_presentation(settings: ThemeSettings) -> ThemePresentation:
    palette = resolve_palette(settings.color_theme)
    return ThemePresentation(
        color_theme=settings.color_theme if settings.color_theme in COLOR_THEMES else DEFAULT_COLOR_THEME,
        primary=palette.primary.css(),
        secondary=palette.secondary.css(),
        accent=palette.accent.css(),
        primary_hex=palette.primary.to_hex(),
        background_gradient_css=resolve_gradient_css(settings.background_gradient),
        card_gradient_css=resolve_gradient_css(settings.gradient),
        border_radius=resolve_border_radius(settings.border_radius),
        css_variables=css_variables(settings),
    )
