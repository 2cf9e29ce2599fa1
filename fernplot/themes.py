from __future__ import annotations

import colorsys
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

RGB = Tuple[int, int, int]

BACKGROUND: RGB = (0, 0, 0)

RAINBOW_HUE_STEP = 0.1
RAINBOW_SATURATION = 0.70
RAINBOW_LIGHTNESS = 0.60

@dataclass(frozen=True)
class Theme:
    name: str
    color: Optional[RGB]
    alpha: float

    @property
    def procedural(self) -> bool:
        return self.color is None

    def color_for(self, point_count: int) -> RGB:
        if self.color is not None:
            return self.color
        return rainbow_color(point_count)

def _hex(value: str) -> RGB:
    value = value.lstrip("#")
    return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))

THEMES: Dict[str, Theme] = {
    "classic": Theme("classic", _hex("#90EE90"), 0.8),
    "autumn": Theme("autumn", _hex("#FF6B35"), 0.8),
    "ocean": Theme("ocean", _hex("#4A90E2"), 0.8),
    "monochrome": Theme("monochrome", _hex("#FFFFFF"), 0.6),
    "rainbow": Theme("rainbow", None, 0.8),
}

THEME_NAMES: Tuple[str, ...] = tuple(THEMES)

DEFAULT_THEME = "classic"

def get_theme(name: str) -> Theme:
    try:
        return THEMES[name]
    except KeyError:
        raise ValueError(f"Unknown theme {name!r}; expected one of: {', '.join(THEME_NAMES)}") from None

def rainbow_color(point_count: int) -> RGB:
    """HSL(count * 0.1 mod 360, 70%, 60%) as an RGB triple."""
    hue = (point_count * RAINBOW_HUE_STEP) % 360
    r, g, b = colorsys.hls_to_rgb(hue / 360.0, RAINBOW_LIGHTNESS, RAINBOW_SATURATION)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))

def next_theme_name(name: str) -> str:
    i = THEME_NAMES.index(get_theme(name).name)
    return THEME_NAMES[(i + 1) % len(THEME_NAMES)]
