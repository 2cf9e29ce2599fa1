from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

DESKTOP_WIDTH = 900
DESKTOP_HEIGHT = 600
DESKTOP_SCALE = 50.0
DESKTOP_BOTTOM_MARGIN = 60

COMPACT_BREAKPOINT = 768
COMPACT_MIN_HEIGHT = 400
COMPACT_MAX_SCALE = 30.0
COMPACT_BOTTOM_MARGIN = 40

@dataclass(frozen=True)
class Viewport:
    width: int
    height: int
    scale: float
    center_x: float
    center_y: float

    def to_screen(self, x: float, y: float) -> Tuple[float, float]:
        # fern-space y grows upward, pixel y grows downward
        return (self.center_x + x * self.scale, self.center_y - y * self.scale)

    def contains(self, sx: float, sy: float) -> bool:
        return 0 <= sx < self.width and 0 <= sy < self.height

def compute_viewport(
    container_width: int,
    container_height: int,
    *,
    compact: Optional[bool] = None,
) -> Viewport:
    # fern spans about x in [-3, 3], y in [0, 10]: centre it, anchor near the bottom
    if compact is None:
        compact = container_width <= COMPACT_BREAKPOINT

    if not compact:
        width, height = DESKTOP_WIDTH, DESKTOP_HEIGHT
        return Viewport(width, height, DESKTOP_SCALE, width / 2, height - DESKTOP_BOTTOM_MARGIN)

    width = max(1, int(min(DESKTOP_WIDTH, container_width - 20)))
    height = max(1, int(max(COMPACT_MIN_HEIGHT, min(DESKTOP_HEIGHT, container_height * 0.6))))
    scale = min(COMPACT_MAX_SCALE, width / 25)
    return Viewport(width, height, scale, width / 2, height - COMPACT_BOTTOM_MARGIN)

class ResizeDebouncer:

    def __init__(
        self,
        initial: Tuple[int, int],
        *,
        delay_ms: int = 300,
        min_width_delta: int = 50,
        min_height_delta: int = 100,
    ) -> None:
        self.delay_ms = delay_ms
        self.min_width_delta = min_width_delta
        self.min_height_delta = min_height_delta
        self._accepted = (int(initial[0]), int(initial[1]))
        self._pending: Optional[Tuple[int, int]] = None
        self._pending_since = 0

    @property
    def accepted(self) -> Tuple[int, int]:
        return self._accepted

    def notify(self, width: int, height: int, now_ms: int) -> None:
        self._pending = (int(width), int(height))
        self._pending_since = now_ms

    def poll(self, now_ms: int) -> Optional[Tuple[int, int]]:
        if self._pending is None or now_ms - self._pending_since < self.delay_ms:
            return None
        width, height = self._pending
        self._pending = None
        last_w, last_h = self._accepted
        if abs(width - last_w) > self.min_width_delta or abs(height - last_h) > self.min_height_delta:
            self._accepted = (width, height)
            return self._accepted
        return None
