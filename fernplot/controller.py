from __future__ import annotations

import enum
import math
from typing import Callable, List, Optional

from fernplot.ifs import PointGenerator
from fernplot.scheduling import FrameScheduler
from fernplot.themes import BACKGROUND, DEFAULT_THEME, Theme, get_theme
from fernplot.util.logging_setup import get_logger
from fernplot.viewport import Viewport, compute_viewport

POINT_SIZE = 2
DEFAULT_THROUGHPUT = 100

CountObserver = Callable[[int], None]

class ControllerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"

def _check_throughput(n) -> int:
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValueError(f"throughput must be an integer, got {n!r}")
    if n <= 0:
        raise ValueError(f"throughput must be positive, got {n}")
    return n

# surface: width, height, clear(color), paint(x, y, color, alpha, size), resize(width, height)
class RenderController:

    def __init__(
        self,
        surface,
        scheduler: FrameScheduler,
        *,
        generator: Optional[PointGenerator] = None,
        viewport: Optional[Viewport] = None,
        throughput: int = DEFAULT_THROUGHPUT,
        theme: str = DEFAULT_THEME,
    ) -> None:
        self.logger = get_logger("controller")
        self.surface = surface
        self.scheduler = scheduler
        self._generator = generator if generator is not None else PointGenerator()
        self._throughput = _check_throughput(throughput)
        self._theme: Theme = get_theme(theme)
        self._state = ControllerState.IDLE
        self._point_count = 0
        self._pending: Optional[int] = None
        self._observers: List[CountObserver] = []

        if viewport is None:
            viewport = compute_viewport(surface.width, surface.height)
        self._viewport = viewport
        if (surface.width, surface.height) != (viewport.width, viewport.height):
            surface.resize(viewport.width, viewport.height)
        surface.clear(BACKGROUND)

    # ---- observable state ---------------------------------------------- #

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is ControllerState.RUNNING

    @property
    def point_count(self) -> int:
        return self._point_count

    @property
    def throughput(self) -> int:
        return self._throughput

    @property
    def theme(self) -> Theme:
        return self._theme

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def generator(self) -> PointGenerator:
        return self._generator

    def subscribe(self, observer: CountObserver) -> None:
        self._observers.append(observer)

    def _notify(self) -> None:
        for observer in self._observers:
            observer(self._point_count)

    # ---- control surface ----------------------------------------------- #

    def start(self) -> None:
        if self.running:
            return
        self._state = ControllerState.RUNNING
        self.logger.info("Start points=%s throughput=%s theme=%s", self._point_count, self._throughput, self._theme.name)
        self._pending = self.scheduler.request(self.tick)

    def stop(self) -> None:
        if not self.running:
            return
        self._state = ControllerState.IDLE
        if self._pending is not None:
            self.scheduler.cancel(self._pending)
            self._pending = None
        self.logger.info("Stop points=%s at (%s, %s)", self._point_count, *self._generator.current)

    def toggle(self) -> None:
        if self.running:
            self.stop()
        else:
            self.start()

    def reset(self) -> None:
        self.stop()
        self._point_count = 0
        self._generator.reset()
        self.surface.clear(BACKGROUND)
        self.logger.info("Reset")
        self._notify()

    def set_throughput(self, n: int) -> None:
        self._throughput = _check_throughput(n)
        self.logger.debug("Throughput set to %s", n)

    def set_theme(self, name: str) -> None:
        self._theme = get_theme(name)
        self.logger.debug("Theme set to %s", name)

    def on_viewport_change(self, width: int, height: int, *, compact: Optional[bool] = None) -> Viewport:
        self._viewport = compute_viewport(width, height, compact=compact)
        self.surface.resize(self._viewport.width, self._viewport.height)
        self.surface.clear(BACKGROUND)
        self.logger.info(
            "Viewport %sx%s scale=%s center=(%s, %s)",
            self._viewport.width, self._viewport.height, self._viewport.scale,
            self._viewport.center_x, self._viewport.center_y,
        )
        return self._viewport

    # ---- frame work ---------------------------------------------------- #

    def plot(self, x: float, y: float) -> bool:
        vp = self._viewport
        sx, sy = vp.to_screen(x, y)
        if not vp.contains(sx, sy):
            return False
        theme = self._theme
        self.surface.paint(math.floor(sx), math.floor(sy), theme.color_for(self._point_count), theme.alpha, POINT_SIZE)
        self._point_count += 1
        return True

    def tick(self) -> None:
        self._pending = None
        if not self.running:
            return
        # read once so a mid-tick change applies from the next tick
        batch = self._throughput
        generator = self._generator
        for _ in range(batch):
            point = generator.next()
            self.plot(point.x, point.y)
        self._notify()
        # an observer may already have restarted us
        if self.running and self._pending is None:
            self._pending = self.scheduler.request(self.tick)
