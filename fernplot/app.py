from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import pygame

from fernplot.controller import RenderController
from fernplot.ifs import PointGenerator, default_random_source
from fernplot.scheduling import FrameScheduler
from fernplot.themes import BACKGROUND, RGB, THEME_NAMES, next_theme_name
from fernplot.util.logging_setup import get_logger
from fernplot.viewport import DESKTOP_HEIGHT, DESKTOP_WIDTH, ResizeDebouncer, compute_viewport

THROUGHPUT_MIN = 1
THROUGHPUT_MAX = 1000
THROUGHPUT_STEP = 50

_THEME_KEYS = {
    pygame.K_1: 0,
    pygame.K_2: 1,
    pygame.K_3: 2,
    pygame.K_4: 3,
    pygame.K_5: 4,
}

class PygameSurface:
    def __init__(self, width: int, height: int, background: RGB = BACKGROUND) -> None:
        self.background = background
        self.surface = pygame.Surface((int(width), int(height)))
        self.surface.fill(background)
        self._mark: Optional[pygame.Surface] = None

    @property
    def width(self) -> int:
        return self.surface.get_width()

    @property
    def height(self) -> int:
        return self.surface.get_height()

    def clear(self, color: RGB = BACKGROUND) -> None:
        self.background = color
        self.surface.fill(color)

    def paint(self, x: int, y: int, color: RGB, alpha: float, size: int = 2) -> None:
        if self._mark is None or self._mark.get_width() != size:
            self._mark = pygame.Surface((size, size), pygame.SRCALPHA)
        a = max(0, min(255, int(round(alpha * 255))))
        self._mark.fill((color[0], color[1], color[2], a))
        self.surface.blit(self._mark, (x, y))

    def resize(self, width: int, height: int) -> None:
        self.surface = pygame.Surface((int(width), int(height)))
        self.surface.fill(self.background)

# Keys: Space start/stop, R reset, Up/Down throughput, T next theme, 1-5 theme, Esc quit.
class FernApp:

    def __init__(self, cfg: Dict[str, Any]) -> None:
        self.logger = get_logger("app")
        self.cfg = cfg
        self.fps = int(cfg["fps"])
        self.force_compact = bool(cfg.get("compact"))
        self.quit_requested = False

        pygame.init()
        window_size = (int(cfg["width"]), int(cfg["height"]))
        self.window = pygame.display.set_mode(window_size, pygame.RESIZABLE)

        viewport = compute_viewport(*window_size, compact=self.compact_for(*window_size))
        self.scheduler = FrameScheduler()
        self.controller = RenderController(
            PygameSurface(viewport.width, viewport.height),
            self.scheduler,
            generator=PointGenerator(random_source=default_random_source(cfg.get("seed"))),
            viewport=viewport,
            throughput=int(cfg["throughput"]),
            theme=str(cfg["theme"]),
        )
        self.debouncer = ResizeDebouncer(window_size)
        self.controller.subscribe(self._update_caption)
        self._update_caption(0)

    def compact_for(self, width: int, height: int) -> Optional[bool]:
        # the fixed desktop canvas would be clipped by a smaller window
        if self.force_compact or width < DESKTOP_WIDTH or height < DESKTOP_HEIGHT:
            return True
        return None

    def _update_caption(self, point_count: int) -> None:
        c = self.controller
        pygame.display.set_caption(
            f"Barnsley fern - points: {point_count:,} - speed: {c.throughput} - theme: {c.theme.name}"
        )

    def change_throughput(self, delta: int) -> None:
        n = max(THROUGHPUT_MIN, min(THROUGHPUT_MAX, self.controller.throughput + delta))
        self.controller.set_throughput(n)
        self._update_caption(self.controller.point_count)

    def select_theme(self, name: str) -> None:
        self.controller.set_theme(name)
        self._update_caption(self.controller.point_count)

    def apply_resize(self, size: Tuple[int, int]) -> None:
        # stop/clear/resume keeps generator state and the counter
        was_running = self.controller.running
        self.controller.stop()
        self.controller.on_viewport_change(size[0], size[1], compact=self.compact_for(*size))
        if was_running:
            self.controller.start()

    def handle_event(self, event) -> None:
        if event.type == pygame.QUIT:
            self.quit_requested = True
            return

        if event.type == pygame.VIDEORESIZE:
            self.window = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
            self.debouncer.notify(event.w, event.h, pygame.time.get_ticks())
            return

        if event.type != pygame.KEYDOWN:
            return

        key = event.key
        if key == pygame.K_ESCAPE:
            self.quit_requested = True
        elif key == pygame.K_SPACE:
            self.controller.toggle()
        elif key == pygame.K_r:
            self.controller.reset()
        elif key == pygame.K_UP:
            self.change_throughput(THROUGHPUT_STEP)
        elif key == pygame.K_DOWN:
            self.change_throughput(-THROUGHPUT_STEP)
        elif key == pygame.K_t:
            self.select_theme(next_theme_name(self.controller.theme.name))
        elif key in _THEME_KEYS:
            self.select_theme(THEME_NAMES[_THEME_KEYS[key]])

    def render(self) -> None:
        self.window.fill(BACKGROUND)
        canvas = self.controller.surface.surface
        x = (self.window.get_width() - canvas.get_width()) // 2
        y = (self.window.get_height() - canvas.get_height()) // 2
        self.window.blit(canvas, (x, y))
        pygame.display.flip()

    def run(self, *, autostart: bool = False) -> int:
        clock = pygame.time.Clock()
        if autostart:
            self.controller.start()
        self.logger.info("Window open fps=%s autostart=%s", self.fps, autostart)
        try:
            while not self.quit_requested:
                clock.tick(self.fps)

                for event in pygame.event.get():
                    self.handle_event(event)

                size = self.debouncer.poll(pygame.time.get_ticks())
                if size is not None:
                    self.apply_resize(size)

                self.scheduler.run_frame()
                self.render()
        finally:
            self.controller.stop()
            pygame.quit()
        self.logger.info("Window closed points=%s", self.controller.point_count)
        return self.controller.point_count
