"""Pytest configuration and fixtures."""

import itertools
from typing import List, Sequence, Tuple

import pytest

from fernplot.controller import RenderController
from fernplot.ifs import PointGenerator, default_random_source
from fernplot.scheduling import FrameScheduler
from fernplot.viewport import Viewport, compute_viewport


class ScriptedRandom:
    """Replays a fixed list of draws in a loop and counts how many were taken."""

    def __init__(self, values: Sequence[float]):
        self.values = list(values)
        self.calls = 0
        self._cycle = itertools.cycle(self.values)

    def __call__(self) -> float:
        self.calls += 1
        return next(self._cycle)


class RecordingSurface:
    """Pixel sink that records every call instead of drawing."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.paints: List[Tuple[int, int, Tuple[int, int, int], float, int]] = []
        self.clears: List[Tuple[int, int, int]] = []
        self.resizes: List[Tuple[int, int]] = []

    def clear(self, color=(0, 0, 0)):
        self.clears.append(tuple(color))
        self.paints.clear()

    def paint(self, x, y, color, alpha, size=2):
        self.paints.append((x, y, tuple(color), alpha, size))

    def resize(self, width, height):
        self.width = width
        self.height = height
        self.resizes.append((width, height))


@pytest.fixture
def scheduler() -> FrameScheduler:
    return FrameScheduler()


@pytest.fixture
def desktop_viewport() -> Viewport:
    return compute_viewport(1280, 800)


@pytest.fixture
def surface(desktop_viewport: Viewport) -> RecordingSurface:
    return RecordingSurface(desktop_viewport.width, desktop_viewport.height)


@pytest.fixture
def seeded_generator() -> PointGenerator:
    return PointGenerator(random_source=default_random_source(1234))


@pytest.fixture
def controller(surface, scheduler, seeded_generator, desktop_viewport) -> RenderController:
    return RenderController(
        surface,
        scheduler,
        generator=seeded_generator,
        viewport=desktop_viewport,
        throughput=100,
    )


@pytest.fixture
def make_random():
    """Factory for ScriptedRandom sources."""
    return ScriptedRandom


@pytest.fixture
def make_surface():
    """Factory for RecordingSurface sinks."""
    return RecordingSurface
