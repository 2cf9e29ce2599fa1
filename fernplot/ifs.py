from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional, Sequence, Tuple

import numpy as np

RandomSource = Callable[[], float]

class Point(NamedTuple):
    x: float
    y: float

@dataclass(frozen=True)
class AffineTransform:
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float
    p: float

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        return (self.a * x + self.b * y + self.e, self.c * x + self.d * y + self.f)

# Declaration order matters: selection walks the cumulative probabilities in this order.
BARNSLEY_TRANSFORMS: Tuple[AffineTransform, ...] = (
    AffineTransform(a=0.0, b=0.0, c=0.0, d=0.16, e=0.0, f=0.0, p=0.01),
    AffineTransform(a=0.85, b=0.04, c=-0.04, d=0.85, e=0.0, f=1.6, p=0.85),
    AffineTransform(a=0.2, b=-0.26, c=0.23, d=0.22, e=0.0, f=1.6, p=0.07),
    AffineTransform(a=-0.15, b=0.28, c=0.26, d=0.24, e=0.0, f=0.44, p=0.07),
)

def validate_transforms(transforms: Sequence[AffineTransform], tolerance: float = 1e-9) -> None:
    if not transforms:
        raise ValueError("At least one transform is required.")
    for i, t in enumerate(transforms):
        if t.p < 0:
            raise ValueError(f"Transform {i} has a negative probability: {t.p}")
    total = math.fsum(t.p for t in transforms)
    if abs(total - 1.0) > tolerance:
        raise ValueError(f"Transform probabilities must sum to 1.0 (got {total!r}).")

def default_random_source(seed: Optional[int] = None) -> RandomSource:
    rng = np.random.default_rng(seed)
    return lambda: float(rng.random())

class PointGenerator:
    """Random IFS iterator: one draw per point, transform picked by cumulative probability."""

    def __init__(
        self,
        transforms: Sequence[AffineTransform] = BARNSLEY_TRANSFORMS,
        random_source: Optional[RandomSource] = None,
    ) -> None:
        validate_transforms(transforms)
        self._transforms: Tuple[AffineTransform, ...] = tuple(transforms)
        self._random = random_source if random_source is not None else default_random_source()
        self._x = 0.0
        self._y = 0.0

    @property
    def transforms(self) -> Tuple[AffineTransform, ...]:
        return self._transforms

    @property
    def current(self) -> Point:
        return Point(self._x, self._y)

    def select(self, r: float) -> int:
        cumulative = 0.0
        for i, t in enumerate(self._transforms):
            cumulative += t.p
            if r <= cumulative:
                return i
        # cumulative sum fell short of r through rounding
        return len(self._transforms) - 1

    def next(self) -> Point:
        t = self._transforms[self.select(self._random())]
        self._x, self._y = t.apply(self._x, self._y)
        return Point(self._x, self._y)

    def take(self, n: int) -> np.ndarray:
        if n < 0:
            raise ValueError("n must be >= 0")
        out = np.empty((n, 2), dtype=np.float64)
        for i in range(n):
            out[i] = self.next()
        return out

    def reset(self) -> None:
        self._x = 0.0
        self._y = 0.0
