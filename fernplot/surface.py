from __future__ import annotations

import os
from typing import Tuple

import numpy as np
from PIL import Image, ImageDraw

from fernplot.themes import BACKGROUND, RGB

class ImageSurface:
    def __init__(self, width: int, height: int, background: RGB = BACKGROUND) -> None:
        self.background = background
        self.image = Image.new("RGB", (int(width), int(height)), background)
        self._draw = ImageDraw.Draw(self.image, "RGBA")

    @property
    def width(self) -> int:
        return self.image.size[0]

    @property
    def height(self) -> int:
        return self.image.size[1]

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def clear(self, color: RGB = BACKGROUND) -> None:
        self.background = color
        self._draw.rectangle((0, 0, self.width, self.height), fill=tuple(color) + (255,))

    def paint(self, x: int, y: int, color: RGB, alpha: float, size: int = 2) -> None:
        a = max(0, min(255, int(round(alpha * 255))))
        self._draw.rectangle((x, y, x + size - 1, y + size - 1), fill=tuple(color) + (a,))

    def resize(self, width: int, height: int) -> None:
        self.image = Image.new("RGB", (int(width), int(height)), self.background)
        self._draw = ImageDraw.Draw(self.image, "RGBA")

    def to_array(self) -> np.ndarray:
        return np.asarray(self.image, dtype=np.uint8).copy()

    def save(self, path: str) -> str:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self.image.save(path, format="PNG", optimize=True)
        return path
