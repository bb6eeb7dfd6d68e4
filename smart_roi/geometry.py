"""Coordinate-space tagged value types.

Three spaces are in play and each gets its own type:

- ``GridPoint``: saliency-grid pixels.
- ``ImagePoint`` / ``PixelRect``: original-image pixels, top-left origin, y down.
- ``NormalizedRect``: detector unit box in [0, 1], same orientation as the image.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Size:
    width: int
    height: int

    @property
    def long_side(self) -> int:
        return max(self.width, self.height)

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class GridPoint:
    x: float
    y: float


@dataclass(frozen=True)
class ImagePoint:
    x: float
    y: float


@dataclass(frozen=True)
class PixelRect:
    """Axis-aligned rectangle in original-image pixels (top-left origin)."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def full(cls, size: Size) -> PixelRect:
        return cls(0.0, 0.0, float(size.width), float(size.height))

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2.0

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def inset(self, dx: float, dy: float) -> PixelRect:
        """Shrink by ``dx``/``dy`` on every side; negative values inflate."""
        return PixelRect(self.x + dx, self.y + dy, self.width - 2.0 * dx, self.height - 2.0 * dy)

    def intersection(self, other: PixelRect) -> PixelRect:
        x0 = max(self.min_x, other.min_x)
        y0 = max(self.min_y, other.min_y)
        x1 = min(self.max_x, other.max_x)
        y1 = min(self.max_y, other.max_y)
        if x1 <= x0 or y1 <= y0:
            return PixelRect(x0, y0, 0.0, 0.0)
        return PixelRect(x0, y0, x1 - x0, y1 - y0)

    def clamp_to(self, size: Size) -> PixelRect:
        return self.intersection(PixelRect.full(size))

    def flipped(self, image_height: float) -> PixelRect:
        """Mirror the rect vertically, switching between top-left and bottom-left origins."""
        return PixelRect(self.x, image_height - self.y - self.height, self.width, self.height)

    def to_box(self) -> tuple[int, int, int, int]:
        """Integer ``(left, top, right, bottom)`` covering the rect."""
        left = int(math.floor(self.min_x))
        top = int(math.floor(self.min_y))
        right = int(math.ceil(self.max_x))
        bottom = int(math.ceil(self.max_y))
        return left, top, right, bottom

    def as_list(self) -> list[float]:
        return [round(self.x, 2), round(self.y, 2), round(self.width, 2), round(self.height, 2)]


@dataclass(frozen=True)
class NormalizedRect:
    """Detector box in unit coordinates, top-left origin."""

    x: float
    y: float
    width: float
    height: float

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2.0

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)

    def to_pixels(self, size: Size) -> PixelRect:
        return PixelRect(
            x=self.x * size.width,
            y=self.y * size.height,
            width=self.width * size.width,
            height=self.height * size.height,
        )

