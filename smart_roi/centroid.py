"""Intensity-weighted centroid of a saliency grid."""

from __future__ import annotations

import numpy as np

from .geometry import GridPoint, ImagePoint, Size
from .models import SaliencyGrid
from .pixels import as_weights


def estimate_centroid(grid: SaliencyGrid) -> GridPoint | None:
    """Return the mass centre in grid pixels, or None when the map is all zero."""
    weights = as_weights(grid)
    total = float(weights.sum())
    if total <= 0.0:
        return None

    ys = np.arange(grid.height, dtype=np.float64)
    xs = np.arange(grid.width, dtype=np.float64)
    sum_x = float(weights.sum(axis=0) @ xs)
    sum_y = float(weights.sum(axis=1) @ ys)
    return GridPoint(sum_x / total, sum_y / total)


def to_image_space(point: GridPoint, grid_size: Size, image_size: Size) -> ImagePoint:
    scale_x = float(image_size.width) / float(grid_size.width)
    scale_y = float(image_size.height) / float(grid_size.height)
    return ImagePoint(point.x * scale_x, point.y * scale_y)
