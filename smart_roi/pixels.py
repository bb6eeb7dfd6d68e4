"""Uniform intensity access over 8-bit and normalized float saliency storage."""

from __future__ import annotations

import math

import numpy as np

from .errors import UnsupportedPixelFormat
from .models import SaliencyGrid

BYTE_DTYPES = (np.dtype(np.uint8),)
FLOAT_DTYPES = (np.dtype(np.float32), np.dtype(np.float64))


def storage_kind(grid: SaliencyGrid) -> str:
    dtype = grid.values.dtype
    if dtype in BYTE_DTYPES:
        return "byte"
    if dtype in FLOAT_DTYPES:
        return "float"
    raise UnsupportedPixelFormat(f"unsupported saliency storage: {dtype}")


def _unit(value) -> float:
    v = float(value)
    if math.isnan(v):
        return 0.0
    return max(0.0, min(1.0, v))


def sample(grid: SaliencyGrid, x: int, y: int) -> int:
    """Quantized intensity in [0, 255] at grid pixel ``(x, y)``."""
    kind = storage_kind(grid)
    value = grid.values[y, x]
    if kind == "byte":
        return int(value)
    return min(255, int(_unit(value) * 255))


def intensity(grid: SaliencyGrid, x: int, y: int) -> float:
    """Unquantized weight on the [0, 255] scale, used for centroid mass."""
    kind = storage_kind(grid)
    value = grid.values[y, x]
    if kind == "byte":
        return float(value)
    return _unit(value) * 255.0


def as_bins(grid: SaliencyGrid) -> np.ndarray:
    """Vectorized ``sample`` over the whole grid (uint8, ``[y, x]``)."""
    kind = storage_kind(grid)
    if kind == "byte":
        return grid.values
    clipped = np.clip(np.nan_to_num(grid.values.astype(np.float64), nan=0.0), 0.0, 1.0)
    return np.minimum(255, (clipped * 255.0).astype(np.int64)).astype(np.uint8)


def as_weights(grid: SaliencyGrid) -> np.ndarray:
    """Vectorized ``intensity`` over the whole grid (float64, ``[y, x]``)."""
    kind = storage_kind(grid)
    if kind == "byte":
        return grid.values.astype(np.float64)
    clipped = np.clip(np.nan_to_num(grid.values.astype(np.float64), nan=0.0), 0.0, 1.0)
    return clipped * 255.0
