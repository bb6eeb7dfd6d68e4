"""Right-tail histogram threshold over quantized saliency."""

from __future__ import annotations

import logging

import numpy as np

from .models import SaliencyGrid
from .pixels import as_bins

LOG = logging.getLogger(__name__)

BIN_COUNT = 256
DEFAULT_THRESHOLD_BIN = 230
# Zero-confidence pixels never count as salient.
MIN_SALIENT_BIN = 1


def histogram(grid: SaliencyGrid) -> np.ndarray:
    return np.bincount(as_bins(grid).ravel(), minlength=BIN_COUNT)


def threshold_from_histogram(hist: np.ndarray, top_fraction: float) -> int:
    if not 0.0 < top_fraction <= 1.0:
        raise ValueError(f"top_fraction must be in (0, 1], got {top_fraction}")

    total = int(hist.sum())
    if total <= 0:
        return DEFAULT_THRESHOLD_BIN

    kept = top_fraction * total
    running = 0
    for bin_idx in range(BIN_COUNT - 1, -1, -1):
        running += int(hist[bin_idx])
        if running >= kept:
            return max(MIN_SALIENT_BIN, bin_idx)
    return DEFAULT_THRESHOLD_BIN


def threshold(grid: SaliencyGrid, top_fraction: float) -> int:
    """Walk bins from 255 down and stop once ``top_fraction`` of all pixels has been accumulated."""
    bin_idx = threshold_from_histogram(histogram(grid), top_fraction)
    LOG.debug("threshold bin %d for top_fraction=%.3f", bin_idx, top_fraction)
    return bin_idx
