"""Robust bounding rectangle from the top-saliency pixel mask."""

from __future__ import annotations

import logging

import numpy as np

from .geometry import PixelRect, Size
from .models import SaliencyGrid
from .pixels import as_bins
from .threshold import threshold

LOG = logging.getLogger(__name__)

DEFAULT_LOW_QUANTILE = 0.10
DEFAULT_HIGH_QUANTILE = 0.90
DEFAULT_MIN_SIDE = 64


def quantile_bounds(counts: np.ndarray, low: float, high: float) -> tuple[int, int]:
    """Index range holding the central ``low..high`` share of a marginal count array.

    ``left`` is the first index whose cumulative count from the start reaches
    ``low * total``; ``right`` is the first index, scanning from the end, whose
    cumulative count reaches the ``1 - high`` tail.
    """
    n = int(len(counts))
    total = int(np.sum(counts))
    if total == 0:
        return 0, n - 1

    low_target = int(total * low)
    tail_target = total - int(total * high)

    cum_low = np.cumsum(counts)
    left = int(np.argmax(cum_low >= low_target))

    cum_high = np.cumsum(counts[::-1])
    right = n - 1 - int(np.argmax(cum_high >= tail_target))

    if right < left:
        right = left
    return left, right


def _enforce_min_side(rect: PixelRect, min_side: float, image_size: Size) -> PixelRect:
    if rect.width >= min_side and rect.height >= min_side:
        return rect

    w = min(max(rect.width, min_side), float(image_size.width))
    h = min(max(rect.height, min_side), float(image_size.height))
    x = rect.mid_x - w / 2.0
    y = rect.mid_y - h / 2.0

    # Slide back inside the frame before clamping so the side is kept when it fits.
    x = max(0.0, min(x, image_size.width - w))
    y = max(0.0, min(y, image_size.height - h))
    return PixelRect(x, y, w, h).clamp_to(image_size)


def tight_bounding_rect(
    grid: SaliencyGrid,
    top_fraction: float,
    image_size: Size,
    low_quantile: float = DEFAULT_LOW_QUANTILE,
    high_quantile: float = DEFAULT_HIGH_QUANTILE,
    min_side: float = DEFAULT_MIN_SIDE,
) -> PixelRect | None:
    """Quantile-trimmed box around the top saliency pixels, in image pixels.

    Returns None when no pixel reaches the threshold.
    """
    bins = as_bins(grid)
    thr = threshold(grid, top_fraction)
    mask = bins >= thr

    count_x = mask.sum(axis=0)
    count_y = mask.sum(axis=1)
    xs = np.flatnonzero(count_x)
    ys = np.flatnonzero(count_y)
    if xs.size == 0 or ys.size == 0:
        LOG.debug("no pixel at or above bin %d", thr)
        return None

    min_x, max_x = int(xs[0]), int(xs[-1])
    min_y, max_y = int(ys[0]), int(ys[-1])

    q_min_x, q_max_x = quantile_bounds(count_x, low_quantile, high_quantile)
    q_min_y, q_max_y = quantile_bounds(count_y, low_quantile, high_quantile)

    use_min_x = max(min_x, q_min_x)
    use_max_x = max(use_min_x, min(max_x, q_max_x))
    use_min_y = max(min_y, q_min_y)
    use_max_y = max(use_min_y, min(max_y, q_max_y))

    scale_x = float(image_size.width) / float(grid.width)
    scale_y = float(image_size.height) / float(grid.height)
    rect = PixelRect(
        x=use_min_x * scale_x,
        y=use_min_y * scale_y,
        width=(use_max_x - use_min_x + 1) * scale_x,
        height=(use_max_y - use_min_y + 1) * scale_y,
    )
    rect = _enforce_min_side(rect, float(min_side), image_size)
    return rect.clamp_to(image_size)
