"""Context padding, cropping and tiered downscaling of the chosen region."""

from __future__ import annotations

import logging
import math

import cv2
import numpy as np
from PIL import Image

from .errors import CropOutOfBounds, DegenerateRect
from .geometry import PixelRect, Size
from .models import ExportSpec

LOG = logging.getLogger(__name__)

MIN_PADDING_RATIO = 0.02
MAX_EXTRA_PADDING_RATIO = 0.08

SMALL_ROI_AREA_RATIO = 0.15
MEDIUM_ROI_AREA_RATIO = 0.35
SMALL_LONG_SIDE = 512
MEDIUM_LONG_SIDE = 640
LARGE_LONG_SIDE = 768

ORIGIN_TOP_LEFT = "top-left"
ORIGIN_BOTTOM_LEFT = "bottom-left"
ORIGINS = (ORIGIN_TOP_LEFT, ORIGIN_BOTTOM_LEFT)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def image_pixels(image: Image.Image | np.ndarray) -> np.ndarray:
    if isinstance(image, Image.Image):
        if image.mode not in ("L", "RGB", "RGBA"):
            image = image.convert("RGB")
        return np.asarray(image)
    arr = np.asarray(image)
    if arr.ndim not in (2, 3) or arr.shape[0] <= 0 or arr.shape[1] <= 0:
        raise ValueError(f"image must be a non-empty HxW or HxWxC array, got shape {arr.shape}")
    return arr


def image_size(image: Image.Image | np.ndarray) -> Size:
    if isinstance(image, Image.Image):
        return Size(int(image.width), int(image.height))
    arr = image_pixels(image)
    return Size(int(arr.shape[1]), int(arr.shape[0]))


def padding_ratio(rect: PixelRect, size: Size) -> float:
    """0.02 for a box touching the frame, growing to 0.10 as it moves away from every edge."""
    border_min = min(
        rect.min_x,
        rect.min_y,
        size.width - rect.max_x,
        size.height - rect.max_y,
    )
    closeness = _clamp(border_min / float(size.long_side), 0.0, 1.0)
    return MIN_PADDING_RATIO + MAX_EXTRA_PADDING_RATIO * closeness


def pad_rect(rect: PixelRect, size: Size) -> PixelRect:
    padding = max(rect.width, rect.height) * padding_ratio(rect, size)
    return rect.inset(-padding, -padding).clamp_to(size)


def target_long_side(rect: PixelRect, size: Size) -> int:
    area_ratio = rect.area / float(size.area)
    if area_ratio < SMALL_ROI_AREA_RATIO:
        return SMALL_LONG_SIDE
    if area_ratio < MEDIUM_ROI_AREA_RATIO:
        return MEDIUM_LONG_SIDE
    return LARGE_LONG_SIDE


def target_size(cropped: Size, long_side: int) -> Size:
    """Downscale-only fit of ``cropped`` into ``long_side``."""
    current = cropped.long_side
    scale = long_side / float(current) if current > long_side else 1.0
    if scale == 1.0:
        return cropped
    return Size(
        max(1, int(math.floor(cropped.width * scale))),
        max(1, int(math.floor(cropped.height * scale))),
    )


def crop_pixels(pixels: np.ndarray, rect: PixelRect, origin: str = ORIGIN_TOP_LEFT) -> np.ndarray:
    """Cut ``rect`` (top-left image space) out of a row-major buffer.

    Buffers stored bottom row first (``origin="bottom-left"``) get the single
    vertical flip here; nothing upstream flips.
    """
    if origin not in ORIGINS:
        raise ValueError(f"unknown origin: {origin}")

    height, width = pixels.shape[:2]
    if origin == ORIGIN_BOTTOM_LEFT:
        rect = rect.flipped(height)

    left, top, right, bottom = rect.to_box()
    left = max(0, left)
    top = max(0, top)
    right = min(width, right)
    bottom = min(height, bottom)
    if right <= left or bottom <= top:
        raise CropOutOfBounds(f"crop {rect} misses {width}x{height} image")
    return pixels[top:bottom, left:right]


def resample(pixels: np.ndarray, size: Size) -> np.ndarray:
    h, w = pixels.shape[:2]
    if (w, h) == (size.width, size.height):
        return pixels.copy()
    return cv2.resize(np.ascontiguousarray(pixels), (size.width, size.height), interpolation=cv2.INTER_AREA)


def finalize(
    image: Image.Image | np.ndarray,
    rect: PixelRect,
    origin: str = ORIGIN_TOP_LEFT,
) -> ExportSpec:
    """Pad, crop and downscale ``rect`` from ``image`` into an export-ready buffer."""
    if rect.is_empty:
        raise DegenerateRect(f"roi has no area: {rect}")

    pixels = image_pixels(image)
    size = Size(int(pixels.shape[1]), int(pixels.shape[0]))

    padded = pad_rect(rect, size)
    if padded.is_empty:
        raise DegenerateRect(f"roi {rect} is empty after clamping to {size.width}x{size.height}")

    cropped = crop_pixels(pixels, padded, origin=origin)
    cropped_size = Size(int(cropped.shape[1]), int(cropped.shape[0]))

    long_side = target_long_side(padded, size)
    out_size = target_size(cropped_size, long_side)
    out = resample(cropped, out_size)
    LOG.debug(
        "crop %dx%d -> %dx%d (tier %d)",
        cropped_size.width,
        cropped_size.height,
        out_size.width,
        out_size.height,
        long_side,
    )
    return ExportSpec(pixels=out, width=out_size.width, height=out_size.height)
