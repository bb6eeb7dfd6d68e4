"""Visual companions of a saliency map: grayscale heatmap and tinted overlay."""

from __future__ import annotations

import cv2
import numpy as np
from PIL import Image

from .finalize import image_pixels
from .models import SaliencyGrid
from .pixels import as_weights


def saliency_heatmap(grid: SaliencyGrid) -> np.ndarray:
    return np.clip(as_weights(grid), 0.0, 255.0).astype(np.uint8)


def combined_overlay(
    image: Image.Image | np.ndarray,
    grid: SaliencyGrid,
    color: tuple[int, int, int] = (255, 0, 0),
    alpha: float = 0.6,
) -> np.ndarray:
    """Tint ``image`` with ``color`` where the map is salient.

    The map is stretched to the image per axis; the tint opacity at each
    pixel is ``alpha`` times the normalized saliency. Returns RGB uint8.
    """
    pixels = image_pixels(image)
    if pixels.ndim == 2:
        rgb = cv2.cvtColor(pixels, cv2.COLOR_GRAY2RGB)
    elif pixels.shape[2] == 4:
        rgb = cv2.cvtColor(pixels, cv2.COLOR_RGBA2RGB)
    else:
        rgb = pixels
    h, w = rgb.shape[:2]

    weights = (as_weights(grid) / 255.0).astype(np.float32)
    weights = cv2.resize(weights, (w, h), interpolation=cv2.INTER_LINEAR)
    opacity = np.clip(weights * float(alpha), 0.0, 1.0)[:, :, None]

    tint = np.asarray(color, dtype=np.float32)[None, None, :]
    blended = rgb.astype(np.float32) * (1.0 - opacity) + tint * opacity
    return np.clip(blended + 0.5, 0, 255).astype(np.uint8)
