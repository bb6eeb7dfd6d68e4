"""Saliency detector capability and an OpenCV-backed implementation."""

from __future__ import annotations

import logging
import math
from typing import Protocol

import cv2
import numpy as np
from PIL import Image

from .finalize import image_pixels
from .geometry import NormalizedRect
from .models import SaliencyDetection, SaliencyGrid, SalientCandidate

LOG = logging.getLogger(__name__)

DEFAULT_ANALYSIS_SIZE = 512
DEFAULT_MASK_QUANTILE = 0.75
DEFAULT_MAX_CANDIDATES = 5
DEFAULT_MIN_COMPONENT_RATIO = 0.002


class SaliencyDetector(Protocol):
    def produce(self, image: Image.Image | np.ndarray) -> SaliencyDetection: ...


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def to_bgr(image: Image.Image | np.ndarray) -> np.ndarray:
    pixels = image_pixels(image)
    if pixels.dtype != np.uint8:
        pixels = np.clip(pixels, 0, 255).astype(np.uint8)
    if pixels.ndim == 2:
        return cv2.cvtColor(pixels, cv2.COLOR_GRAY2BGR)
    if pixels.shape[2] == 4:
        return cv2.cvtColor(pixels, cv2.COLOR_RGBA2BGR)
    return cv2.cvtColor(pixels, cv2.COLOR_RGB2BGR)


def resize_for_analysis(image: np.ndarray, max_side: int) -> np.ndarray:
    h, w = image.shape[:2]
    scale = float(max_side) / float(max(h, w))
    if scale >= 1.0:
        return image
    new_w = max(1, int(round(w * scale)))
    new_h = max(1, int(round(h * scale)))
    return cv2.resize(image, (new_w, new_h), interpolation=cv2.INTER_AREA)


def normalize_map(src: np.ndarray) -> np.ndarray:
    arr = np.nan_to_num(src.astype(np.float32), nan=0.0, posinf=0.0, neginf=0.0)
    mn = float(np.min(arr))
    mx = float(np.max(arr))
    if mx <= mn + 1e-8:
        return np.zeros_like(arr, dtype=np.float32)
    return (arr - mn) / (mx - mn)


def gradient_saliency_map(gray: np.ndarray) -> np.ndarray:
    gx = cv2.Sobel(gray, cv2.CV_32F, 1, 0, ksize=3)
    gy = cv2.Sobel(gray, cv2.CV_32F, 0, 1, ksize=3)
    return normalize_map(cv2.magnitude(gx, gy))


def compute_saliency_map(bgr: np.ndarray) -> np.ndarray:
    """Spectral-residual saliency in [0, 1]; gradient magnitude when opencv-contrib is absent.

    A flat frame has nothing salient and yields an all-zero map.
    """
    gray = cv2.cvtColor(bgr, cv2.COLOR_BGR2GRAY)
    if float(gray.std()) < 1e-6:
        return np.zeros(gray.shape, dtype=np.float32)

    saliency = getattr(cv2, "saliency", None)
    if saliency is not None and hasattr(saliency, "StaticSaliencySpectralResidual_create"):
        engine = saliency.StaticSaliencySpectralResidual_create()
        success, sal = engine.computeSaliency(bgr)
        if success and sal is not None:
            return normalize_map(sal)
        LOG.debug("spectral residual saliency failed, using gradient map")
    return gradient_saliency_map(gray)


def salient_components(
    saliency_map: np.ndarray,
    mask_quantile: float = DEFAULT_MASK_QUANTILE,
    max_candidates: int = DEFAULT_MAX_CANDIDATES,
    min_component_ratio: float = DEFAULT_MIN_COMPONENT_RATIO,
) -> list[SalientCandidate]:
    """Connected blobs of the top-quantile mask as normalized candidate boxes."""
    h, w = saliency_map.shape[:2]
    if not np.any(saliency_map > 0):
        return []

    threshold = float(np.quantile(saliency_map, mask_quantile))
    mask = saliency_map >= threshold
    if threshold <= 0.0:
        mask = saliency_map > 0

    mask_u8 = mask.astype(np.uint8) * 255
    kernel = np.ones((3, 3), np.uint8)
    processed = cv2.morphologyEx(mask_u8, cv2.MORPH_CLOSE, kernel, iterations=1)
    processed = cv2.morphologyEx(processed, cv2.MORPH_OPEN, kernel, iterations=1)

    num_labels, labels, stats, _ = cv2.connectedComponentsWithStats(processed, connectivity=8)
    min_area = max(1, int(round(min_component_ratio * w * h)))

    scored: list[tuple[float, SalientCandidate]] = []
    for i in range(1, num_labels):
        x = int(stats[i, cv2.CC_STAT_LEFT])
        y = int(stats[i, cv2.CC_STAT_TOP])
        bw = int(stats[i, cv2.CC_STAT_WIDTH])
        bh = int(stats[i, cv2.CC_STAT_HEIGHT])
        area = int(stats[i, cv2.CC_STAT_AREA])
        if area < min_area or bw <= 0 or bh <= 0:
            continue
        component = labels[y : y + bh, x : x + bw] == i
        mean_sal = float(np.mean(saliency_map[y : y + bh, x : x + bw][component]))
        rect = NormalizedRect(x / float(w), y / float(h), bw / float(w), bh / float(h))
        candidate = SalientCandidate(rect=rect, confidence=_clamp(mean_sal, 0.0, 1.0))
        scored.append((mean_sal * math.sqrt(float(area)), candidate))

    scored.sort(key=lambda item: item[0], reverse=True)
    return [candidate for _, candidate in scored[:max_candidates]]


def map_confidence(saliency_map: np.ndarray, mask_quantile: float = DEFAULT_MASK_QUANTILE) -> float:
    """How far the salient region stands out from the rest of the map."""
    if not np.any(saliency_map > 0):
        return 0.0
    mask = saliency_map >= float(np.quantile(saliency_map, mask_quantile))
    top_mean = float(np.mean(saliency_map[mask]))
    global_mean = float(np.mean(saliency_map))
    return _clamp((top_mean - global_mean) / (1.0 - global_mean + 1e-6), 0.0, 1.0)


class SpectralResidualDetector:
    """OpenCV static saliency at a reduced analysis resolution."""

    def __init__(
        self,
        analysis_size: int = DEFAULT_ANALYSIS_SIZE,
        mask_quantile: float = DEFAULT_MASK_QUANTILE,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
    ) -> None:
        self.analysis_size = analysis_size
        self.mask_quantile = mask_quantile
        self.max_candidates = max_candidates

    def produce(self, image: Image.Image | np.ndarray) -> SaliencyDetection:
        analysis = resize_for_analysis(to_bgr(image), self.analysis_size)
        saliency_map = compute_saliency_map(analysis)
        candidates = salient_components(
            saliency_map,
            mask_quantile=self.mask_quantile,
            max_candidates=self.max_candidates,
        )
        confidence = map_confidence(saliency_map, self.mask_quantile)
        LOG.debug(
            "saliency map %dx%d, %d candidates, confidence %.3f",
            saliency_map.shape[1],
            saliency_map.shape[0],
            len(candidates),
            confidence,
        )
        return SaliencyDetection(grid=SaliencyGrid(saliency_map), confidence=confidence, candidates=candidates)
