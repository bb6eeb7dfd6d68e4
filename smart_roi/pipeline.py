"""One image in, one export-ready region out."""

from __future__ import annotations

import logging

import numpy as np
from PIL import Image

from .bbox import tight_bounding_rect
from .centroid import estimate_centroid, to_image_space
from .config import RoiConfig
from .detector import SaliencyDetector
from .errors import NoSalientRegion, UnsupportedPixelFormat
from .finalize import finalize, image_size
from .geometry import ImagePoint, PixelRect, Size
from .models import RoiResult, SaliencyDetection
from .pixels import storage_kind
from .report import summary_lines
from .selection import select_roi

LOG = logging.getLogger(__name__)

SOURCE_CANDIDATES = "candidates"
SOURCE_SALIENCY_MAP = "saliency_map"
SOURCE_FULL_IMAGE = "full_image"


def choose_roi(
    detection: SaliencyDetection,
    size: Size,
    config: RoiConfig,
) -> tuple[PixelRect | None, ImagePoint | None, str]:
    """Region in image pixels, the centroid used to pick it, and where it came from."""
    try:
        storage_kind(detection.grid)
    except UnsupportedPixelFormat as err:
        LOG.warning("%s; using the whole image", err)
        return PixelRect.full(size), None, SOURCE_FULL_IMAGE

    centroid = None
    grid_centroid = estimate_centroid(detection.grid)
    if grid_centroid is not None:
        centroid = to_image_space(grid_centroid, detection.grid.size, size)

    rect = select_roi(detection.candidates, centroid, size)
    if rect is not None:
        rect = rect.clamp_to(size)
        if not rect.is_empty:
            return rect, centroid, SOURCE_CANDIDATES
        LOG.debug("selected candidate falls outside the image, trying the saliency map")

    rect = tight_bounding_rect(
        detection.grid,
        config.top_fraction,
        size,
        low_quantile=config.low_quantile,
        high_quantile=config.high_quantile,
        min_side=config.min_side,
    )
    if rect is not None and not rect.is_empty:
        return rect, centroid, SOURCE_SALIENCY_MAP
    return None, centroid, ""


def extract_roi(
    image: Image.Image | np.ndarray,
    detection: SaliencyDetection,
    config: RoiConfig | None = None,
) -> RoiResult:
    config = config or RoiConfig()
    size = image_size(image)

    rect, centroid, source = choose_roi(detection, size, config)
    if rect is None:
        raise NoSalientRegion("no candidate box and no pixel above the saliency threshold")

    export = finalize(image, rect, origin=config.crop_origin)
    LOG.debug("roi %s from %s -> %dx%d", rect.as_list(), source, export.width, export.height)
    return RoiResult(
        image_size=size,
        centroid=centroid,
        roi=rect,
        source=source,
        export=export,
        confidence=float(detection.confidence),
        report=summary_lines(detection.confidence, detection.candidates, export, source),
    )


def process_image(
    image: Image.Image | np.ndarray,
    detector: SaliencyDetector,
    config: RoiConfig | None = None,
) -> RoiResult:
    return extract_roi(image, detector.produce(image), config)
