"""Value types passed between the pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from PIL import Image

from .geometry import ImagePoint, NormalizedRect, PixelRect, Size


@dataclass(frozen=True)
class SaliencyGrid:
    """Read-only saliency map.

    ``values`` is a 2-D array indexed ``[y, x]``; 8-bit storage holds
    [0, 255] intensities, float storage holds normalized [0, 1] confidences.
    """

    values: np.ndarray

    def __post_init__(self) -> None:
        if self.values.ndim != 2 or self.values.shape[0] <= 0 or self.values.shape[1] <= 0:
            raise ValueError(f"saliency grid must be a non-empty 2-D array, got shape {self.values.shape}")

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    @property
    def height(self) -> int:
        return int(self.values.shape[0])

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)


@dataclass(frozen=True)
class SalientCandidate:
    rect: NormalizedRect
    confidence: float


@dataclass(frozen=True)
class SaliencyDetection:
    """Everything a detector reports for one image."""

    grid: SaliencyGrid
    confidence: float = 0.0
    candidates: list[SalientCandidate] = field(default_factory=list)


@dataclass(frozen=True)
class ExportSpec:
    """Cropped and resampled pixels, ``[y, x]`` or ``[y, x, channel]``."""

    pixels: np.ndarray
    width: int
    height: int

    def to_pil(self) -> Image.Image:
        return Image.fromarray(self.pixels)


@dataclass(frozen=True)
class RoiResult:
    image_size: Size
    centroid: ImagePoint | None
    roi: PixelRect
    source: str
    export: ExportSpec
    confidence: float = 0.0
    report: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "roi": self.roi.as_list(),
            "source": self.source,
            "size": [int(self.export.width), int(self.export.height)],
            "confidence": float(round(self.confidence, 4)),
            "centroid": None if self.centroid is None else [round(self.centroid.x, 2), round(self.centroid.y, 2)],
            "report": list(self.report),
        }
