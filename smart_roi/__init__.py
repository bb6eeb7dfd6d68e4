"""Saliency-guided region-of-interest extraction and export."""

from .config import RoiConfig
from .detector import SaliencyDetector, SpectralResidualDetector
from .errors import CropOutOfBounds, DegenerateRect, NoSalientRegion, RoiError, UnsupportedPixelFormat
from .geometry import GridPoint, ImagePoint, NormalizedRect, PixelRect, Size
from .models import ExportSpec, RoiResult, SaliencyDetection, SaliencyGrid, SalientCandidate
from .pipeline import extract_roi, process_image

__all__ = [
    "CropOutOfBounds",
    "DegenerateRect",
    "ExportSpec",
    "GridPoint",
    "ImagePoint",
    "NoSalientRegion",
    "NormalizedRect",
    "PixelRect",
    "RoiConfig",
    "RoiError",
    "RoiResult",
    "SaliencyDetection",
    "SaliencyDetector",
    "SaliencyGrid",
    "SalientCandidate",
    "Size",
    "SpectralResidualDetector",
    "UnsupportedPixelFormat",
    "extract_roi",
    "process_image",
]
