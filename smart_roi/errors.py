"""Failure taxonomy for one ROI extraction run."""

from __future__ import annotations


class RoiError(Exception):
    pass


class UnsupportedPixelFormat(RoiError):
    """Saliency storage is neither 8-bit nor normalized float."""


class NoSalientRegion(RoiError):
    """Neither detector boxes nor the saliency map produced a region."""


class DegenerateRect(RoiError):
    """Zero-area rectangle after clamping."""


class CropOutOfBounds(RoiError):
    """Crop rectangle does not intersect the image."""
