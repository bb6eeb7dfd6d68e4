"""Tunables for one ROI extraction run."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from .bbox import DEFAULT_HIGH_QUANTILE, DEFAULT_LOW_QUANTILE, DEFAULT_MIN_SIDE
from .detector import DEFAULT_ANALYSIS_SIZE
from .finalize import ORIGIN_TOP_LEFT, ORIGINS

DEFAULT_TOP_FRACTION = 0.05

ENV_ANALYSIS_SIZE = "SMART_ROI_ANALYSIS_SIZE"
ENV_TOP_FRACTION = "SMART_ROI_TOP_FRACTION"


def _safe_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except Exception:  # noqa: BLE001
        return default


def _safe_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except Exception:  # noqa: BLE001
        return default


@dataclass(frozen=True)
class RoiConfig:
    top_fraction: float = DEFAULT_TOP_FRACTION
    low_quantile: float = DEFAULT_LOW_QUANTILE
    high_quantile: float = DEFAULT_HIGH_QUANTILE
    min_side: int = DEFAULT_MIN_SIDE
    crop_origin: str = ORIGIN_TOP_LEFT
    analysis_size: int = DEFAULT_ANALYSIS_SIZE

    def __post_init__(self) -> None:
        if not 0.0 < self.top_fraction <= 1.0:
            raise ValueError(f"top_fraction must be in (0, 1], got {self.top_fraction}")
        if not 0.0 <= self.low_quantile < self.high_quantile <= 1.0:
            raise ValueError(
                f"need 0 <= low_quantile < high_quantile <= 1, got {self.low_quantile}, {self.high_quantile}"
            )
        if self.min_side < 1:
            raise ValueError(f"min_side must be positive, got {self.min_side}")
        if self.crop_origin not in ORIGINS:
            raise ValueError(f"crop_origin must be one of {ORIGINS}, got {self.crop_origin!r}")
        if self.analysis_size < 16:
            raise ValueError(f"analysis_size too small: {self.analysis_size}")

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> RoiConfig:
        """Build from a worker payload; unparsable values fall back to env or defaults."""
        top_default = _safe_float(os.getenv(ENV_TOP_FRACTION), DEFAULT_TOP_FRACTION)
        size_default = _safe_int(os.getenv(ENV_ANALYSIS_SIZE), DEFAULT_ANALYSIS_SIZE)
        origin = str(payload.get("crop_origin") or ORIGIN_TOP_LEFT).strip().lower()
        return cls(
            top_fraction=_safe_float(payload.get("top_fraction"), top_default),
            low_quantile=_safe_float(payload.get("low_quantile"), DEFAULT_LOW_QUANTILE),
            high_quantile=_safe_float(payload.get("high_quantile"), DEFAULT_HIGH_QUANTILE),
            min_side=_safe_int(payload.get("min_side"), DEFAULT_MIN_SIDE),
            crop_origin=origin,
            analysis_size=_safe_int(payload.get("analysis_size"), size_default),
        )
