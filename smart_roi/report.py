"""Human-readable summary lines for one run."""

from __future__ import annotations

from .models import ExportSpec, SalientCandidate
from .selection import dominant_candidate


def summary_lines(
    confidence: float,
    candidates: list[SalientCandidate],
    export: ExportSpec | None,
    source: str,
) -> list[str]:
    lines = ["Attention areas detected", f"Saliency confidence: {confidence:.2f}"]

    main = dominant_candidate(candidates)
    if main is not None:
        lines.append(f"Main area (detector box, confidence {main.confidence:.2f})")

    lines.append(f"ROI source: {source}")
    if export is not None:
        lines.append(f"API image: {export.width}x{export.height} px (cropped + resized)")
    lines.append("Processing completed successfully")
    return lines
