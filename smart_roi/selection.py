"""Pick one detector box as the region of interest."""

from __future__ import annotations

from .geometry import ImagePoint, PixelRect, Size
from .models import SalientCandidate


def _center_distance_sq(candidate: SalientCandidate, cx: float, cy: float) -> float:
    dx = candidate.rect.mid_x - cx
    dy = candidate.rect.mid_y - cy
    return dx * dx + dy * dy


def select_candidate(
    candidates: list[SalientCandidate],
    centroid: ImagePoint | None,
    image_size: Size,
) -> SalientCandidate | None:
    if not candidates:
        return None

    if centroid is not None:
        cx = centroid.x / image_size.width
        cy = centroid.y / image_size.height
        # min() keeps the first of equal keys, so full ties resolve to input order.
        return min(candidates, key=lambda c: (_center_distance_sq(c, cx, cy), -c.confidence))

    return max(enumerate(candidates), key=lambda item: (item[1].confidence, -item[0]))[1]


def select_roi(
    candidates: list[SalientCandidate],
    centroid: ImagePoint | None,
    image_size: Size,
) -> PixelRect | None:
    """Box whose centre is nearest the saliency centroid, in image pixels.

    Without a centroid the most confident box wins. Returns None when there
    are no candidates so the caller can fall back to the saliency map.
    """
    best = select_candidate(candidates, centroid, image_size)
    if best is None:
        return None
    return best.rect.to_pixels(image_size)


def dominant_candidate(candidates: list[SalientCandidate]) -> SalientCandidate | None:
    """Largest confidence-weighted box, the one a viewer would call the main area."""
    if not candidates:
        return None
    return max(enumerate(candidates), key=lambda item: (item[1].rect.area * item[1].confidence, -item[0]))[1]
