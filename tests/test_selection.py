from __future__ import annotations

import pytest

from smart_roi.geometry import ImagePoint, NormalizedRect, Size
from smart_roi.models import SalientCandidate
from smart_roi.selection import dominant_candidate, select_candidate, select_roi

SIZE = Size(1000, 800)


def _cand(x: float, y: float, w: float, h: float, conf: float) -> SalientCandidate:
    return SalientCandidate(rect=NormalizedRect(x, y, w, h), confidence=conf)


def test_no_candidates_gives_none() -> None:
    assert select_roi([], ImagePoint(10, 10), SIZE) is None
    assert select_roi([], None, SIZE) is None


def test_nearest_to_centroid_beats_confidence() -> None:
    far = _cand(0.0, 0.0, 0.2, 0.2, 0.9)
    near = _cand(0.4, 0.4, 0.2, 0.2, 0.4)
    rect = select_roi([far, near], ImagePoint(500.0, 400.0), SIZE)
    assert rect is not None
    assert (rect.x, rect.y, rect.width, rect.height) == pytest.approx((400.0, 320.0, 200.0, 160.0))


def test_equal_distance_prefers_higher_confidence() -> None:
    low = _cand(0.4, 0.4, 0.2, 0.2, 0.3)
    high = _cand(0.3, 0.3, 0.4, 0.4, 0.8)
    assert select_candidate([low, high], ImagePoint(500.0, 400.0), SIZE) is high
    assert select_candidate([high, low], ImagePoint(500.0, 400.0), SIZE) is high


def test_without_centroid_highest_confidence_first_seen() -> None:
    a = _cand(0.0, 0.0, 0.1, 0.1, 0.5)
    b = _cand(0.5, 0.5, 0.1, 0.1, 0.7)
    c = _cand(0.8, 0.8, 0.1, 0.1, 0.7)
    assert select_candidate([a, b, c], None, SIZE) is b
    assert select_candidate([a, c, b], None, SIZE) is c


def test_selection_is_deterministic() -> None:
    cands = [_cand(0.1 * i, 0.05 * i, 0.2, 0.2, 0.5) for i in range(6)]
    centroid = ImagePoint(333.0, 222.0)
    first = select_roi(cands, centroid, SIZE)
    for _ in range(10):
        assert select_roi(list(cands), centroid, SIZE) == first


def test_dominant_candidate_weighs_area_by_confidence() -> None:
    small_sure = _cand(0.0, 0.0, 0.1, 0.1, 1.0)
    big_unsure = _cand(0.2, 0.2, 0.5, 0.5, 0.2)
    assert dominant_candidate([small_sure, big_unsure]) is big_unsure
    assert dominant_candidate([]) is None
