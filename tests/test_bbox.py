from __future__ import annotations

import numpy as np
import pytest

from smart_roi.bbox import quantile_bounds, tight_bounding_rect
from smart_roi.geometry import PixelRect, Size
from smart_roi.models import SaliencyGrid


def _inside(rect: PixelRect, size: Size) -> bool:
    return 0.0 <= rect.min_x <= rect.max_x <= size.width and 0.0 <= rect.min_y <= rect.max_y <= size.height


def test_quantile_bounds_trims_tails() -> None:
    counts = np.array([1, 0, 0, 10, 10, 10, 10, 0, 0, 1])
    assert quantile_bounds(counts, 0.10, 0.90) == (3, 6)


def test_quantile_bounds_empty_counts_span_everything() -> None:
    assert quantile_bounds(np.zeros(5, dtype=np.int64), 0.10, 0.90) == (0, 4)


def test_quantile_bounds_collapses_crossed_range() -> None:
    assert quantile_bounds(np.array([5, 0, 5]), 0.9, 0.1) == (2, 2)


def test_scenario_a_block_maps_to_image_space() -> None:
    values = np.zeros((100, 100), dtype=np.float32)
    values[45:55, 45:55] = 1.0
    rect = tight_bounding_rect(SaliencyGrid(values), 0.05, Size(1000, 1000))
    assert rect is not None
    assert rect.x == pytest.approx(450.0)
    assert rect.y == pytest.approx(450.0)
    assert rect.max_x == pytest.approx(550.0)
    assert rect.max_y == pytest.approx(550.0)


def test_isolated_outliers_do_not_stretch_the_box() -> None:
    values = np.zeros((100, 100), dtype=np.uint8)
    values[40:60, 30:70] = 255
    values[0, 0] = 255
    values[99, 99] = 255
    rect = tight_bounding_rect(SaliencyGrid(values), 0.05, Size(1000, 1000))
    assert rect is not None
    assert (rect.x, rect.y, rect.width, rect.height) == pytest.approx((330.0, 410.0, 340.0, 180.0))
    assert rect.min_x >= 300 and rect.max_x <= 700
    assert rect.min_y >= 400 and rect.max_y <= 600


def test_no_qualifying_pixel_returns_none() -> None:
    grid = SaliencyGrid(np.zeros((30, 40), dtype=np.float32))
    assert tight_bounding_rect(grid, 0.05, Size(400, 300)) is None


def test_min_side_is_enforced_around_the_centre() -> None:
    values = np.zeros((100, 100), dtype=np.uint8)
    values[50, 50] = 255
    rect = tight_bounding_rect(SaliencyGrid(values), 0.05, Size(200, 200))
    assert rect is not None
    assert (rect.x, rect.y, rect.width, rect.height) == pytest.approx((69.0, 69.0, 64.0, 64.0))


def test_min_side_kept_near_the_frame_edge() -> None:
    values = np.zeros((100, 100), dtype=np.uint8)
    values[99, 99] = 255
    size = Size(200, 200)
    rect = tight_bounding_rect(SaliencyGrid(values), 0.05, size)
    assert rect is not None
    assert rect.width >= 64 and rect.height >= 64
    assert _inside(rect, size)
    assert rect.max_x == pytest.approx(200.0)


def test_min_side_limited_by_small_image() -> None:
    values = np.zeros((10, 10), dtype=np.uint8)
    values[5, 5] = 255
    rect = tight_bounding_rect(SaliencyGrid(values), 0.05, Size(40, 30))
    assert rect is not None
    assert (rect.x, rect.y, rect.width, rect.height) == pytest.approx((0.0, 0.0, 40.0, 30.0))


def test_grid_and_image_aspect_ratios_may_differ() -> None:
    values = np.zeros((20, 10), dtype=np.uint8)
    values[10:12, 2:4] = 255
    rect = tight_bounding_rect(SaliencyGrid(values), 0.05, Size(1000, 100), min_side=1)
    assert rect is not None
    assert (rect.x, rect.y, rect.width, rect.height) == pytest.approx((200.0, 50.0, 200.0, 10.0))


def test_result_always_inside_image() -> None:
    rng = np.random.default_rng(11)
    for _ in range(20):
        gh, gw = int(rng.integers(8, 60)), int(rng.integers(8, 60))
        size = Size(int(rng.integers(20, 900)), int(rng.integers(20, 900)))
        grid = SaliencyGrid(rng.random((gh, gw)).astype(np.float32))
        rect = tight_bounding_rect(grid, float(rng.uniform(0.01, 0.5)), size)
        assert rect is not None
        assert _inside(rect, size)
        assert not rect.is_empty
