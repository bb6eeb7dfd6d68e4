from __future__ import annotations

import pytest

from smart_roi.config import DEFAULT_TOP_FRACTION, ENV_ANALYSIS_SIZE, ENV_TOP_FRACTION, RoiConfig


def test_defaults() -> None:
    cfg = RoiConfig()
    assert cfg.top_fraction == DEFAULT_TOP_FRACTION == 0.05
    assert (cfg.low_quantile, cfg.high_quantile) == (0.10, 0.90)
    assert cfg.min_side == 64
    assert cfg.crop_origin == "top-left"
    assert cfg.analysis_size == 512


def test_from_payload_tolerates_bad_values() -> None:
    cfg = RoiConfig.from_payload({"top_fraction": "abc", "min_side": None, "crop_origin": " Bottom-Left "})
    assert cfg.top_fraction == 0.05
    assert cfg.min_side == 64
    assert cfg.crop_origin == "bottom-left"


def test_from_payload_reads_values_and_env(monkeypatch) -> None:
    monkeypatch.setenv(ENV_TOP_FRACTION, "0.2")
    monkeypatch.setenv(ENV_ANALYSIS_SIZE, "256")
    cfg = RoiConfig.from_payload({"min_side": "32"})
    assert cfg.top_fraction == 0.2
    assert cfg.analysis_size == 256
    assert cfg.min_side == 32

    cfg = RoiConfig.from_payload({"top_fraction": 0.1})
    assert cfg.top_fraction == 0.1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"top_fraction": 0.0},
        {"top_fraction": 1.2},
        {"low_quantile": 0.9, "high_quantile": 0.1},
        {"min_side": 0},
        {"crop_origin": "center"},
        {"analysis_size": 4},
    ],
)
def test_invalid_config_raises(kwargs) -> None:
    with pytest.raises(ValueError):
        RoiConfig(**kwargs)
