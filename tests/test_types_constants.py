from __future__ import annotations

import pytest

from ahtvc.constants import HARMAN_TO_VDSF_EQ, MOVING_AVERAGE_WINDOW, SMOOTH_START_FREQ, X2_EQ
from ahtvc.types import OverlayPoint, PipelineConfig, get_or_zero, union_axis


def test_correction_curve_is_read_only() -> None:
    assert len(HARMAN_TO_VDSF_EQ) == 127
    assert HARMAN_TO_VDSF_EQ[20] == -0.7
    assert HARMAN_TO_VDSF_EQ[19871] == 3.9
    with pytest.raises(TypeError):
        HARMAN_TO_VDSF_EQ[20] = 0.0  # type: ignore[index]


def test_x2_overlay_points() -> None:
    frequencies = [point.freq for point in X2_EQ]
    assert frequencies == [62, 125, 250, 500, 1000, 2000, 4000, 8000, 16000]
    assert X2_EQ[0].gain == 1.6
    assert X2_EQ[-1].gain == 0.3


def test_default_config() -> None:
    config = PipelineConfig.default()
    assert config.window_size == MOVING_AVERAGE_WINDOW == 5
    assert config.smooth_start_freq == SMOOTH_START_FREQ == 8000.0
    assert config.overlay == X2_EQ
    assert dict(config.correction) == dict(HARMAN_TO_VDSF_EQ)


def test_config_sorts_overlay_and_freezes_correction() -> None:
    correction = {100: 1.0}
    config = PipelineConfig(
        correction=correction,
        overlay=(OverlayPoint(1000, 1.0), OverlayPoint(100, 2.0)),
        window_size=3,
        smooth_start_freq=1000.0,
        primary_suffix="_a",
        secondary_suffix="_b",
    )
    correction[200] = 5.0

    assert [point.freq for point in config.overlay] == [100, 1000]
    assert dict(config.correction) == {100: 1.0}
    with pytest.raises(TypeError):
        config.correction[100] = 0.0  # type: ignore[index]


def test_config_validation() -> None:
    base = PipelineConfig.default()
    with pytest.raises(ValueError):
        base.with_overrides(overlay=())
    with pytest.raises(ValueError):
        base.with_overrides(smooth_start_freq=-1.0)
    with pytest.raises(ValueError):
        base.with_overrides(correction={100: float("nan")})


def test_config_overrides_keep_unset_fields() -> None:
    config = PipelineConfig.default().with_overrides(window_size=7, smooth_start_freq=None)
    assert config.window_size == 7
    assert config.smooth_start_freq == SMOOTH_START_FREQ


def test_overlay_point_validation() -> None:
    with pytest.raises(ValueError):
        OverlayPoint(0, 1.0)
    with pytest.raises(TypeError):
        OverlayPoint(100.5, 1.0)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        OverlayPoint(100, float("inf"))


def test_axis_helpers() -> None:
    assert union_axis({300: 1.0, 100: 1.0}, {200: 0.0, 100: 2.0}) == [100, 200, 300]
    assert union_axis() == []
    assert get_or_zero({100: 1.5}, 100) == 1.5
    assert get_or_zero({100: 1.5}, 200) == 0.0
