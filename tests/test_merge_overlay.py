from __future__ import annotations

import math

import numpy as np
import pytest

from ahtvc.diagnostics import Diagnostics
from ahtvc.dsp.merge import merge_curves
from ahtvc.dsp.overlay import apply_overlay, overlay_gain_at
from ahtvc.types import OverlayPoint, get_or_zero

_OVERLAY = (
    OverlayPoint(100, 0.0),
    OverlayPoint(1000, 10.0),
    OverlayPoint(10000, -2.0),
)


def test_merge_is_total_over_union() -> None:
    first = {20: 1.0, 100: -2.0, 1000: 0.5}
    second = {100: 3.0, 5000: -1.5}

    merged, axis = merge_curves(first, second)

    assert axis == [20, 100, 1000, 5000]
    for freq in axis:
        assert merged[freq] == get_or_zero(first, freq) + get_or_zero(second, freq)
    assert merged[100] == 1.0


def test_merge_with_empty_curve_keeps_values() -> None:
    merged, axis = merge_curves({100: 3.0, 1000: 3.0}, {})
    assert merged == {100: 3.0, 1000: 3.0}
    assert axis == [100, 1000]


def test_merge_does_not_alias_inputs() -> None:
    first = {100: 1.0}
    merged, _ = merge_curves(first, {})
    merged[100] = 5.0
    assert first == {100: 1.0}


def test_overlay_clamps_outside_range() -> None:
    assert overlay_gain_at(_OVERLAY, 20) == 0.0
    assert overlay_gain_at(_OVERLAY, 20000) == -2.0


def test_overlay_exact_control_points() -> None:
    for point in _OVERLAY:
        assert overlay_gain_at(_OVERLAY, point.freq) == point.gain


def test_overlay_interpolates_in_log_frequency() -> None:
    freq = 316
    expected = 10.0 * (math.log10(freq) - 2.0)
    assert overlay_gain_at(_OVERLAY, freq) == pytest.approx(expected)
    # Середина декады по логарифму, а не по линейной шкале
    assert overlay_gain_at(_OVERLAY, 5500) < 4.0


def test_single_point_overlay_extrapolates_both_sides() -> None:
    overlay = (OverlayPoint(1000, 2.0),)
    base = {50: 0.0, 1000: 1.0, 5000: -1.0}

    result = apply_overlay(base, [50, 1000, 5000], overlay)

    assert result[50] == 2.0
    assert result[1000] == 3.0
    assert result[5000] == 1.0


def test_overlay_never_introduces_frequencies() -> None:
    base = {100: 1.0, 300: 1.0}
    result = apply_overlay(base, [100, 200, 300], _OVERLAY)
    assert set(result) == {100, 300}


def test_overlay_keeps_value_when_sum_is_not_finite() -> None:
    diagnostics = Diagnostics()
    base = {100: math.inf, 1000: 1.0}

    result = apply_overlay(base, [100, 1000], _OVERLAY, diagnostics)

    assert result[100] == math.inf
    assert result[1000] == 11.0
    assert diagnostics.count("overlay") == 1


def test_overlay_does_not_mutate_base() -> None:
    base = {1000: 1.0}
    apply_overlay(base, [1000], _OVERLAY)
    assert base == {1000: 1.0}


def test_overlay_matches_numpy_interp() -> None:
    xs = np.log10([point.freq for point in _OVERLAY])
    ys = [point.gain for point in _OVERLAY]
    for freq in (30, 150, 999, 1001, 4321, 9999, 25000):
        assert overlay_gain_at(_OVERLAY, freq) == pytest.approx(float(np.interp(np.log10(freq), xs, ys)))


def test_overlay_degenerate_span_uses_lower_gain() -> None:
    overlay = (OverlayPoint(1_000_000_000, 1.0), OverlayPoint(1_000_000_001, 5.0))
    diagnostics = Diagnostics()

    gain = overlay_gain_at(overlay, 1_000_000_000.5, diagnostics)

    assert gain == 1.0
    assert diagnostics.count("overlay") == 1


def test_overlay_regular_span_emits_no_warning() -> None:
    diagnostics = Diagnostics()
    overlay_gain_at(_OVERLAY, 316, diagnostics)
    assert diagnostics.count() == 0
