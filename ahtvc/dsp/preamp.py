from __future__ import annotations

import math
from typing import Mapping, Optional, Sequence

import numpy as np

from ahtvc.diagnostics import Diagnostics, warn
from ahtvc.types import FrequencyGainCurve, iter_present

_STAGE = "preamp"


def remove_preamp(
    curve: Mapping[int, float],
    axis: Sequence[int],
    diagnostics: Optional[Diagnostics] = None,
) -> FrequencyGainCurve:
    """Сдвигает кривую вниз на максимальное усиление, чтобы ни одна полоса не превышала 0 дБ.

    Кривая никогда не сдвигается вверх: если максимум отрицательный, сдвиг равен 0.
    Учитываются только частоты оси, присутствующие в кривой.
    """

    frequencies = []
    values = []
    for freq, gain in iter_present(curve, axis):
        if not math.isfinite(gain):
            warn(diagnostics, _STAGE, "неконечное усиление на %d Гц принято за 0.0", freq)
            gain = 0.0
        frequencies.append(freq)
        values.append(gain)

    if not values:
        warn(diagnostics, _STAGE, "нет данных для нормализации")
        return dict(curve)

    shift = max(float(np.max(np.asarray(values, dtype=np.float64))), 0.0)
    shifted = [value - shift for value in values]

    result: FrequencyGainCurve = {}
    for freq, value in zip(frequencies, shifted):
        if not math.isfinite(value):
            warn(diagnostics, _STAGE, "неконечное значение после сдвига на %d Гц заменено на 0.0", freq)
            value = 0.0
        result[freq] = float(value)
    return result


__all__ = ["remove_preamp"]
