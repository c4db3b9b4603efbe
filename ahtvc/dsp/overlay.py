from __future__ import annotations

import math
from typing import Mapping, Optional, Sequence

import numpy as np

from ahtvc.diagnostics import Diagnostics, warn
from ahtvc.types import FrequencyGainCurve, OverlayPoint

# Минимальный шаг по log10-частоте, при котором ещё выполняется деление
LOG_SPAN_EPSILON = 1e-9
_STAGE = "overlay"


def overlay_gain_at(
    overlay: Sequence[OverlayPoint], freq: float, diagnostics: Optional[Diagnostics] = None
) -> float:
    """Вычисляет усиление кривой-наложения на частоте ``freq``.

    Между контрольными точками используется линейная интерполяция по
    log10-частоте, за пределами кривой — значение крайней точки.

    Args:
        overlay: Контрольные точки, отсортированные по возрастанию частоты.
        freq: Целевая частота в Гц.
        diagnostics: Накопитель предупреждений (необязательно).
    """

    if not overlay:
        raise ValueError("overlay должен содержать хотя бы одну точку")

    first, last = overlay[0], overlay[-1]
    if freq <= first.freq:
        return float(first.gain)
    if freq >= last.freq:
        return float(last.gain)

    frequencies = np.fromiter((point.freq for point in overlay), dtype=np.float64, count=len(overlay))
    upper_index = int(np.searchsorted(frequencies, freq, side="left"))
    upper = overlay[upper_index]
    if upper.freq == freq:
        return float(upper.gain)
    lower = overlay[upper_index - 1]

    log_lower, log_upper, log_target = np.log10([lower.freq, upper.freq, freq])
    span = float(log_upper - log_lower)
    if span < LOG_SPAN_EPSILON:
        warn(
            diagnostics,
            _STAGE,
            "вырожденный интервал %d-%d Гц, взято усиление нижней точки",
            lower.freq,
            upper.freq,
        )
        return float(lower.gain)
    proportion = float(log_target - log_lower) / span
    return float(lower.gain + proportion * (upper.gain - lower.gain))


def apply_overlay(
    base: Mapping[int, float],
    axis: Sequence[int],
    overlay: Sequence[OverlayPoint],
    diagnostics: Optional[Diagnostics] = None,
) -> FrequencyGainCurve:
    """Добавляет кривую-наложение ко всем частотам оси, присутствующим в ``base``.

    Новые частоты не добавляются. Если сумма на частоте получается неконечной,
    на этой частоте сохраняется прежнее значение.
    """

    result: FrequencyGainCurve = dict(base)
    if not overlay:
        return result

    for freq in axis:
        if freq not in result:
            continue
        combined = result[freq] + overlay_gain_at(overlay, freq, diagnostics)
        if not math.isfinite(combined):
            warn(diagnostics, _STAGE, "неконечное значение на %d Гц, сохранено исходное", freq)
            continue
        result[freq] = combined
    return result


__all__ = ["LOG_SPAN_EPSILON", "apply_overlay", "overlay_gain_at"]
