from __future__ import annotations

from typing import Mapping, Optional, Sequence

import numpy as np

from ahtvc.diagnostics import Diagnostics, warn
from ahtvc.logging_utils import get_logger
from ahtvc.types import FrequencyGainCurve, get_or_zero

logger = get_logger(__name__)
_STAGE = "smooth"


def _find_start_index(axis: Sequence[int], start_freq: float) -> int:
    for index, freq in enumerate(axis):
        if freq >= start_freq:
            return index
    return -1


def smooth_high_band(
    curve: Mapping[int, float],
    axis: Sequence[int],
    window_size: int,
    start_freq: float,
    diagnostics: Optional[Diagnostics] = None,
) -> FrequencyGainCurve:
    """Сглаживает кривую скользящим средним начиная с частоты ``start_freq``.

    Окно строится по индексам оси, а не по частоте. Обновляются только
    позиции, для которых окно целиком помещается в область от первой частоты
    ``>= start_freq`` до конца оси; края этой области остаются без изменений.
    Неконечные значения в окне не учитываются в среднем.

    Args:
        curve: Исходная кривая.
        axis: Возрастающая ось частот.
        window_size: Нечётный размер окна больше 1.
        start_freq: Нижняя граница сглаживаемой полосы в Гц.
        diagnostics: Накопитель предупреждений (необязательно).

    Returns:
        Новая кривая. Если сглаживание не применимо, возвращается копия ``curve``.
    """

    result: FrequencyGainCurve = dict(curve)

    if window_size <= 1 or window_size % 2 == 0:
        warn(
            diagnostics,
            _STAGE,
            "размер окна (%d) должен быть нечётным и больше 1, сглаживание пропущено",
            window_size,
        )
        return result
    if len(axis) < window_size:
        warn(
            diagnostics,
            _STAGE,
            "точек данных (%d) меньше размера окна (%d), сглаживание пропущено",
            len(axis),
            window_size,
        )
        return result

    start_index = _find_start_index(axis, start_freq)
    if start_index == -1:
        warn(diagnostics, _STAGE, "нет точек выше %.1f Гц, сглаживание пропущено", start_freq)
        return result
    if len(axis) - start_index < window_size:
        warn(
            diagnostics,
            _STAGE,
            "точек выше %.1f Гц (%d) меньше размера окна (%d), сглаживание пропущено",
            start_freq,
            len(axis) - start_index,
            window_size,
        )
        return result

    logger.debug("Сглаживание выше %.1f Гц, окно=%d", start_freq, window_size)

    gains = np.array([get_or_zero(curve, freq) for freq in axis], dtype=np.float64)
    finite = np.isfinite(gains)
    smoothed = gains.copy()
    half_window = window_size // 2

    for index in range(start_index + half_window, len(axis) - half_window):
        window = slice(index - half_window, index + half_window + 1)
        mask = finite[window]
        skipped = window_size - int(np.count_nonzero(mask))
        if skipped:
            warn(diagnostics, _STAGE, "окно вокруг индекса %d содержит неконечных значений: %d", index, skipped)
        if skipped == window_size:
            warn(diagnostics, _STAGE, "в окне вокруг индекса %d нет конечных значений, сохранено исходное", index)
            continue
        average = float(np.mean(gains[window][mask]))
        if not np.isfinite(average):
            warn(diagnostics, _STAGE, "среднее вокруг индекса %d неконечно, сохранено исходное", index)
            continue
        smoothed[index] = average

    for freq, gain in zip(axis, smoothed):
        result[freq] = float(gain)
    return result


__all__ = ["smooth_high_band"]
