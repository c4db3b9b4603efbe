from __future__ import annotations

from typing import Mapping, Tuple

from ahtvc.types import FrequencyAxis, FrequencyGainCurve, get_or_zero, union_axis


def merge_curves(
    first: Mapping[int, float], second: Mapping[int, float]
) -> Tuple[FrequencyGainCurve, FrequencyAxis]:
    """Поточечно складывает две кривые по объединению их частот.

    Частота, присутствующая только в одной кривой, берётся так, как будто
    во второй кривой на ней 0 дБ.

    Returns:
        Кортеж ``(кривая, ось)``, где ось — отсортированное объединение частот.
    """

    axis = union_axis(first, second)
    merged: FrequencyGainCurve = {
        freq: get_or_zero(first, freq) + get_or_zero(second, freq) for freq in axis
    }
    return merged, axis


__all__ = ["merge_curves"]
