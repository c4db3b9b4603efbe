from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Tuple

if TYPE_CHECKING:
    from .diagnostics import Diagnostics

# Частота (Гц) -> усиление (дБ)
FrequencyGainCurve = Dict[int, float]
# Строго возрастающий список частот
FrequencyAxis = List[int]


def get_or_zero(curve: Mapping[int, float], freq: int) -> float:
    """Возвращает усиление на частоте ``freq``; отсутствующая частота считается 0 дБ."""

    return curve.get(freq, 0.0)


def union_axis(*curves: Mapping[int, float]) -> FrequencyAxis:
    """Строит общую ось частот как отсортированное объединение ключей кривых."""

    frequencies: set[int] = set()
    for curve in curves:
        frequencies.update(curve.keys())
    return sorted(frequencies)


@dataclass(frozen=True, slots=True)
class OverlayPoint:
    """Контрольная точка разреженной кривой-наложения."""

    freq: int
    gain: float

    def __post_init__(self) -> None:
        if isinstance(self.freq, bool) or not isinstance(self.freq, int):
            raise TypeError("freq должен быть целым числом")
        if self.freq <= 0:
            raise ValueError("freq должен быть положительным")
        if not isinstance(self.gain, (int, float)) or not math.isfinite(self.gain):
            raise ValueError("gain должен быть конечным числом")


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Неизменяемая конфигурация конвейера.

    Кривая коррекции и кривая-наложение создаются один раз при старте и
    передаются в конвейер только для чтения.
    """

    correction: Mapping[int, float]
    overlay: Tuple[OverlayPoint, ...]
    window_size: int
    smooth_start_freq: float
    primary_suffix: str
    secondary_suffix: str

    def __post_init__(self) -> None:
        overlay = tuple(self.overlay)
        if not overlay:
            raise ValueError("overlay должен содержать хотя бы одну точку")
        for point in overlay:
            if not isinstance(point, OverlayPoint):
                raise TypeError("каждый элемент overlay должен быть экземпляром OverlayPoint")
        overlay = tuple(sorted(overlay, key=lambda point: point.freq))
        if self.smooth_start_freq <= 0:
            raise ValueError("smooth_start_freq должен быть положительным")
        if not self.primary_suffix or not self.secondary_suffix:
            raise ValueError("суффиксы имён файлов должны быть непустыми строками")
        for freq, gain in self.correction.items():
            if not math.isfinite(gain):
                raise ValueError(f"кривая коррекции содержит неконечное значение на {freq} Гц")
        object.__setattr__(self, "overlay", overlay)
        object.__setattr__(self, "correction", MappingProxyType(dict(self.correction)))

    @classmethod
    def default(cls) -> "PipelineConfig":
        """Конфигурация со встроенными кривыми Harman -> VDSF и X2."""

        from . import constants

        return cls(
            correction=constants.HARMAN_TO_VDSF_EQ,
            overlay=constants.X2_EQ,
            window_size=constants.MOVING_AVERAGE_WINDOW,
            smooth_start_freq=constants.SMOOTH_START_FREQ,
            primary_suffix=constants.PRIMARY_SUFFIX,
            secondary_suffix=constants.SECONDARY_SUFFIX,
        )

    def with_overrides(self, **changes: object) -> "PipelineConfig":
        values = {
            "correction": self.correction,
            "overlay": self.overlay,
            "window_size": self.window_size,
            "smooth_start_freq": self.smooth_start_freq,
            "primary_suffix": self.primary_suffix,
            "secondary_suffix": self.secondary_suffix,
        }
        values.update({key: value for key, value in changes.items() if value is not None})
        return PipelineConfig(**values)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Результат одной ветви конвейера."""

    curve: FrequencyGainCurve
    axis: FrequencyAxis
    text: str
    suffix: str

    def file_name(self, device: str) -> str:
        return f"{device}{self.suffix}.txt"


@dataclass(frozen=True, slots=True)
class PipelineOutputs:
    primary: PipelineResult
    secondary: PipelineResult
    diagnostics: "Diagnostics"


def iter_present(curve: Mapping[int, float], axis: Iterable[int]) -> Iterable[Tuple[int, float]]:
    """Перебирает пары (частота, усиление) по оси, пропуская отсутствующие частоты."""

    for freq in axis:
        if freq in curve:
            yield freq, curve[freq]


__all__ = [
    "FrequencyAxis",
    "FrequencyGainCurve",
    "OverlayPoint",
    "PipelineConfig",
    "PipelineOutputs",
    "PipelineResult",
    "get_or_zero",
    "iter_present",
    "union_axis",
]
