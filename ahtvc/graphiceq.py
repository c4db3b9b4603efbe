from __future__ import annotations

import math
import re
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from .diagnostics import Diagnostics, warn
from .logging_utils import get_logger
from .types import FrequencyGainCurve

logger = get_logger(__name__)

MARKER = "GraphicEQ:"
NO_VALID_POINTS_TEXT = "GraphicEQ: (No valid points)"
MAX_FREQUENCY = 30000
_COMMENT_PREFIXES = ("#", "//")
_FREQUENCY_PATTERN = re.compile(r"[+-]?[0-9]+")
_GAIN_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)", re.IGNORECASE
)
_STAGE_PARSE = "parse"
_STAGE_FORMAT = "format"


class GraphicEQError(ValueError):
    """Базовая ошибка разбора GraphicEQ."""


class MissingMarkerError(GraphicEQError):
    """Во входном тексте нет строки ``GraphicEQ:``."""


class NoValidPointsError(GraphicEQError):
    """В строке ``GraphicEQ:`` не найдено ни одной корректной точки."""


def _parse_frequency(value: str) -> int:
    if not _FREQUENCY_PATTERN.fullmatch(value):
        raise ValueError(f"частота должна быть целым числом: {value!r}")
    return int(value)


def _parse_gain(value: str) -> float:
    # float() принимает "1_0" и не-ASCII цифры
    if not _GAIN_PATTERN.fullmatch(value):
        raise ValueError(f"усиление должно быть десятичным числом: {value!r}")
    return float(value)


def _parse_points(
    points: Sequence[str], line_number: int, curve: FrequencyGainCurve, diagnostics: Optional[Diagnostics]
) -> int:
    accepted = 0
    last_index = len(points) - 1
    for index, raw_point in enumerate(points):
        point = raw_point.strip()
        if not point:
            # завершающий ';' допустим
            if index != last_index:
                warn(diagnostics, _STAGE_PARSE, "строка %d: пустая точка EQ (индекс %d)", line_number, index)
            continue

        fields = point.split()
        if len(fields) != 2:
            warn(
                diagnostics,
                _STAGE_PARSE,
                "строка %d: неверный формат точки (полей: %d), пропуск: %r",
                line_number,
                len(fields),
                point,
            )
            continue

        try:
            freq = _parse_frequency(fields[0])
            gain = _parse_gain(fields[1])
        except ValueError as exc:
            warn(diagnostics, _STAGE_PARSE, "строка %d: не удалось разобрать %r: %s", line_number, point, exc)
            continue

        if not math.isfinite(gain):
            warn(diagnostics, _STAGE_PARSE, "строка %d: неконечное усиление на %d Гц, пропуск", line_number, freq)
            continue
        if freq <= 0 or freq > MAX_FREQUENCY:
            warn(diagnostics, _STAGE_PARSE, "строка %d: частота вне диапазона, пропуск: %d", line_number, freq)
            continue

        curve[freq] = gain
        accepted += 1
    return accepted


def parse_graphic_eq(content: str, diagnostics: Optional[Diagnostics] = None) -> FrequencyGainCurve:
    """Разбирает текст в формате GraphicEQ в словарь частота -> усиление.

    Учитывается только первая строка с префиксом ``GraphicEQ:``; пустые строки
    и комментарии (``#``, ``//``) до неё пропускаются. Некорректные точки
    пропускаются с предупреждением.

    Args:
        content: Исходный текст.
        diagnostics: Накопитель предупреждений (необязательно).

    Returns:
        Словарь ``{частота_Гц: усиление_дБ}``.

    Raises:
        MissingMarkerError: Строка ``GraphicEQ:`` не найдена.
        NoValidPointsError: Не удалось получить ни одной корректной точки.
    """

    curve: FrequencyGainCurve = {}
    marker_found = False

    for line_number, raw_line in enumerate(content.replace("\r\n", "\n").split("\n"), start=1):
        line = raw_line.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        if not line.startswith(MARKER):
            continue

        marker_found = True
        points = line[len(MARKER):].strip().split(";")
        accepted = _parse_points(points, line_number, curve, diagnostics)
        if accepted == 0 and points[0].strip():
            raise NoValidPointsError(
                f"строка {line_number}: в строке GraphicEQ нет корректных точек: {line!r}"
            )
        break

    if not marker_found:
        raise MissingMarkerError("строка 'GraphicEQ:' не найдена (marker not found), проверьте формат файла")
    if not curve:
        raise NoValidPointsError("не найдено ни одной корректной точки EQ (no valid points)")

    logger.debug("Разобрано точек GraphicEQ: %d", len(curve))
    return curve


def format_graphic_eq(
    curve: Mapping[int, float],
    axis: Optional[Sequence[int]] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> str:
    """Сериализует кривую в строку ``GraphicEQ: f g; f g; ...`` по возрастанию частоты.

    Частоты оси, отсутствующие в кривой, пропускаются. Усиление выводится с
    одним знаком после запятой.
    """

    frequencies = sorted(curve) if axis is None else axis
    points: List[str] = []
    for freq in frequencies:
        if freq not in curve:
            continue
        gain = curve[freq]
        if not math.isfinite(gain):
            warn(diagnostics, _STAGE_FORMAT, "неконечное усиление на %d Гц заменено на 0.0", freq)
            gain = 0.0
        points.append(f"{freq} {gain:.1f}")

    if not points:
        return NO_VALID_POINTS_TEXT
    return MARKER + " " + "; ".join(points)


def read_eq_text(path: Path | str) -> str:
    """Читает текст файла EQ (UTF-8, BOM допускается)."""

    source = Path(path)
    try:
        content = source.read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Файл EQ не найден: {source}") from exc
    except UnicodeDecodeError as exc:
        raise GraphicEQError(f"Не удалось декодировать {source} как UTF-8: {exc.reason}") from exc
    except OSError as exc:
        raise OSError(f"Ошибка чтения {source}: {exc}") from exc

    logger.debug("Прочитан файл EQ: %s", source)
    return content


def load_curve(path: Path | str, diagnostics: Optional[Diagnostics] = None) -> FrequencyGainCurve:
    """Читает файл GraphicEQ и разбирает его."""

    return parse_graphic_eq(read_eq_text(path), diagnostics)


__all__ = [
    "GraphicEQError",
    "MARKER",
    "MAX_FREQUENCY",
    "MissingMarkerError",
    "NO_VALID_POINTS_TEXT",
    "NoValidPointsError",
    "format_graphic_eq",
    "load_curve",
    "parse_graphic_eq",
    "read_eq_text",
]
