from __future__ import annotations

from pathlib import PurePath
from typing import Tuple

from .constants import UNKNOWN_DEVICE

_DECORATIVE_SUFFIXES: Tuple[str, ...] = (
    " Graphic Filters Harman",
    " Graphic Filters VDSF",
    " Graphic Filters",
    " target Harman",
    " target VDSF",
    " target",
    " (AVG)",
    " (Target)",
    "(L)",
    "(R)",
    " Harman",
    " VDSF",
)
_GENERIC_NAMES = frozenset({"result", "output", "graphic", "eq"})


def _strip_suffix_once(name: str) -> Tuple[str, bool]:
    lowered = name.lower()
    for suffix in _DECORATIVE_SUFFIXES:
        if lowered.endswith(suffix.lower()):
            return name[: len(name) - len(suffix)].strip(), True
    return name, False


def extract_source_name(filename: str) -> str:
    """Определяет имя устройства по имени загруженного файла AutoEQ.

    Отбрасывает расширение ``.txt`` и служебные хвосты вида
    ``" Graphic Filters Harman"`` или ``"(L)"``. Для пустых и общих имён
    (``result``, ``eq`` ...) возвращает первое слово исходного имени или
    ``UnknownDevice``.
    """

    base = PurePath(filename.replace("\\", "/")).name
    name = base[: -len(".txt")] if base.endswith(".txt") else base

    normalized = name
    changed = True
    while changed:
        normalized, changed = _strip_suffix_once(normalized)

    normalized = normalized.strip()
    if not normalized:
        return UNKNOWN_DEVICE

    lowered = normalized.lower()
    if lowered in _GENERIC_NAMES:
        words = name.split()
        if words and words[0].lower() != lowered:
            return words[0]
        return UNKNOWN_DEVICE
    return normalized


__all__ = ["extract_source_name"]
