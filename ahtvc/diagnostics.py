from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .logging_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class DiagnosticRecord:
    """Одно предупреждение, выданное этапом обработки."""

    stage: str
    message: str


@dataclass(slots=True)
class Diagnostics:
    """Накопитель предупреждений для мягких восстановлений.

    Каждое предупреждение пишется в лог и сохраняется, чтобы вызывающий код
    (и тесты) могли посчитать их без перехвата консольного вывода.
    Накопитель не влияет на ход вычислений.
    """

    records: List[DiagnosticRecord] = field(default_factory=list)

    def warn(self, stage: str, message: str, *args: object) -> None:
        text = message % args if args else message
        self.records.append(DiagnosticRecord(stage=stage, message=text))
        logger.warning("[%s] %s", stage, text)

    def count(self, stage: Optional[str] = None) -> int:
        if stage is None:
            return len(self.records)
        return sum(1 for record in self.records if record.stage == stage)

    @property
    def messages(self) -> List[str]:
        return [record.message for record in self.records]


def warn(diagnostics: Optional[Diagnostics], stage: str, message: str, *args: object) -> None:
    """Выдаёт предупреждение в накопитель, а при его отсутствии — только в лог."""

    if diagnostics is not None:
        diagnostics.warn(stage, message, *args)
    else:
        logger.warning("[%s] %s", stage, message % args if args else message)


__all__ = ["DiagnosticRecord", "Diagnostics", "warn"]
