from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .constants import UNKNOWN_DEVICE
from .diagnostics import Diagnostics
from .dsp.merge import merge_curves
from .dsp.overlay import apply_overlay
from .dsp.preamp import remove_preamp
from .dsp.smoothing import smooth_high_band
from .graphiceq import format_graphic_eq, parse_graphic_eq
from .logging_utils import get_logger
from .naming import extract_source_name
from .types import FrequencyGainCurve, PipelineConfig, PipelineOutputs, PipelineResult

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ConversionReport:
    """Результат конвертации одного загруженного файла."""

    device: str
    input_points: int
    outputs: PipelineOutputs

    @property
    def primary_file_name(self) -> str:
        return self.outputs.primary.file_name(self.device)

    @property
    def secondary_file_name(self) -> str:
        return self.outputs.secondary.file_name(self.device)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "device": self.device,
            "input_points": self.input_points,
            "axis_points": len(self.outputs.primary.axis),
            "primary": {"file_name": self.primary_file_name, "text": self.outputs.primary.text},
            "secondary": {"file_name": self.secondary_file_name, "text": self.outputs.secondary.text},
            "warnings": self.outputs.diagnostics.messages,
        }


def _finish(
    curve: Mapping[int, float],
    axis: Sequence[int],
    suffix: str,
    diagnostics: Diagnostics,
) -> PipelineResult:
    normalized = remove_preamp(curve, axis, diagnostics)
    text = format_graphic_eq(normalized, axis, diagnostics)
    return PipelineResult(curve=normalized, axis=list(axis), text=text, suffix=suffix)


def run_pipeline(
    curve: Mapping[int, float],
    config: Optional[PipelineConfig] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> PipelineOutputs:
    """Строит две производные кривые из входной кривой Harman.

    Основная: сумма с кривой коррекции, сглаживание верхней полосы и
    нормализация без preamp. Дополнительная: к сглаженной кривой добавляется
    наложение X2, затем повторное сглаживание и нормализация. Обе ветви
    используют одну ось частот.

    Args:
        curve: Входная кривая ``{частота: усиление}``.
        config: Конфигурация; по умолчанию встроенные кривые.
        diagnostics: Накопитель предупреждений; создаётся, если не передан.

    Returns:
        ``PipelineOutputs`` с двумя результатами и собранными предупреждениями.
    """

    cfg = config if config is not None else PipelineConfig.default()
    sink = diagnostics if diagnostics is not None else Diagnostics()

    merged, axis = merge_curves(curve, cfg.correction)
    logger.debug("Объединённая ось: %d частот", len(axis))

    smoothed = smooth_high_band(merged, axis, cfg.window_size, cfg.smooth_start_freq, sink)
    primary = _finish(smoothed, axis, cfg.primary_suffix, sink)
    logger.info("Основная кривая готова (%d точек)", len(primary.curve))

    with_overlay = apply_overlay(smoothed, axis, cfg.overlay, sink)
    resmoothed = smooth_high_band(with_overlay, axis, cfg.window_size, cfg.smooth_start_freq, sink)
    secondary = _finish(resmoothed, axis, cfg.secondary_suffix, sink)
    logger.info("Дополнительная кривая готова (%d точек)", len(secondary.curve))

    return PipelineOutputs(primary=primary, secondary=secondary, diagnostics=sink)


def convert_text(
    content: str,
    source_filename: Optional[str] = None,
    config: Optional[PipelineConfig] = None,
    device: Optional[str] = None,
) -> ConversionReport:
    """Разбирает текст GraphicEQ и запускает конвейер.

    Имя устройства берётся из ``device``, иначе выводится из ``source_filename``.

    Raises:
        GraphicEQError: Текст не содержит корректной строки GraphicEQ.
    """

    diagnostics = Diagnostics()
    curve: FrequencyGainCurve = parse_graphic_eq(content, diagnostics)
    if device:
        device_name = device
    elif source_filename:
        device_name = extract_source_name(source_filename)
    else:
        device_name = UNKNOWN_DEVICE

    logger.info("Конвертация %s: %d точек", device_name, len(curve))
    outputs = run_pipeline(curve, config, diagnostics)
    return ConversionReport(device=device_name, input_points=len(curve), outputs=outputs)


def write_results(report: ConversionReport, output_dir: Path | str) -> List[Path]:
    """Сохраняет обе кривые в ``output_dir`` и возвращает пути к файлам."""

    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for file_name, result in (
        (report.primary_file_name, report.outputs.primary),
        (report.secondary_file_name, report.outputs.secondary),
    ):
        target = directory / file_name
        try:
            target.write_text(result.text, encoding="utf-8")
        except OSError as exc:
            raise OSError(f"Ошибка записи {target}: {exc}") from exc
        logger.info("Сохранено: %s", target)
        written.append(target)
    return written


__all__ = ["ConversionReport", "convert_text", "run_pipeline", "write_results"]
