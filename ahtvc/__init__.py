"""AHTVC: конвертация AutoEQ-кривых Harman в кривые VDSF."""

import importlib.metadata as importlib_metadata

from .diagnostics import Diagnostics
from .graphiceq import (
    GraphicEQError,
    MissingMarkerError,
    NoValidPointsError,
    format_graphic_eq,
    load_curve,
    parse_graphic_eq,
)
from .types import OverlayPoint, PipelineConfig, PipelineOutputs, PipelineResult, get_or_zero
from .dsp import apply_overlay, merge_curves, overlay_gain_at, remove_preamp, smooth_high_band
from .naming import extract_source_name
from .pipeline import ConversionReport, convert_text, run_pipeline, write_results

__all__ = [
    "ConversionReport",
    "Diagnostics",
    "GraphicEQError",
    "MissingMarkerError",
    "NoValidPointsError",
    "OverlayPoint",
    "PipelineConfig",
    "PipelineOutputs",
    "PipelineResult",
    "apply_overlay",
    "convert_text",
    "extract_source_name",
    "format_graphic_eq",
    "get_or_zero",
    "load_curve",
    "merge_curves",
    "overlay_gain_at",
    "parse_graphic_eq",
    "remove_preamp",
    "run_pipeline",
    "smooth_high_band",
    "write_results",
]


def get_version() -> str:
    """Возвращает версию пакета, если он установлен."""

    try:
        return importlib_metadata.version("ahtvc")
    except importlib_metadata.PackageNotFoundError:
        return "0.0.0"


__version__ = get_version()
