"""Числовые этапы преобразования кривых AHTVC."""

from .merge import merge_curves
from .overlay import apply_overlay, overlay_gain_at
from .preamp import remove_preamp
from .smoothing import smooth_high_band

__all__ = [
    "apply_overlay",
    "merge_curves",
    "overlay_gain_at",
    "remove_preamp",
    "smooth_high_band",
]
