# geolabel/core/text_metrics.py
"""
Label box estimation for placement. Widths come from Pillow glyph metrics;
height is font_size * lines * line_height so boxes stay stable across fonts.
"""

from __future__ import annotations

import math
import warnings
from functools import lru_cache

from geolabel.core.config import LINE_HEIGHT, MEASURE_FONT_FAMILY

_font_warning_emitted: set[str] = set()


@lru_cache(maxsize=64)
def _load_font(font_family: str, font_size_px: float):
    """Load PIL ImageFont; fallback with warning if font not found."""
    from matplotlib import font_manager
    from PIL import ImageFont

    size = max(1, int(round(font_size_px)))
    candidates = [
        font_family + ".ttf",
        font_family.replace(" ", "") + ".ttf",
        "DejaVuSans.ttf",
        # matplotlib ships DejaVu Sans, so this resolves even without system fonts.
        font_manager.findfont(font_family, fallback_to_default=True),
    ]
    for name in candidates:
        try:
            return ImageFont.truetype(name, size=size)
        except OSError:
            continue
    if font_family not in _font_warning_emitted:
        _font_warning_emitted.add(font_family)
        warnings.warn(f"Font not found: {font_family!r}; using default.", UserWarning)
    return ImageFont.load_default()


def measure_line_px(text: str, font_size_px: float, font_family: str = MEASURE_FONT_FAMILY) -> float:
    """Advance width of a single line in px."""
    if not text:
        return 0.0
    font = _load_font(font_family, font_size_px)
    width = float(font.getlength(text))
    size_used = float(getattr(font, "size", font_size_px) or font_size_px)
    return width * font_size_px / max(1.0, size_used)


def wrap_text(text: str, max_width: float, font_size_px: float) -> list[str]:
    """Explicit newlines win; otherwise greedy word wrap to max_width."""
    if "\n" in text:
        return text.split("\n")
    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        candidate = f"{current} {word}" if current else word
        if current and measure_line_px(candidate, font_size_px) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines or [text]


def estimate_text_box(
    text: str,
    max_width: float,
    font_size_px: float,
    line_height: float = LINE_HEIGHT,
) -> tuple[float, float]:
    """
    Return (width_px, height_px) of the wrapped label box.
    Width is the widest wrapped line; height counts every line at line_height.
    """
    lines = wrap_text(text, max_width, font_size_px)
    width = max(measure_line_px(line, font_size_px) for line in lines)
    height = font_size_px * len(lines) * line_height
    return (width, height)


def label_box(text: str, font_size_px: float) -> tuple[float, float]:
    """Unwrapped single-label box."""
    return estimate_text_box(text, math.inf, font_size_px)
