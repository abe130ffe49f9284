# tests/test_text_metrics.py
"""
Label box estimation: widths grow with text, heights follow line count,
explicit newlines and word wrapping.
"""

from __future__ import annotations

import math

import pytest

from geolabel.core.config import LINE_HEIGHT
from geolabel.core.text_metrics import estimate_text_box, label_box, measure_line_px, wrap_text


def test_wider_text_has_wider_box() -> None:
    w1, _ = label_box("A", 14)
    w4, _ = label_box("AAAA", 14)
    assert 0 < w1 < w4


def test_width_scales_with_font_size() -> None:
    assert measure_line_px("Label", 24) > measure_line_px("Label", 12)
    assert measure_line_px("", 12) == 0.0


def test_height_from_line_count() -> None:
    _, h = estimate_text_box("one", math.inf, 10)
    assert h == pytest.approx(10 * LINE_HEIGHT)
    _, h3 = estimate_text_box("a\nb\nc", math.inf, 10)
    assert h3 == pytest.approx(30 * LINE_HEIGHT)


def test_explicit_newlines_break() -> None:
    assert wrap_text("a b\nc", math.inf, 12) == ["a b", "c"]


def test_word_wrap_at_narrow_width() -> None:
    assert wrap_text("one two three", 1.0, 12) == ["one", "two", "three"]
    assert wrap_text("one two three", math.inf, 12) == ["one two three"]


def test_wrapped_box_is_narrower() -> None:
    single_w, single_h = estimate_text_box("alpha beta gamma", math.inf, 12)
    wrapped_w, wrapped_h = estimate_text_box("alpha beta gamma", 1.0, 12)
    assert wrapped_w < single_w
    assert wrapped_h == pytest.approx(3 * single_h)
