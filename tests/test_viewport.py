# tests/test_viewport.py
"""
Viewport fit: projected points stay inside the padded drawing area; aspect
ratio is preserved; degenerate extents fall back to scale 1.
"""

from __future__ import annotations

import pytest

from geolabel.core.types import Point
from geolabel.core.viewport import fit_viewport

CASES = [
    ([Point(0, 0), Point(10, 5)], 200.0, 200.0, 20.0),
    ([Point(-3, -3), Point(4, 1), Point(0, 9)], 400.0, 300.0, 40.0),
    ([Point(100, 100), Point(100.5, 180)], 320.0, 240.0, 20.0),
]


@pytest.mark.parametrize("points,width,height,padding", CASES)
@pytest.mark.parametrize("y_axis_up", [True, False])
def test_projected_points_within_padding(points, width, height, padding, y_axis_up) -> None:
    vp = fit_viewport(points, width, height, padding, y_axis_up=y_axis_up)
    for p in points:
        x, y = vp.to_screen(p)
        assert padding - 1e-9 <= x <= width - padding + 1e-9
        assert padding - 1e-9 <= y <= height - padding + 1e-9


def test_uniform_scale_uses_limiting_axis() -> None:
    vp = fit_viewport([Point(0, 0), Point(10, 5)], 200.0, 200.0, 20.0)
    assert vp.scale == pytest.approx(16.0)
    assert vp.to_screen_x(0) == pytest.approx(20.0)
    assert vp.to_screen_x(10) == pytest.approx(180.0)


def test_y_inversion_is_per_viewport() -> None:
    pts = [Point(0, 0), Point(10, 5)]
    up = fit_viewport(pts, 200.0, 200.0, 20.0, y_axis_up=True)
    down = fit_viewport(pts, 200.0, 200.0, 20.0, y_axis_up=False)
    assert up.to_screen_y(5) < up.to_screen_y(0)
    assert down.to_screen_y(5) > down.to_screen_y(0)
    assert up.to_screen_y(5) == pytest.approx(60.0)


def test_degenerate_extent_defaults_to_scale_one() -> None:
    vp = fit_viewport([Point(3, 3), Point(3, 3)], 100.0, 80.0, 10.0)
    assert vp.scale == pytest.approx(1.0)
    assert vp.to_screen(Point(3, 3)) == pytest.approx((50.0, 40.0))


def test_degenerate_axis_contributes_factor_one() -> None:
    flat = fit_viewport([Point(0, 2), Point(8, 2)], 100.0, 100.0, 10.0)
    assert flat.scale == pytest.approx(1.0)
    wide = fit_viewport([Point(0, 2), Point(200, 2)], 100.0, 100.0, 10.0)
    assert wide.scale == pytest.approx(0.4)
