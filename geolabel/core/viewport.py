# geolabel/core/viewport.py
"""
Fit a set of data-space points into a drawing area with a uniform scale.
The data bounding box is centered in the area; Y inversion is a per-family choice.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from geolabel.core.config import DEGENERATE_EXTENT, MIN_SCALE
from geolabel.core.geometry import points_bounds
from geolabel.core.types import XY, Point


@dataclass(frozen=True)
class Viewport:
    """Uniform data-to-screen mapping. Build with fit_viewport()."""
    scale: float
    data_center: XY
    screen_center: XY
    y_axis_up: bool

    def to_screen_x(self, x: float) -> float:
        return self.screen_center[0] + (x - self.data_center[0]) * self.scale

    def to_screen_y(self, y: float) -> float:
        dy = (y - self.data_center[1]) * self.scale
        if self.y_axis_up:
            return self.screen_center[1] - dy
        return self.screen_center[1] + dy

    def to_screen(self, p: Point) -> XY:
        return (self.to_screen_x(p.x), self.to_screen_y(p.y))


def fit_viewport(
    points: Iterable[Point],
    width: float,
    height: float,
    padding: float,
    y_axis_up: bool = True,
) -> Viewport:
    """
    Scale so the bounding box of `points` fills the area inside `padding`,
    preserving aspect ratio (min of the X and Y factors). An axis whose extent
    is (near) zero contributes a factor of 1.
    """
    minx, miny, maxx, maxy = points_bounds((p.x, p.y) for p in points)
    data_w = maxx - minx
    data_h = maxy - miny
    avail_w = width - 2 * padding
    avail_h = height - 2 * padding
    scale_x = avail_w / data_w if data_w > DEGENERATE_EXTENT else 1.0
    scale_y = avail_h / data_h if data_h > DEGENERATE_EXTENT else 1.0
    s = max(MIN_SCALE, min(scale_x, scale_y))
    return Viewport(
        scale=s,
        data_center=((minx + maxx) / 2.0, (miny + maxy) / 2.0),
        screen_center=(width / 2.0, height / 2.0),
        y_axis_up=y_axis_up,
    )
