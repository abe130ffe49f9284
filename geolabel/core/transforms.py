# geolabel/core/transforms.py
"""
Images of points under translation, rotation, reflection and dilation.
Pure functions on data-space Points; positive rotation is counter-clockwise.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from geolabel.core.error_codes import DegenerateAxisError
from geolabel.core.types import (
    Dilation,
    Point,
    Reflection,
    Rotation,
    Transformation,
    Translation,
)

logger = logging.getLogger(__name__)


def translate(point: Point, vector: Point) -> Point:
    return Point(point.x + vector.x, point.y + vector.y)


def rotate(point: Point, center: Point, angle_degrees: float) -> Point:
    """Rotate point about center by angle_degrees (counter-clockwise in data space)."""
    rad = math.radians(angle_degrees)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    tx = point.x - center.x
    ty = point.y - center.y
    return Point(
        tx * cos_a - ty * sin_a + center.x,
        tx * sin_a + ty * cos_a + center.y,
    )


def reflect(point: Point, line_from: Point, line_to: Point) -> Point:
    """
    Mirror point across the line through line_from and line_to: keep the
    component of (point - line_from) along the line, negate the perpendicular one.
    Raises DegenerateAxisError when the line has zero length.
    """
    vx = line_to.x - line_from.x
    vy = line_to.y - line_from.y
    length = math.hypot(vx, vy)
    if length == 0:
        logger.error("reflection line degenerate: from=%s to=%s", line_from, line_to)
        raise DegenerateAxisError("reflection line must have nonzero length")
    ux = vx / length
    uy = vy / length
    wx = point.x - line_from.x
    wy = point.y - line_from.y
    d = wx * ux + wy * uy
    projx = d * ux
    projy = d * uy
    perpx = wx - projx
    perpy = wy - projy
    return Point(line_from.x + projx - perpx, line_from.y + projy - perpy)


def dilate(point: Point, center: Point, scale_factor: float) -> Point:
    """center + scale_factor * (point - center). Negative factors are allowed."""
    return Point(
        center.x + scale_factor * (point.x - center.x),
        center.y + scale_factor * (point.y - center.y),
    )


def apply_transformation(transformation: Transformation, points: Sequence[Point]) -> tuple[Point, ...]:
    """Image of every point under the transformation."""
    if isinstance(transformation, Translation):
        return tuple(translate(p, transformation.vector) for p in points)
    if isinstance(transformation, Rotation):
        return tuple(rotate(p, transformation.center, transformation.angle_degrees) for p in points)
    if isinstance(transformation, Reflection):
        return tuple(reflect(p, transformation.line_from, transformation.line_to) for p in points)
    if isinstance(transformation, Dilation):
        return tuple(dilate(p, transformation.center, transformation.scale_factor) for p in points)
    raise TypeError(f"Unhandled transformation: {type(transformation).__name__}")


def center_point(transformation: Transformation) -> Point | None:
    """Fixed point drawn as an aid: rotation and dilation centers."""
    if isinstance(transformation, (Rotation, Dilation)):
        return transformation.center
    return None


def transform_aid_points(transformation: Transformation) -> list[Point]:
    """Data-space points of the visual aids that must stay inside the viewport."""
    if isinstance(transformation, Reflection):
        return [transformation.line_from, transformation.line_to]
    c = center_point(transformation)
    return [c] if c is not None else []
