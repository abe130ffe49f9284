# geolabel/core/geometry.py
"""
Geometry helpers: vector arithmetic on (x, y) tuples, vertex centroid,
point-set bounds and the outward bisector used to frame vertex labels.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np
from shapely.geometry import MultiPoint

from geolabel.core.config import BISECTOR_EPS
from geolabel.core.types import XY


def sub(a: XY, b: XY) -> XY:
    return (a[0] - b[0], a[1] - b[1])


def add(a: XY, b: XY) -> XY:
    return (a[0] + b[0], a[1] + b[1])


def scale(v: XY, s: float) -> XY:
    return (v[0] * s, v[1] * s)


def dot(a: XY, b: XY) -> float:
    return a[0] * b[0] + a[1] * b[1]


def cross(a: XY, b: XY) -> float:
    return a[0] * b[1] - a[1] * b[0]


def norm(v: XY) -> float:
    return math.hypot(v[0], v[1])


def distance(a: XY, b: XY) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def unit(v: XY) -> XY:
    """Unit vector along v; (0, 0) for a zero vector."""
    n = norm(v)
    if n == 0:
        return (0.0, 0.0)
    return (v[0] / n, v[1] / n)


def perpendicular(v: XY) -> XY:
    """v rotated by +90 degrees."""
    return (-v[1], v[0])


def centroid(points: Sequence[XY]) -> XY:
    """Mean of the vertices (not the area centroid)."""
    if not points:
        return (0.0, 0.0)
    xy = np.asarray(points, dtype=float)
    c = xy.mean(axis=0)
    return (float(c[0]), float(c[1]))


def points_bounds(points: Iterable[XY]) -> tuple[float, float, float, float]:
    """Return (minx, miny, maxx, maxy); zeros for an empty set."""
    pts = list(points)
    if not pts:
        return (0.0, 0.0, 0.0, 0.0)
    b = MultiPoint(pts).bounds
    return (float(b[0]), float(b[1]), float(b[2]), float(b[3]))


def outward_bisector(vertex: XY, prev: XY, nxt: XY, center: XY) -> XY:
    """
    Unit bisector of the rays vertex->prev and vertex->nxt, flipped to point
    away from `center`. When the two rays are nearly antiparallel the bisector
    vanishes and the perpendicular of the first ray is used instead.
    """
    u_prev = unit(sub(prev, vertex))
    u_next = unit(sub(nxt, vertex))
    b = add(u_prev, u_next)
    if norm(b) < BISECTOR_EPS:
        b = perpendicular(u_prev)
    else:
        b = unit(b)
    if dot(b, sub(vertex, center)) < 0:
        b = scale(b, -1.0)
    return b


def direction_away(point: XY, center: XY, fallback: XY = (0.0, -1.0)) -> XY:
    """Unit vector from center toward point; `fallback` when they coincide."""
    d = sub(point, center)
    if norm(d) < BISECTOR_EPS:
        return fallback
    return unit(d)


def largest_gap_direction(directions: Sequence[XY], fallback: XY) -> XY:
    """
    Unit direction through the middle of the widest angular gap between the
    given rays. One ray yields its perpendicular; none yields `fallback`.
    """
    angles = sorted(math.atan2(d[1], d[0]) for d in directions if norm(d) > 0)
    if not angles:
        return fallback
    if len(angles) == 1:
        a = angles[0] + math.pi / 2.0
        return (math.cos(a), math.sin(a))
    best_gap = -1.0
    best_mid = 0.0
    for i, a in enumerate(angles):
        nxt = angles[(i + 1) % len(angles)]
        gap = nxt - a if i < len(angles) - 1 else nxt + 2.0 * math.pi - a
        if gap > best_gap:
            best_gap = gap
            best_mid = a + gap / 2.0
    return (math.cos(best_mid), math.sin(best_mid))
