# geolabel/core/collision.py
"""
Collision primitives (segment vs rectangle, rectangle vs rectangle) and the
per-render OccupiedGeometry accumulator that label placement tests against.
"""

from __future__ import annotations

from geolabel.core.config import ORIENT_EPS
from geolabel.core.types import XY, LabelRect, Segment


def _orient(p: XY, q: XY, r: XY) -> int:
    """Sign of the turn p->q->r; 0 inside the collinear band."""
    val = (q[1] - p[1]) * (r[0] - q[0]) - (q[0] - p[0]) * (r[1] - q[1])
    if val > ORIENT_EPS:
        return 1
    if val < -ORIENT_EPS:
        return -1
    return 0


def _segments_cross(p1: XY, p2: XY, p3: XY, p4: XY) -> bool:
    # Collinear or touching configurations yield equal orientations and report no crossing.
    o1 = _orient(p1, p2, p3)
    o2 = _orient(p1, p2, p4)
    o3 = _orient(p3, p4, p1)
    o4 = _orient(p3, p4, p2)
    return o1 != o2 and o3 != o4


def segment_intersects_rect(a: XY, b: XY, rect: LabelRect, pad: float = 0.0) -> bool:
    """
    True if segment ab enters rect grown by `pad` on every side.
    Bounding-box rejection first, then an endpoint containment check, then
    four orientation tests against the rect's edges.
    """
    rx = rect.x - pad
    ry = rect.y - pad
    rw = rect.width + 2 * pad
    rh = rect.height + 2 * pad

    if max(a[0], b[0]) < rx or min(a[0], b[0]) > rx + rw:
        return False
    if max(a[1], b[1]) < ry or min(a[1], b[1]) > ry + rh:
        return False

    def inside(p: XY) -> bool:
        return rx < p[0] < rx + rw and ry < p[1] < ry + rh

    if inside(a) or inside(b):
        return True

    r1 = (rx, ry)
    r2 = (rx + rw, ry)
    r3 = (rx + rw, ry + rh)
    r4 = (rx, ry + rh)
    return (
        _segments_cross(a, b, r1, r2)
        or _segments_cross(a, b, r2, r3)
        or _segments_cross(a, b, r3, r4)
        or _segments_cross(a, b, r4, r1)
    )


def rects_overlap(a: LabelRect, b: LabelRect, grow: float = 0.0) -> bool:
    """Axis-aligned overlap test with b inflated by `grow`; touching edges count as overlap."""
    return not (
        a.x + a.width < b.x - grow
        or b.x + b.width + grow < a.x
        or a.y + a.height < b.y - grow
        or b.y + b.height + grow < a.y
    )


class OccupiedGeometry:
    """
    Append-only record of what a single render has drawn (segments) and
    placed (label rects). Created per render and discarded with it.
    """

    def __init__(self) -> None:
        self._segments: list[Segment] = []
        self._labels: list[LabelRect] = []

    @property
    def segments(self) -> tuple[Segment, ...]:
        return tuple(self._segments)

    @property
    def labels(self) -> tuple[LabelRect, ...]:
        return tuple(self._labels)

    def record_segment(self, a: XY, b: XY) -> None:
        self._segments.append(Segment(a, b))

    def record_polygon(self, pts: list[XY]) -> None:
        """Record every closing edge of a polygon."""
        n = len(pts)
        for i in range(n):
            self.record_segment(pts[i], pts[(i + 1) % n])

    def record_rect(self, rect: LabelRect) -> None:
        self._labels.append(rect)

    def rect_hits_segment(self, rect: LabelRect, pad: float = 0.0) -> bool:
        return any(segment_intersects_rect(s.a, s.b, rect, pad) for s in self._segments)

    def rect_overlaps_label(self, rect: LabelRect, grow: float = 0.0) -> bool:
        return any(rects_overlap(rect, r, grow) for r in self._labels)

    def is_free(self, rect: LabelRect, pad: float = 0.0, grow: float = 0.0) -> bool:
        """No drawn segment crosses rect (with pad) and no placed label overlaps it (with grow)."""
        return not self.rect_hits_segment(rect, pad) and not self.rect_overlaps_label(rect, grow)
