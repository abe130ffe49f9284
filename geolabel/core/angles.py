# geolabel/core/angles.py
"""
Angle annotation geometry in screen space: arc sweep and flags, radius
scaling for acute angles, label anchors, right-angle square markers and the
dashed helper rays drawn around them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from geolabel.core.config import (
    ARC_LABEL_CLEARANCE,
    ARC_RADIUS_LOG_GAIN,
    ARC_RADIUS_MAX_MULT,
    ARC_RADIUS_MIN_MULT,
    BISECTOR_EPS,
    COLINEAR_DOT_THRESHOLD,
    RIGHT_ANGLE_HELPER_LENGTH,
    ZERO_LENGTH_EPS,
)
from geolabel.core.geometry import add, cross, dot, norm, perpendicular, scale, sub, unit
from geolabel.core.types import XY, InternalLine, TriangleAngleMark, TrianglePoint

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class ArcSweep:
    """Circular arc at a vertex, in screen angles (radians, y down)."""
    vertex: XY
    radius: float
    start_angle: float
    end_angle: float
    mid_angle: float
    large_arc: int
    sweep: int
    toward_center: bool

    @property
    def start(self) -> XY:
        return (
            self.vertex[0] + self.radius * math.cos(self.start_angle),
            self.vertex[1] + self.radius * math.sin(self.start_angle),
        )

    @property
    def end(self) -> XY:
        return (
            self.vertex[0] + self.radius * math.cos(self.end_angle),
            self.vertex[1] + self.radius * math.sin(self.end_angle),
        )

    @property
    def label_angle(self) -> float:
        """Bisector direction on the interior side of the vertex."""
        return self.mid_angle if self.toward_center else self.mid_angle + math.pi


def interior_angle(vertex: XY, first: XY, second: XY) -> float:
    """Angle between the two rays in [0, pi]; 0 if either ray has zero length."""
    v1 = sub(first, vertex)
    v2 = sub(second, vertex)
    if norm(v1) < ZERO_LENGTH_EPS or norm(v2) < ZERO_LENGTH_EPS:
        return 0.0
    return abs(math.atan2(cross(v1, v2), dot(v1, v2)))


def arc_sweep(vertex: XY, first: XY, second: XY, center: XY, radius: float) -> ArcSweep:
    """
    Orient the rays so start->end is the small angle, then draw the small arc
    when its bisector points toward `center` (the polygon's centroid) and the
    large arc otherwise. The sweep flag follows from whether the clockwise
    screen difference start->end is at most pi.
    """
    v1 = sub(first, vertex)
    v2 = sub(second, vertex)
    a1 = math.atan2(v1[1], v1[0])
    a2 = math.atan2(v2[1], v2[0])
    if cross(v1, v2) < 0:
        a1, a2 = a2, a1

    diff = (a2 - a1) % TWO_PI
    mid = a1 + diff / 2.0
    to_center = sub(center, vertex)
    toward = dot((math.cos(mid), math.sin(mid)), to_center) > 0
    large_arc = 0 if toward else 1

    cw_diff = ((a2 % TWO_PI) - (a1 % TWO_PI)) % TWO_PI
    clockwise_is_small = cw_diff <= math.pi
    if large_arc == 0:
        sweep = 1 if clockwise_is_small else 0
    else:
        sweep = 0 if clockwise_is_small else 1

    return ArcSweep(
        vertex=vertex,
        radius=radius,
        start_angle=a1,
        end_angle=a2,
        mid_angle=mid,
        large_arc=large_arc,
        sweep=sweep,
        toward_center=toward,
    )


def scaled_arc_radius(base_radius: float, angle_rad: float) -> float:
    """
    Grow the radius as the angle shrinks:
    mult = 1 - gain * ln(angle / pi), clamped to [min_mult, max_mult].
    """
    normalized = min(max(angle_rad / math.pi, 1e-6), 1.0)
    mult = 1.0 - ARC_RADIUS_LOG_GAIN * math.log(normalized)
    mult = min(max(mult, ARC_RADIUS_MIN_MULT), ARC_RADIUS_MAX_MULT)
    return base_radius * mult


def arc_label_position(arc: ArcSweep, label_height: float, requested_distance: float = 0.0) -> XY:
    """Label center on the interior bisector, just outside the arc."""
    min_distance = arc.radius + label_height / 2.0 + ARC_LABEL_CLEARANCE
    d = max(requested_distance, min_distance)
    ang = arc.label_angle
    return (arc.vertex[0] + d * math.cos(ang), arc.vertex[1] + d * math.sin(ang))


@dataclass(frozen=True)
class RightAngleMarker:
    """Square corner at `vertex`: leg points on each ray and the far corner."""
    vertex: XY
    u1: XY
    u2: XY
    leg1: XY
    corner: XY
    leg2: XY
    size: float


def right_angle_marker(vertex: XY, first: XY, second: XY, size: float) -> RightAngleMarker | None:
    """Marker with legs of length `size` along both rays; None for a zero-length ray."""
    v1 = sub(first, vertex)
    v2 = sub(second, vertex)
    if norm(v1) < ZERO_LENGTH_EPS or norm(v2) < ZERO_LENGTH_EPS:
        return None
    u1 = unit(v1)
    u2 = unit(v2)
    return RightAngleMarker(
        vertex=vertex,
        u1=u1,
        u2=u2,
        leg1=add(vertex, scale(u1, size)),
        corner=add(vertex, scale(add(u1, u2), size)),
        leg2=add(vertex, scale(u2, size)),
        size=size,
    )


def right_angle_label_position(marker: RightAngleMarker, label_height: float) -> XY:
    """Label on the exterior side of the vertex, away from the square."""
    inward = add(marker.u1, marker.u2)
    if norm(inward) < BISECTOR_EPS:
        outward = perpendicular(marker.u1)
    else:
        outward = scale(unit(inward), -1.0)
    d = marker.size * math.sqrt(2.0) + label_height / 2.0 + ARC_LABEL_CLEARANCE
    return add(marker.vertex, scale(outward, d))


def right_angle_helper_rays(
    marker: RightAngleMarker,
    dashed_directions: Iterable[XY],
    length: float = RIGHT_ANGLE_HELPER_LENGTH,
) -> list[tuple[XY, XY]]:
    """
    Short dashed segments continuing each ray outward from the marker's legs,
    skipping a ray whose direction already carries a real dashed line.
    """
    dirs = [unit(d) for d in dashed_directions]
    out: list[tuple[XY, XY]] = []
    for leg, u in ((marker.leg1, marker.u1), (marker.leg2, marker.u2)):
        if any(dot(u, d) > COLINEAR_DOT_THRESHOLD for d in dirs):
            continue
        out.append((leg, add(leg, scale(u, length))))
    return out


def core_vertex_ids(points: Sequence[TrianglePoint]) -> frozenset[str]:
    """Ids of the three points that define the primary triangle."""
    return frozenset(p.id for p in points[:3])


def is_core_vertex(point_id: str, core_ids: frozenset[str]) -> bool:
    return point_id in core_ids


def _has_dashed_line(lines: Iterable[InternalLine], a: str, b: str) -> bool:
    return any(
        ln.style == "dashed" and {ln.from_id, ln.to_id} == {a, b}
        for ln in lines
    )


def synthesize_height_lines(
    angles: Iterable[TriangleAngleMark],
    positions: Mapping[str, XY],
    lines: Sequence[InternalLine],
    core_ids: frozenset[str],
) -> list[InternalLine]:
    """
    For a right angle at a non-core point with no explicit dashed line to the
    farther of its two ray endpoints, return a dashed line to that endpoint.
    Recovers an implied height construction the input left out.
    """
    out: list[InternalLine] = []
    for mark in angles:
        if not mark.is_right_angle or is_core_vertex(mark.vertex, core_ids):
            continue
        v = positions.get(mark.vertex)
        p1 = positions.get(mark.point_on_first_ray)
        p2 = positions.get(mark.point_on_second_ray)
        if v is None or p1 is None or p2 is None:
            continue
        d1 = norm(sub(p1, v))
        d2 = norm(sub(p2, v))
        far = mark.point_on_first_ray if d1 >= d2 else mark.point_on_second_ray
        if _has_dashed_line(list(lines) + out, mark.vertex, far):
            continue
        logger.debug("synthesizing dashed height %s -> %s", mark.vertex, far)
        out.append(InternalLine(from_id=mark.vertex, to_id=far, style="dashed"))
    return out


def dashed_directions_at(point_id: str, positions: Mapping[str, XY], lines: Iterable[InternalLine]) -> list[XY]:
    """Unit directions from `point_id` along every dashed line touching it."""
    origin = positions.get(point_id)
    if origin is None:
        return []
    out: list[XY] = []
    for ln in lines:
        if ln.style != "dashed" or point_id not in (ln.from_id, ln.to_id):
            continue
        other = ln.to_id if ln.from_id == point_id else ln.from_id
        target = positions.get(other)
        if target is None:
            continue
        d = sub(target, origin)
        if norm(d) >= ZERO_LENGTH_EPS:
            out.append(unit(d))
    return out
