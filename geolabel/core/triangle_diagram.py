# geolabel/core/triangle_diagram.py
"""
Render a triangle construction: three core vertices, optional auxiliary
points, angle marks (arcs or right-angle squares), internal lines, altitudes
and side labels.
Draw order: triangle -> angle marks -> internal lines, altitudes and helper
rays -> points -> labels (vertices, auxiliary points, angles, sides, altitudes).
A reference to an unknown point id skips that annotation only.
An altitude foot is registered as a hidden position so the altitude runs
through the same line bookkeeping as an explicit internal line.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from geolabel.core.angles import (
    ArcSweep,
    RightAngleMarker,
    arc_label_position,
    arc_sweep,
    core_vertex_ids,
    dashed_directions_at,
    interior_angle,
    right_angle_helper_rays,
    right_angle_label_position,
    right_angle_marker,
    scaled_arc_radius,
    synthesize_height_lines,
)
from geolabel.core.canvas import Canvas, PathBuilder
from geolabel.core.collision import OccupiedGeometry
from geolabel.core.config import (
    ALTITUDE_LABEL_OFFSET,
    ANGLE_LABEL_FONT_PX,
    ARC_BASE_RADIUS,
    COLOR_BLACK,
    COLOR_TEXT,
    FONT_SIZE_LARGE,
    FONT_WEIGHT_BOLD,
    INTERNAL_LINE_DASH,
    PADDING_PX,
    RIGHT_ANGLE_HELPER_DASH,
    RIGHT_ANGLE_MARKER_SIZE,
    SIDE_LABEL_FONT_PX,
    SIDE_LABEL_OFFSET,
    STROKE_BASE,
    STROKE_THICK,
    TRIANGLE_DOT_RADIUS,
    TRIANGLE_PADDING_PX,
    VERTEX_LABEL_OFFSET,
    ZERO_LENGTH_EPS,
)
from geolabel.core.error_codes import InsufficientPointsError, MissingCorePointError
from geolabel.core.geometry import (
    add,
    centroid,
    direction_away,
    dot,
    largest_gap_direction,
    norm,
    outward_bisector,
    perpendicular,
    scale,
    sub,
    unit,
)
from geolabel.core.placement import accept, place_tangential
from geolabel.core.text_metrics import label_box
from geolabel.core.types import (
    XY,
    Altitude,
    InternalLine,
    Point,
    RenderResult,
    TriangleAngleMark,
    TriangleDiagram,
)
from geolabel.core.viewport import fit_viewport

logger = logging.getLogger(__name__)

# core vertex indices at the ends of each named side
_SIDE_ENDS: dict[str, tuple[int, int]] = {"AB": (0, 1), "BC": (1, 2), "CA": (2, 0)}


@dataclass(frozen=True)
class _AngleLabel:
    """Angle label waiting for the label pass."""
    text: str
    vertex: XY
    anchor: XY


@dataclass(frozen=True)
class _AltitudeFoot:
    altitude: Altitude
    vertex: XY
    foot: XY
    along: XY  # side endpoint farther from the foot
    extension: tuple[XY, XY] | None  # side endpoint to foot, when the foot falls outside the side


def check_core_points(diagram: TriangleDiagram) -> None:
    """Raise when the three core vertices cannot be resolved."""
    if len(diagram.points) < 3:
        logger.error("triangle needs 3 points, got %d", len(diagram.points))
        raise InsufficientPointsError(f"triangle needs at least 3 points, got {len(diagram.points)}")
    core = diagram.points[:3]
    ids = [p.id for p in core]
    for p in core:
        if not p.id or not (math.isfinite(p.x) and math.isfinite(p.y)):
            logger.error("core point unresolvable: %r", p)
            raise MissingCorePointError(f"core point {p.id!r} is missing or has no finite position")
    if len(set(ids)) < 3:
        logger.error("core point ids not distinct: %s", ids)
        raise MissingCorePointError(f"core point ids must be distinct, got {ids}")


class _TriangleRender:
    """State of one render: screen positions by id, canvas and the occupied-geometry log."""

    def __init__(self, diagram: TriangleDiagram) -> None:
        check_core_points(diagram)
        self.diagram = diagram
        viewport = fit_viewport(
            [Point(p.x, p.y) for p in diagram.points],
            diagram.width,
            diagram.height,
            TRIANGLE_PADDING_PX,
            y_axis_up=diagram.y_axis_up,
        )
        self.positions: dict[str, XY] = {}
        self.labels: dict[str, str | None] = {}
        for p in diagram.points:
            if p.id in self.positions:
                logger.debug("duplicate point id %r ignored", p.id)
                continue
            self.positions[p.id] = viewport.to_screen(Point(p.x, p.y))
            self.labels[p.id] = p.label
        self.core_ids = core_vertex_ids(diagram.points)
        self.core_order = [p.id for p in diagram.points[:3]]
        self.core = [self.positions[i] for i in self.core_order]
        self.center = centroid(self.core)
        self.canvas = Canvas()
        self.occupied = OccupiedGeometry()
        self.markers: list[RightAngleMarker] = []
        self.marker_vertices: list[str] = []
        self.angle_labels: list[_AngleLabel] = []
        self.lines: list[InternalLine] = []
        self.feet: list[_AltitudeFoot] = []
        self.foot_ids: set[str] = set()

    def resolve(self, *ids: str) -> list[XY] | None:
        pts: list[XY] = []
        for i in ids:
            p = self.positions.get(i)
            if p is None:
                logger.debug("unknown point id %r in %s; annotation skipped", i, ids)
                return None
            pts.append(p)
        return pts

    # ----- geometry pass -----

    def draw_triangle(self) -> None:
        self.canvas.draw_polygon(self.core, fill="none", stroke=COLOR_BLACK, stroke_width=STROKE_THICK)
        self.occupied.record_polygon(self.core)

    def draw_angle_mark(self, mark: TriangleAngleMark) -> None:
        ids = (mark.point_on_first_ray, mark.vertex, mark.point_on_second_ray)
        if len(set(ids)) < 3:
            logger.debug("angle mark %s repeats a point; skipped", ids)
            return
        pts = self.resolve(*ids)
        if pts is None:
            return
        p1, v, p2 = pts
        if norm(sub(p1, v)) < ZERO_LENGTH_EPS or norm(sub(p2, v)) < ZERO_LENGTH_EPS:
            logger.debug("angle mark at %r has a zero-length ray; skipped", mark.vertex)
            return

        if mark.is_right_angle:
            marker = right_angle_marker(v, p1, p2, RIGHT_ANGLE_MARKER_SIZE)
            if marker is None:
                return
            path = PathBuilder().move_to(*marker.leg1).line_to(*marker.corner).line_to(*marker.leg2)
            self.canvas.draw_path(path, stroke=mark.color, stroke_width=STROKE_THICK)
            self.markers.append(marker)
            self.marker_vertices.append(mark.vertex)
            if mark.label:
                _, h = label_box(mark.label, ANGLE_LABEL_FONT_PX)
                self.angle_labels.append(_AngleLabel(mark.label, v, right_angle_label_position(marker, h)))
            return

        base = mark.radius if mark.radius is not None else ARC_BASE_RADIUS
        radius = scaled_arc_radius(base, interior_angle(v, p1, p2))
        arc: ArcSweep = arc_sweep(v, p1, p2, self.center, radius)
        if mark.show_arc:
            path = PathBuilder().move_to(*arc.start).arc_to(radius, arc.large_arc, arc.sweep, *arc.end)
            self.canvas.draw_path(path, stroke=mark.color, stroke_width=STROKE_THICK)
        if mark.label:
            _, h = label_box(mark.label, ANGLE_LABEL_FONT_PX)
            self.angle_labels.append(_AngleLabel(mark.label, v, arc_label_position(arc, h, mark.label_distance)))

    def resolve_altitudes(self) -> list[InternalLine]:
        """Project each altitude vertex onto its side's line, register the foot, return the altitude segments."""
        out: list[InternalLine] = []
        for n, alt in enumerate(self.diagram.altitudes):
            pts = self.resolve(alt.vertex)
            if pts is None:
                continue
            v = pts[0]
            i, j = _SIDE_ENDS[alt.to_side]
            p, q = self.core[i], self.core[j]
            base = sub(q, p)
            if norm(base) < ZERO_LENGTH_EPS:
                logger.debug("altitude from %r: side %s has zero length; skipped", alt.vertex, alt.to_side)
                continue
            t = dot(sub(v, p), base) / dot(base, base)
            foot = add(p, scale(base, t))
            if norm(sub(v, foot)) < ZERO_LENGTH_EPS:
                logger.debug("altitude from %r: vertex lies on side %s; skipped", alt.vertex, alt.to_side)
                continue
            extension = None
            if t < 0.0 or t > 1.0:
                logger.debug("altitude from %r meets side %s outside the segment (t=%.3f)", alt.vertex, alt.to_side, t)
                extension = (p if t < 0.0 else q, foot)
            along = q if norm(sub(q, foot)) >= norm(sub(p, foot)) else p
            foot_id = f"{alt.vertex}⊥{alt.to_side}#{n}"
            self.positions[foot_id] = foot
            self.foot_ids.add(foot_id)
            self.feet.append(_AltitudeFoot(alt, v, foot, along, extension))
            out.append(InternalLine(alt.vertex, foot_id, alt.style, alt.color))
        return out

    def draw_internal_lines(self) -> None:
        explicit = [*self.diagram.internal_lines, *self.resolve_altitudes()]
        synthesized = synthesize_height_lines(self.diagram.angles, self.positions, explicit, self.core_ids)
        self.lines = [*explicit, *synthesized]
        for line in self.lines:
            pts = self.resolve(line.from_id, line.to_id)
            if pts is None:
                continue
            a, b = pts
            if norm(sub(b, a)) < ZERO_LENGTH_EPS:
                logger.debug("internal line %s-%s has zero length; skipped", line.from_id, line.to_id)
                continue
            self.canvas.draw_line(a, b, stroke=line.color, stroke_width=STROKE_BASE, dash=INTERNAL_LINE_DASH.get(line.style))
            self.occupied.record_segment(a, b)

    def draw_altitude_feet(self) -> None:
        for f in self.feet:
            if f.extension is not None:
                a, b = f.extension
                self.canvas.draw_line(a, b, stroke=COLOR_BLACK, stroke_width=STROKE_BASE, dash=INTERNAL_LINE_DASH["dotted"])
                self.occupied.record_segment(a, b)
            marker = right_angle_marker(f.foot, f.vertex, f.along, RIGHT_ANGLE_MARKER_SIZE)
            if marker is None:
                continue
            path = PathBuilder().move_to(*marker.leg1).line_to(*marker.corner).line_to(*marker.leg2)
            self.canvas.draw_path(path, stroke=COLOR_BLACK, stroke_width=STROKE_THICK)

    def draw_helper_rays(self) -> None:
        for vertex_id, marker in zip(self.marker_vertices, self.markers):
            dashed = dashed_directions_at(vertex_id, self.positions, self.lines)
            if not dashed:
                continue
            for a, b in right_angle_helper_rays(marker, dashed):
                self.canvas.draw_line(a, b, stroke=COLOR_BLACK, stroke_width=STROKE_BASE, dash=RIGHT_ANGLE_HELPER_DASH)
                self.occupied.record_segment(a, b)

    def draw_points(self) -> None:
        for pid, p in self.positions.items():
            if pid in self.foot_ids:
                continue
            self.canvas.draw_circle(p, TRIANGLE_DOT_RADIUS, fill=COLOR_BLACK)

    # ----- label pass -----

    def _place(self, text: str, anchor: XY, radial: XY, font_px: float, bold: bool = False) -> None:
        w, h = label_box(text, font_px)
        chosen = place_tangential(self.occupied, anchor, radial, w, h)
        self.canvas.draw_text(chosen.x, chosen.y, text, font_px, fill=COLOR_TEXT, font_weight=FONT_WEIGHT_BOLD if bold else None)
        accept(self.occupied, chosen, w, h)

    def connected_directions(self, point_id: str) -> list[XY]:
        origin = self.positions[point_id]
        out: list[XY] = []
        for line in self.lines:
            if point_id not in (line.from_id, line.to_id):
                continue
            other = self.positions.get(line.to_id if line.from_id == point_id else line.from_id)
            if other is not None and norm(sub(other, origin)) >= ZERO_LENGTH_EPS:
                out.append(unit(sub(other, origin)))
        return out

    def draw_vertex_labels(self) -> None:
        for i, vid in enumerate(self.core_order):
            label = self.labels.get(vid)
            if not label:
                continue
            v = self.core[i]
            radial = outward_bisector(v, self.core[(i - 1) % 3], self.core[(i + 1) % 3], self.center)
            self._place(label, add(v, scale(radial, VERTEX_LABEL_OFFSET)), radial, FONT_SIZE_LARGE, bold=True)

    def draw_point_labels(self) -> None:
        for pid, p in self.positions.items():
            label = self.labels.get(pid)
            if pid in self.core_ids or not label:
                continue
            dirs = self.connected_directions(pid)
            away = direction_away(p, self.center)
            radial = largest_gap_direction(dirs, away)
            if len(dirs) <= 1 and dot(radial, away) < 0:
                radial = scale(radial, -1.0)
            self._place(label, add(p, scale(radial, VERTEX_LABEL_OFFSET)), radial, FONT_SIZE_LARGE, bold=True)

    def draw_angle_labels(self) -> None:
        for pending in self.angle_labels:
            radial = sub(pending.anchor, pending.vertex)
            self._place(pending.text, pending.anchor, radial, ANGLE_LABEL_FONT_PX)

    def draw_side_labels(self) -> None:
        for side in self.diagram.sides:
            pts = self.resolve(side.a, side.b)
            if pts is None or not side.label:
                continue
            a, b = pts
            edge = sub(b, a)
            if norm(edge) < ZERO_LENGTH_EPS:
                logger.debug("side %s-%s has zero length; label skipped", side.a, side.b)
                continue
            mid = ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)
            normal = perpendicular(unit(edge))
            if dot(normal, sub(mid, self.center)) < 0:
                normal = scale(normal, -1.0)
            self._place(side.label, add(mid, scale(normal, SIDE_LABEL_OFFSET)), normal, SIDE_LABEL_FONT_PX)

    def draw_altitude_labels(self) -> None:
        for f in self.feet:
            if not f.altitude.value:
                continue
            mid = ((f.vertex[0] + f.foot[0]) / 2.0, (f.vertex[1] + f.foot[1]) / 2.0)
            normal = perpendicular(unit(sub(f.foot, f.vertex)))
            self._place(f.altitude.value, add(mid, scale(normal, ALTITUDE_LABEL_OFFSET)), normal, SIDE_LABEL_FONT_PX)

    def run(self) -> RenderResult:
        self.draw_triangle()
        for mark in self.diagram.angles:
            self.draw_angle_mark(mark)
        self.draw_internal_lines()
        self.draw_altitude_feet()
        self.draw_helper_rays()
        self.draw_points()
        self.draw_vertex_labels()
        self.draw_point_labels()
        self.draw_angle_labels()
        self.draw_side_labels()
        self.draw_altitude_labels()
        return RenderResult(svg=self.canvas.to_svg(PADDING_PX), canvas=self.canvas, occupied=self.occupied)


def render_triangle_diagram(diagram: TriangleDiagram) -> RenderResult:
    """
    Render a triangle construction to SVG. Raises InsufficientPointsError or
    MissingCorePointError when the core triangle cannot be built.
    """
    logger.debug("render triangle diagram: %d points", len(diagram.points))
    return _TriangleRender(diagram).run()
