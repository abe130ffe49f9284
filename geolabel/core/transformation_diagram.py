# geolabel/core/transformation_diagram.py
"""
Render a pre-image polygon and its image under one transformation.
Order: image -> viewport -> collision segments -> polygons and aids -> angle
marks -> vertex labels -> side labels -> shape labels -> center point.
Every placed label rect is recorded so later labels avoid it.
"""

from __future__ import annotations

import logging
from typing import Sequence

from geolabel.core.angles import arc_label_position, arc_sweep, interior_angle, scaled_arc_radius
from geolabel.core.canvas import Canvas, PathBuilder
from geolabel.core.collision import OccupiedGeometry
from geolabel.core.config import (
    ANGLE_LABEL_FONT_PX,
    ARC_STROKE_WIDTH,
    CENTER_POINT_LABEL,
    CENTER_POINT_LABEL_RISE,
    COINCIDENT_EPS,
    COINCIDENT_NUDGE_PX,
    COLOR_GRID_MINOR,
    COLOR_HIGHLIGHT,
    COLOR_TEXT,
    COLOR_WHITE,
    CORRESPONDENCE_DOT_OPACITY,
    CORRESPONDENCE_DOT_RADIUS,
    CORRESPONDENCE_IMAGE_DOT_RADIUS,
    DILATION_NEAR_IDENTITY,
    DILATION_NUDGE_PX,
    FONT_SIZE_MEDIUM,
    FONT_WEIGHT_BOLD,
    IMAGE_DASH,
    IMAGE_STROKE_COLOR,
    IMAGE_STROKE_WIDTH,
    LINE_DASH,
    PADDING_PX,
    PLACEHOLDER_LABEL,
    PREIMAGE_STROKE_WIDTH,
    PRIME,
    SIDE_LABEL_FONT_PX,
    STROKE_THICK,
    STROKE_THIN,
    TRANSFORMATION_PADDING_PX,
    TRANSFORMATION_Y_AXIS_UP,
    VERTEX_DOT_RADIUS,
    VERTEX_LABEL_OFFSET,
    ZERO_LENGTH_EPS,
)
from geolabel.core.geometry import add, centroid, distance, dot, norm, outward_bisector, perpendicular, points_bounds, scale, sub, unit
from geolabel.core.placement import accept, place_shape_label, place_tangential
from geolabel.core.text_metrics import label_box
from geolabel.core.transforms import apply_transformation, center_point, transform_aid_points
from geolabel.core.types import (
    XY,
    Dilation,
    LabelRect,
    Placement,
    Point,
    Reflection,
    RenderResult,
    Shape,
    TransformationDiagram,
)
from geolabel.core.viewport import Viewport, fit_viewport

logger = logging.getLogger(__name__)


def _primed(label: str | None) -> str | None:
    if not label or label == PLACEHOLDER_LABEL:
        return label
    return label + PRIME


def image_shape(pre_image: Shape, image_vertices: Sequence[Point]) -> Shape:
    """
    The image keeps the pre-image's fill and angle marks, primes its labels,
    takes the image stroke color and drops side lengths (they change under dilation).
    """
    return Shape(
        vertices=tuple(image_vertices),
        vertex_labels=tuple(_primed(lbl) or "" for lbl in pre_image.vertex_labels),
        label=_primed(pre_image.label),
        fill_color=pre_image.fill_color,
        stroke_color=IMAGE_STROKE_COLOR,
        angle_marks=pre_image.angle_marks,
        side_lengths=(),
    )


def dilation_label_offsets(transformation: Dilation, pre: Sequence[Point], img: Sequence[Point]) -> list[float]:
    """
    Extra vertex-label offset for image labels so they do not sit on the
    pre-image labels: a nudge when the scale is near 1, and at least the
    coincident nudge where a vertex is its own image (the center).
    """
    nudge = DILATION_NUDGE_PX if abs(transformation.scale_factor - 1.0) < DILATION_NEAR_IDENTITY else 0.0
    offsets = [nudge] * len(img)
    for i, (p, q) in enumerate(zip(pre, img)):
        if distance(p.as_xy(), q.as_xy()) < COINCIDENT_EPS:
            offsets[i] = max(offsets[i], COINCIDENT_NUDGE_PX)
    return offsets


class _TransformationRender:
    """State of one render: viewport, canvas and the occupied-geometry log."""

    def __init__(self, diagram: TransformationDiagram) -> None:
        self.diagram = diagram
        self.transformation = diagram.transformation
        self.pre = diagram.pre_image
        image_vertices = apply_transformation(self.transformation, self.pre.vertices)
        self.image = image_shape(self.pre, image_vertices)
        visible = [*self.pre.vertices, *image_vertices, *transform_aid_points(self.transformation)]
        self.viewport: Viewport = fit_viewport(
            visible,
            diagram.width,
            diagram.height,
            TRANSFORMATION_PADDING_PX,
            y_axis_up=TRANSFORMATION_Y_AXIS_UP,
        )
        self.canvas = Canvas()
        self.occupied = OccupiedGeometry()

    def screen(self, shape: Shape) -> list[XY]:
        return [self.viewport.to_screen(v) for v in shape.vertices]

    # ----- collision geometry -----

    def record_segments(self) -> None:
        """Everything drawn as a line goes into the log before any label is placed."""
        self.occupied.record_polygon(self.screen(self.pre))
        self.occupied.record_polygon(self.screen(self.image))
        t = self.transformation
        if isinstance(t, Reflection):
            self.occupied.record_segment(self.viewport.to_screen(t.line_from), self.viewport.to_screen(t.line_to))
            for a, b in zip(self.screen(self.pre), self.screen(self.image)):
                self.occupied.record_segment(a, b)

    # ----- drawing -----

    def draw_polygon(self, shape: Shape, is_image: bool) -> None:
        pts = self.screen(shape)
        self.canvas.draw_polygon(
            pts,
            fill=shape.fill_color,
            stroke=shape.stroke_color,
            stroke_width=IMAGE_STROKE_WIDTH if is_image else PREIMAGE_STROKE_WIDTH,
            dash=IMAGE_DASH if is_image else None,
        )
        for p in pts:
            self.canvas.draw_circle(p, VERTEX_DOT_RADIUS, fill=shape.stroke_color, stroke=shape.stroke_color, stroke_width=STROKE_THICK)

    def draw_aid_line(self, a: Point, b: Point, style: str, color: str) -> None:
        self.canvas.draw_line(
            self.viewport.to_screen(a),
            self.viewport.to_screen(b),
            stroke=color,
            stroke_width=STROKE_THICK,
            dash=LINE_DASH.get(style),
        )

    def draw_angle_marks(self, shape: Shape) -> None:
        pts = self.screen(shape)
        n = len(pts)
        center = centroid(pts)
        for mark in shape.angle_marks:
            if not 0 <= mark.vertex_index < n:
                logger.debug("angle mark vertex index %d out of range; skipped", mark.vertex_index)
                continue
            v = pts[mark.vertex_index]
            prev = pts[(mark.vertex_index - 1) % n]
            nxt = pts[(mark.vertex_index + 1) % n]
            if norm(sub(prev, v)) < ZERO_LENGTH_EPS or norm(sub(nxt, v)) < ZERO_LENGTH_EPS:
                logger.debug("angle mark at index %d has a zero-length edge; skipped", mark.vertex_index)
                continue
            base = mark.radius * self.viewport.scale
            radius = scaled_arc_radius(base, interior_angle(v, prev, nxt))
            arc = arc_sweep(v, prev, nxt, center, radius)
            path = PathBuilder().move_to(*arc.start).arc_to(radius, arc.large_arc, arc.sweep, *arc.end)
            self.canvas.draw_path(path, stroke=shape.stroke_color, stroke_width=ARC_STROKE_WIDTH)
            if not mark.label:
                continue
            w, h = label_box(mark.label, ANGLE_LABEL_FONT_PX)
            lx, ly = arc_label_position(arc, h, mark.label_distance * self.viewport.scale)
            self.canvas.draw_text(lx, ly, mark.label, ANGLE_LABEL_FONT_PX, fill=COLOR_TEXT)
            accept(self.occupied, Placement(lx, ly, 0, True), w, h)

    def draw_vertex_labels(self, shape: Shape, extra_offsets: Sequence[float] = ()) -> None:
        pts = self.screen(shape)
        n = len(pts)
        center = centroid(pts)
        for i, v in enumerate(pts):
            label = shape.vertex_labels[i] if i < len(shape.vertex_labels) else ""
            if not label or label == PLACEHOLDER_LABEL:
                continue
            offset = VERTEX_LABEL_OFFSET + (extra_offsets[i] if i < len(extra_offsets) else 0.0)
            radial = outward_bisector(v, pts[(i - 1) % n], pts[(i + 1) % n], center)
            anchor = add(v, scale(radial, offset))
            w, h = label_box(label, FONT_SIZE_MEDIUM)
            chosen = place_tangential(self.occupied, anchor, radial, w, h)
            self.canvas.draw_text(chosen.x, chosen.y, label, FONT_SIZE_MEDIUM, font_weight=FONT_WEIGHT_BOLD)
            accept(self.occupied, chosen, w, h)

    def draw_side_lengths(self, shape: Shape) -> None:
        pts = self.screen(shape)
        n = len(pts)
        center = centroid(pts)
        for i, side in enumerate(shape.side_lengths[:n]):
            if side is None or not side.value:
                continue
            p1 = pts[i]
            p2 = pts[(i + 1) % n]
            edge = sub(p2, p1)
            if norm(edge) < ZERO_LENGTH_EPS:
                logger.debug("side %d has zero length; label skipped", i)
                continue
            mid = ((p1[0] + p2[0]) / 2.0, (p1[1] + p2[1]) / 2.0)
            normal = perpendicular(unit(edge))
            facing_out = dot(normal, sub(mid, center))
            if (side.position == "inside" and facing_out > 0) or (side.position == "outside" and facing_out < 0):
                normal = scale(normal, -1.0)
            lx, ly = add(mid, scale(normal, side.offset))
            self.canvas.draw_text(lx, ly, side.value, SIDE_LABEL_FONT_PX)
            w, h = label_box(side.value, SIDE_LABEL_FONT_PX)
            accept(self.occupied, Placement(lx, ly, 0, True), w, h)

    def reserve_center_label(self) -> None:
        c = center_point(self.transformation)
        if c is None:
            return
        x, y = self.viewport.to_screen(c)
        w, h = label_box(CENTER_POINT_LABEL, FONT_SIZE_MEDIUM)
        baseline = y - CENTER_POINT_LABEL_RISE
        self.occupied.record_rect(LabelRect(x - w / 2.0, baseline - h, w, h))

    def draw_shape_label(self, shape: Shape, prefer_below: bool = False) -> None:
        if not shape.label:
            return
        w, h = label_box(shape.label, FONT_SIZE_MEDIUM)
        chosen = place_shape_label(
            self.occupied,
            points_bounds(self.screen(shape)),
            w,
            h,
            self.diagram.width,
            prefer_below=prefer_below,
        )
        self.canvas.draw_text(chosen.x, chosen.y, shape.label, FONT_SIZE_MEDIUM, fill=shape.stroke_color, font_weight=FONT_WEIGHT_BOLD)
        accept(self.occupied, chosen, w, h)

    def draw_center_point(self) -> None:
        c = center_point(self.transformation)
        if c is None:
            return
        x, y = self.viewport.to_screen(c)
        self.canvas.draw_circle((x, y), VERTEX_DOT_RADIUS, fill=COLOR_HIGHLIGHT, stroke=COLOR_WHITE, stroke_width=STROKE_THIN)
        self.canvas.draw_text(
            x,
            y - CENTER_POINT_LABEL_RISE,
            CENTER_POINT_LABEL,
            FONT_SIZE_MEDIUM,
            baseline="baseline",
            font_weight=FONT_WEIGHT_BOLD,
        )

    def draw_correspondence_aids(self) -> None:
        t = self.transformation
        pairs = list(zip(self.pre.vertices, self.image.vertices))
        if isinstance(t, Reflection):
            for p, q in pairs:
                self.draw_aid_line(p, q, "dotted", COLOR_GRID_MINOR)
        elif isinstance(t, Dilation):
            for p, q in pairs:
                self.canvas.draw_circle(self.viewport.to_screen(p), CORRESPONDENCE_DOT_RADIUS, fill=COLOR_HIGHLIGHT, fill_opacity=CORRESPONDENCE_DOT_OPACITY)
                self.canvas.draw_circle(self.viewport.to_screen(q), CORRESPONDENCE_IMAGE_DOT_RADIUS, fill=COLOR_HIGHLIGHT)

    def run(self) -> RenderResult:
        self.record_segments()
        t = self.transformation
        if isinstance(t, Reflection):
            self.draw_aid_line(t.line_from, t.line_to, t.style, t.color)

        self.draw_polygon(self.pre, is_image=False)
        self.draw_polygon(self.image, is_image=True)
        self.draw_angle_marks(self.pre)
        self.draw_angle_marks(self.image)

        image_offsets: list[float] = []
        if isinstance(t, Dilation):
            image_offsets = dilation_label_offsets(t, self.pre.vertices, self.image.vertices)
        self.draw_vertex_labels(self.pre)
        self.draw_vertex_labels(self.image, image_offsets)
        self.draw_side_lengths(self.pre)

        self.reserve_center_label()
        self.draw_shape_label(self.pre)
        self.draw_shape_label(self.image, prefer_below=True)
        self.draw_center_point()
        self.draw_correspondence_aids()

        return RenderResult(
            svg=self.canvas.to_svg(PADDING_PX),
            canvas=self.canvas,
            occupied=self.occupied,
            image_vertices=self.image.vertices,
        )


def render_transformation_diagram(diagram: TransformationDiagram) -> RenderResult:
    """
    Render a transformation diagram to SVG. Raises DegenerateAxisError for a
    zero-length reflection line; every other problem only skips that annotation.
    """
    logger.debug("render transformation diagram: %s", diagram.transformation.type)
    return _TransformationRender(diagram).run()
