# tests/test_transformation_diagram.py
"""
End-to-end transformation renders: image vertices, primed labels, aids per
transformation type, and the dilation label nudge.
"""

from __future__ import annotations

import math
import re
import xml.etree.ElementTree as ET

import pytest

from geolabel.core.canvas import SVG_NS
from geolabel.core.config import (
    CENTER_POINT_LABEL,
    COINCIDENT_NUDGE_PX,
    DILATION_NUDGE_PX,
    IMAGE_DASH,
    IMAGE_STROKE_COLOR,
    TRANSFORMATION_PADDING_PX,
)
from geolabel.core.error_codes import DegenerateAxisError
from geolabel.core.layout import summarize_layout
from geolabel.core.transformation_diagram import (
    dilation_label_offsets,
    image_shape,
    render_transformation_diagram,
)
from geolabel.core.types import (
    Dilation,
    Point,
    PolygonAngleMark,
    Reflection,
    Rotation,
    Shape,
    SideLength,
    TransformationDiagram,
    Translation,
)

NS = {"svg": SVG_NS}

TRIANGLE = Shape(
    vertices=(Point(1, 1), Point(3, 1), Point(1, 4)),
    vertex_labels=("A", "B", "C"),
    label="Figure 1",
    fill_color="none",
    stroke_color="#1f4e79",
)


def _diagram(transformation, shape: Shape = TRIANGLE) -> TransformationDiagram:
    return TransformationDiagram(width=400, height=300, pre_image=shape, transformation=transformation)


def _texts(result) -> list[str]:
    root = ET.fromstring(result.svg)
    return [t.text for t in root.findall("svg:text", NS)]


def test_reflection_image_vertices() -> None:
    result = render_transformation_diagram(_diagram(Reflection(Point(0, 0), Point(0, 5))))
    expected = [(-1, 1), (-3, 1), (-1, 4)]
    assert len(result.image_vertices) == 3
    for q, (ex, ey) in zip(result.image_vertices, expected):
        assert q.x == pytest.approx(ex)
        assert q.y == pytest.approx(ey)


def test_image_labels_are_primed() -> None:
    result = render_transformation_diagram(_diagram(Translation(Point(5, 0))))
    texts = _texts(result)
    for name in ("A", "B", "C", "A′", "B′", "C′", "Figure 1", "Figure 1′"):
        assert name in texts
    assert len(result.occupied.labels) == 8


def test_image_polygon_is_dashed_green() -> None:
    result = render_transformation_diagram(_diagram(Translation(Point(5, 0))))
    polys = [c for c in result.canvas.commands if c.tag == "polygon"]
    assert len(polys) == 2
    assert polys[1].attrs["stroke"] == IMAGE_STROKE_COLOR
    assert polys[1].attrs["stroke-dasharray"] == IMAGE_DASH
    assert "stroke-dasharray" not in polys[0].attrs


def test_polygons_fit_viewport() -> None:
    result = render_transformation_diagram(_diagram(Rotation(Point(0, 0), 135.0)))
    polys = [c for c in result.canvas.commands if c.tag == "polygon"]
    for cmd in polys:
        for x, y in cmd.points:
            assert TRANSFORMATION_PADDING_PX - 1e-6 <= x <= 400 - TRANSFORMATION_PADDING_PX + 1e-6
            assert TRANSFORMATION_PADDING_PX - 1e-6 <= y <= 300 - TRANSFORMATION_PADDING_PX + 1e-6


def test_reflection_aids() -> None:
    result = render_transformation_diagram(_diagram(Reflection(Point(0, 0), Point(0, 5), style="dashed")))
    lines = [c for c in result.canvas.commands if c.tag == "line"]
    # axis plus one dotted guide per vertex
    assert len(lines) == 4
    # two polygons, the axis and three guides
    assert len(result.occupied.segments) == 3 + 3 + 1 + 3


def test_rotation_center_point() -> None:
    result = render_transformation_diagram(_diagram(Rotation(Point(0, 0), 90.0)))
    assert CENTER_POINT_LABEL in _texts(result)
    # vertex labels, shape labels and the reserved center label
    assert len(result.occupied.labels) == 9


def test_degenerate_reflection_is_fatal() -> None:
    with pytest.raises(DegenerateAxisError):
        render_transformation_diagram(_diagram(Reflection(Point(2, 2), Point(2, 2))))


def test_angle_marks_and_side_lengths() -> None:
    shape = Shape(
        vertices=TRIANGLE.vertices,
        vertex_labels=("•", "B", "C"),
        label=None,
        fill_color="#cce5ff",
        stroke_color="#1f4e79",
        angle_marks=(PolygonAngleMark(0, 0.4, "90°", 0.0), PolygonAngleMark(7, 0.4, "bad", 0.0)),
        side_lengths=(SideLength("2", "outside", 14.0), None, SideLength("3", "inside", 10.0)),
    )
    result = render_transformation_diagram(_diagram(Translation(Point(4, 0)), shape))
    arcs = [c for c in result.canvas.commands if c.tag == "path"]
    assert len(arcs) == 2  # one per polygon; index 7 is skipped
    texts = _texts(result)
    assert texts.count("90°") == 2
    assert "2" in texts and "3" in texts
    assert "•" not in texts and "bad" not in texts


def test_image_shape_drops_side_lengths() -> None:
    shape = Shape(
        vertices=TRIANGLE.vertices,
        vertex_labels=("A", "•", ""),
        label=None,
        fill_color="none",
        stroke_color="#000",
        side_lengths=(SideLength("2", "outside", 10.0),),
    )
    img = image_shape(shape, (Point(0, 0), Point(1, 0), Point(0, 1)))
    assert img.vertex_labels == ("A′", "•", "")
    assert img.side_lengths == ()
    assert img.label is None
    assert img.stroke_color == IMAGE_STROKE_COLOR


def test_dilation_label_offsets() -> None:
    pre = [Point(2, 2), Point(4, 2), Point(2, 5)]
    near = Dilation(Point(2, 2), 1.02)
    img = [Point(2 + 1.02 * (p.x - 2), 2 + 1.02 * (p.y - 2)) for p in pre]
    assert dilation_label_offsets(near, pre, img) == [COINCIDENT_NUDGE_PX, DILATION_NUDGE_PX, DILATION_NUDGE_PX]
    far = Dilation(Point(2, 2), 2.0)
    img2 = [Point(2 + 2 * (p.x - 2), 2 + 2 * (p.y - 2)) for p in pre]
    assert dilation_label_offsets(far, pre, img2) == [COINCIDENT_NUDGE_PX, 0.0, 0.0]


def test_dilation_render_has_correspondence_dots() -> None:
    result = render_transformation_diagram(_diagram(Dilation(Point(1, 1), 2.0)))
    circles = [c for c in result.canvas.commands if c.tag == "circle"]
    # 6 vertex dots, the center point, 3 + 3 correspondence dots
    assert len(circles) == 13
    assert result.image_vertices[1] == Point(5, 1)


def test_layout_summary_of_render() -> None:
    result = render_transformation_diagram(_diagram(Translation(Point(6, 0))))
    summary = summarize_layout(result.occupied)
    assert summary.n_labels == 8
    assert summary.n_segments == 6


NUMERIC_ATTRS = ("x", "y", "x1", "y1", "x2", "y2", "cx", "cy", "r", "width", "height", "font-size", "stroke-width", "points", "d", "viewBox")
PATH_COMMANDS = {"M", "L", "A", "Z"}


def _assert_finite(result) -> None:
    numbers: list[float] = []
    for el in ET.fromstring(result.svg).iter():
        for name in NUMERIC_ATTRS:
            value = el.get(name)
            if value is None:
                continue
            numbers.extend(float(tok) for tok in re.split(r"[\s,]+", value.strip()) if tok and tok not in PATH_COMMANDS)
    assert numbers
    assert all(math.isfinite(v) for v in numbers)


def test_zero_length_edge_skips_side_label() -> None:
    shape = Shape(
        vertices=(Point(1, 1), Point(1, 1), Point(3, 4)),
        vertex_labels=("A", "B", "C"),
        label="Figure 1",
        fill_color="none",
        stroke_color="#1f4e79",
        side_lengths=(SideLength("0", "outside", 14.0), SideLength("5", "outside", 14.0)),
    )
    result = render_transformation_diagram(_diagram(Translation(Point(4, 0)), shape))
    texts = _texts(result)
    assert "5" in texts
    assert "0" not in texts
    _assert_finite(result)


def test_dilation_by_zero_collapses_to_center() -> None:
    center = Point(2, 2)
    result = render_transformation_diagram(_diagram(Dilation(center, 0.0)))
    assert result.image_vertices == (center, center, center)
    assert "A′" in _texts(result)
    _assert_finite(result)


def test_dilation_by_negative_scale() -> None:
    result = render_transformation_diagram(_diagram(Dilation(Point(0, 0), -1.0)))
    expected = [(-1, -1), (-3, -1), (-1, -4)]
    for q, (ex, ey) in zip(result.image_vertices, expected):
        assert q.x == pytest.approx(ex)
        assert q.y == pytest.approx(ey)
    _assert_finite(result)


def test_tiny_canvas_renders_finite_svg() -> None:
    diagram = TransformationDiagram(width=30, height=30, pre_image=TRIANGLE, transformation=Rotation(Point(0, 0), 90.0))
    _assert_finite(render_transformation_diagram(diagram))
