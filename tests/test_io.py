# tests/test_io.py
"""
Diagram JSON validation for both families: well-formed input builds the
dataclasses, schema violations raise InvalidDiagramError naming the field.
"""

from __future__ import annotations

import copy
import json

import pytest

from geolabel.core.error_codes import INVALID_DIAGRAM, InvalidDiagramError, user_message
from geolabel.core.io import load_diagram, validate
from geolabel.core.types import Point, Reflection, Rotation, TransformationDiagram, TriangleDiagram

TRANSFORMATION = {
    "type": "transformationDiagram",
    "width": 400,
    "height": 300,
    "preImage": {
        "vertices": [{"x": 1, "y": 1}, {"x": 3, "y": 1}, {"x": 1, "y": 4}],
        "vertexLabels": ["A", "B", "C"],
        "label": "Figure 1",
        "fillColor": "#cce5ff",
        "strokeColor": "#1f4e79",
        "angleMarks": [{"vertexIndex": 0, "radius": 0.5, "label": "90°"}],
        "sideLengths": [{"value": "2", "position": "outside", "offset": 12}, None, None],
    },
    "transformation": {
        "type": "reflection",
        "lineOfReflection": {"from": {"x": 0, "y": 0}, "to": {"x": 0, "y": 5}, "style": "dashed", "color": "#888888"},
    },
}

TRIANGLE = {
    "type": "triangleDiagram",
    "width": 300,
    "height": 300,
    "points": [
        {"id": "A", "x": 0, "y": 0, "label": "A"},
        {"id": "B", "x": 4, "y": 0, "label": "B"},
        {"id": "C", "x": 0, "y": 3, "label": "C"},
    ],
    "angles": [{"pointOnFirstRay": "B", "vertex": "A", "pointOnSecondRay": "C", "isRightAngle": True}],
    "sides": [{"a": "A", "b": "B", "label": "4"}],
    "internalLines": [{"from": "A", "to": "B", "style": "dotted"}],
}


def _with(base: dict, path: list, value) -> dict:
    data = copy.deepcopy(base)
    node = data
    for key in path[:-1]:
        node = node[key]
    node[path[-1]] = value
    return data


def test_validate_transformation() -> None:
    d = validate(TRANSFORMATION)
    assert isinstance(d, TransformationDiagram)
    assert d.pre_image.vertices[2] == Point(1.0, 4.0)
    assert d.pre_image.vertex_labels == ("A", "B", "C")
    assert d.pre_image.angle_marks[0].radius == 0.5
    assert d.pre_image.side_lengths[1] is None
    assert isinstance(d.transformation, Reflection)
    assert d.transformation.style == "dashed"


def test_validate_rotation() -> None:
    data = _with(TRANSFORMATION, ["transformation"], {"type": "rotation", "centerOfRotation": {"x": 0, "y": 0}, "angle": 90})
    d = validate(data)
    assert isinstance(d.transformation, Rotation)
    assert d.transformation.angle_degrees == 90.0


def test_validate_triangle() -> None:
    d = validate(TRIANGLE)
    assert isinstance(d, TriangleDiagram)
    assert [p.id for p in d.points] == ["A", "B", "C"]
    assert d.angles[0].is_right_angle
    assert d.angles[0].show_arc
    assert d.internal_lines[0].style == "dotted"
    assert d.y_axis_up is False


def test_null_labels_are_absent() -> None:
    data = _with(TRIANGLE, ["points", 0, "label"], "null")
    d = validate(data)
    assert d.points[0].label is None


@pytest.mark.parametrize(
    "path,value,field",
    [
        (["type"], "pieChart", "type"),
        (["width"], 0, "width"),
        (["preImage", "vertices"], [{"x": 0, "y": 0}, {"x": 1, "y": 1}], "preImage.vertices"),
        (["preImage", "vertexLabels"], ["A", "B"], "preImage.vertexLabels"),
        (["preImage", "vertices", 0, "x"], "one", "preImage.vertices[0].x"),
        (["transformation", "type"], "shear", "transformation.type"),
        (["transformation", "lineOfReflection", "style"], "wavy", "transformation.lineOfReflection.style"),
        (["preImage", "sideLengths", 0, "position"], "above", "preImage.sideLengths[0].position"),
        (["preImage", "angleMarks", 0, "radius"], -1, "preImage.angleMarks[0].radius"),
    ],
)
def test_transformation_schema_errors(path, value, field) -> None:
    with pytest.raises(InvalidDiagramError) as excinfo:
        validate(_with(TRANSFORMATION, path, value))
    assert str(excinfo.value).startswith(field)
    assert excinfo.value.error_key == INVALID_DIAGRAM


@pytest.mark.parametrize(
    "path,value",
    [
        (["points", 1, "id"], 7),
        (["angles", 0, "vertex"], None),
        (["internalLines", 0, "style"], "zigzag"),
        (["sides", 0], "AB"),
    ],
)
def test_triangle_schema_errors(path, value) -> None:
    with pytest.raises(InvalidDiagramError):
        validate(_with(TRIANGLE, path, value))


@pytest.mark.parametrize(
    "path,value,field",
    [
        (["angles", 0, "isRightAngle"], "false", "angles[0].isRightAngle"),
        (["angles", 0, "showArc"], 0, "angles[0].showArc"),
        (["yAxisUp"], "yes", "yAxisUp"),
    ],
)
def test_flags_must_be_booleans(path, value, field) -> None:
    with pytest.raises(InvalidDiagramError) as excinfo:
        validate(_with(TRIANGLE, path, value))
    assert str(excinfo.value).startswith(field)


def test_flag_defaults() -> None:
    data = copy.deepcopy(TRIANGLE)
    del data["angles"][0]["isRightAngle"]
    data["angles"][0]["showArc"] = None
    d = validate(data)
    assert d.angles[0].is_right_angle is False
    assert d.angles[0].show_arc is True
    assert validate(_with(TRIANGLE, ["yAxisUp"], True)).y_axis_up is True


def test_polyline_internal_line_is_split() -> None:
    data = _with(TRIANGLE, ["internalLines"], [{"points": ["A", "C", "B"], "style": "dashed"}])
    d = validate(data)
    assert [(ln.from_id, ln.to_id) for ln in d.internal_lines] == [("A", "C"), ("C", "B")]
    assert {ln.style for ln in d.internal_lines} == {"dashed"}


@pytest.mark.parametrize("ids", [["A"], ["A", "B", "C", "A"]])
def test_polyline_length_is_checked(ids) -> None:
    with pytest.raises(InvalidDiagramError) as excinfo:
        validate(_with(TRIANGLE, ["internalLines"], [{"points": ids}]))
    assert str(excinfo.value).startswith("internalLines[0].points")


def test_validate_altitudes() -> None:
    data = _with(
        TRIANGLE,
        ["altitudes"],
        [
            {"vertex": "C", "toSide": "AB", "value": 4, "style": "dotted", "color": "#0000ff"},
            {"vertex": "A", "toSide": "BC", "value": "h"},
        ],
    )
    d = validate(data)
    first, second = d.altitudes
    assert (first.vertex, first.to_side, first.value, first.style, first.color) == ("C", "AB", "4", "dotted", "#0000ff")
    assert (second.value, second.style) == ("h", "dashed")


@pytest.mark.parametrize(
    "alt,field",
    [
        ({"vertex": "C", "toSide": "AC"}, "altitudes[0].toSide"),
        ({"vertex": "C", "toSide": "AB", "style": "solid"}, "altitudes[0].style"),
        ({"toSide": "AB"}, "altitudes[0].vertex"),
    ],
)
def test_altitude_schema_errors(alt, field) -> None:
    with pytest.raises(InvalidDiagramError) as excinfo:
        validate(_with(TRIANGLE, ["altitudes"], [alt]))
    assert str(excinfo.value).startswith(field)


def test_non_object_rejected() -> None:
    with pytest.raises(InvalidDiagramError):
        validate([1, 2, 3])


def test_load_diagram_from_file(tmp_path) -> None:
    path = tmp_path / "diagram.json"
    path.write_text(json.dumps(TRIANGLE), encoding="utf-8")
    d = load_diagram("diagram.json", repo_root=tmp_path)
    assert isinstance(d, TriangleDiagram)


def test_load_diagram_bad_json(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidDiagramError):
        load_diagram(path)


def test_load_diagram_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_diagram(tmp_path / "nope.json")


def test_user_message_for_invalid_diagram() -> None:
    assert "invalid" in user_message(INVALID_DIAGRAM).lower()
    assert user_message("unknown_key") == "Something went wrong."
