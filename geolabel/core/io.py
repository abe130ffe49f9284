# geolabel/core/io.py
"""
Load and validate diagram descriptions from JSON.
Two families, selected by "type": "transformationDiagram" and "triangleDiagram".
Field names follow the widget JSON (camelCase); validate() returns frozen
dataclasses from types.py or raises InvalidDiagramError naming the bad field.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Union

from geolabel.core.config import COLOR_BLACK, TRIANGLE_Y_AXIS_UP
from geolabel.core.error_codes import InvalidDiagramError
from geolabel.core.types import (
    ALTITUDE_SIDES,
    ALTITUDE_STYLES,
    LINE_STYLES,
    SIDE_POSITIONS,
    Altitude,
    Dilation,
    InternalLine,
    Point,
    PolygonAngleMark,
    Reflection,
    Rotation,
    Shape,
    SideLength,
    Transformation,
    TransformationDiagram,
    Translation,
    TriangleAngleMark,
    TriangleDiagram,
    TrianglePoint,
    TriangleSide,
)

logger = logging.getLogger(__name__)

Diagram = Union[TransformationDiagram, TriangleDiagram]

TRANSFORMATION_DIAGRAM = "transformationDiagram"
TRIANGLE_DIAGRAM = "triangleDiagram"


def _fail(path: str, msg: str) -> InvalidDiagramError:
    logger.error("invalid diagram at %s: %s", path, msg)
    return InvalidDiagramError(f"{path}: {msg}")


def _obj(data: Any, path: str) -> dict:
    if not isinstance(data, dict):
        raise _fail(path, "expected an object")
    return data


def _list(data: Any, path: str) -> list:
    if data is None:
        return []
    if not isinstance(data, list):
        raise _fail(path, "expected a list")
    return data


def _num(data: Any, path: str) -> float:
    if isinstance(data, bool) or not isinstance(data, (int, float)) or not math.isfinite(data):
        raise _fail(path, "expected a finite number")
    return float(data)


def _positive(data: Any, path: str) -> float:
    v = _num(data, path)
    if v <= 0:
        raise _fail(path, "must be > 0")
    return v


def _bool(data: Any, path: str, default: bool) -> bool:
    if data is None:
        return default
    if not isinstance(data, bool):
        raise _fail(path, "expected true or false")
    return data


def _str(data: Any, path: str) -> str:
    if not isinstance(data, str):
        raise _fail(path, "expected a string")
    return data


def _label(data: Any, path: str) -> str | None:
    """Optional label; blank and the literal "null" count as absent."""
    if data is None:
        return None
    s = _str(data, path).strip()
    if not s or s.lower() == "null":
        return None
    return s


def _value(data: Any, path: str) -> str | None:
    """Optional measurement label; numbers are written without a trailing .0."""
    if isinstance(data, (int, float)) and not isinstance(data, bool):
        return f"{_num(data, path):g}"
    return _label(data, path)


def _point(data: Any, path: str) -> Point:
    d = _obj(data, path)
    return Point(_num(d.get("x"), f"{path}.x"), _num(d.get("y"), f"{path}.y"))


def _style(data: Any, path: str) -> str:
    s = "solid" if data is None else _str(data, path)
    if s not in LINE_STYLES:
        raise _fail(path, f"unknown line style {s!r}")
    return s


# ----- transformation family -----


def _shape(data: Any, path: str) -> Shape:
    d = _obj(data, path)
    vertices = tuple(_point(v, f"{path}.vertices[{i}]") for i, v in enumerate(_list(d.get("vertices"), f"{path}.vertices")))
    if len(vertices) < 3:
        raise _fail(f"{path}.vertices", "at least 3 vertices required")
    labels_raw = _list(d.get("vertexLabels"), f"{path}.vertexLabels")
    if labels_raw and len(labels_raw) != len(vertices):
        raise _fail(f"{path}.vertexLabels", "length must match vertices")
    vertex_labels = tuple(_label(v, f"{path}.vertexLabels[{i}]") or "" for i, v in enumerate(labels_raw))

    marks = []
    for i, m in enumerate(_list(d.get("angleMarks"), f"{path}.angleMarks")):
        mp = f"{path}.angleMarks[{i}]"
        m = _obj(m, mp)
        idx = _num(m.get("vertexIndex"), f"{mp}.vertexIndex")
        if not idx.is_integer():
            raise _fail(f"{mp}.vertexIndex", "must be an integer")
        marks.append(
            PolygonAngleMark(
                vertex_index=int(idx),
                radius=_positive(m.get("radius"), f"{mp}.radius"),
                label=_label(m.get("label"), f"{mp}.label"),
                label_distance=_num(m.get("labelDistance", 0), f"{mp}.labelDistance"),
            )
        )

    sides: list[SideLength | None] = []
    sides_raw = _list(d.get("sideLengths"), f"{path}.sideLengths")
    if len(sides_raw) > len(vertices):
        raise _fail(f"{path}.sideLengths", "more entries than edges")
    for i, s in enumerate(sides_raw):
        sp = f"{path}.sideLengths[{i}]"
        if s is None:
            sides.append(None)
            continue
        s = _obj(s, sp)
        position = _str(s.get("position", "outside"), f"{sp}.position")
        if position not in SIDE_POSITIONS:
            raise _fail(f"{sp}.position", f"unknown position {position!r}")
        sides.append(
            SideLength(
                value=_str(s.get("value"), f"{sp}.value"),
                position=position,  # type: ignore[arg-type]
                offset=_num(s.get("offset"), f"{sp}.offset"),
            )
        )

    return Shape(
        vertices=vertices,
        vertex_labels=vertex_labels,
        label=_label(d.get("label"), f"{path}.label"),
        fill_color=_str(d.get("fillColor", "none"), f"{path}.fillColor"),
        stroke_color=_str(d.get("strokeColor", COLOR_BLACK), f"{path}.strokeColor"),
        angle_marks=tuple(marks),
        side_lengths=tuple(sides),
    )


def _transformation(data: Any, path: str) -> Transformation:
    d = _obj(data, path)
    kind = d.get("type")
    if kind == "translation":
        return Translation(vector=_point(d.get("vector"), f"{path}.vector"))
    if kind == "reflection":
        line = _obj(d.get("lineOfReflection"), f"{path}.lineOfReflection")
        lp = f"{path}.lineOfReflection"
        return Reflection(
            line_from=_point(line.get("from"), f"{lp}.from"),
            line_to=_point(line.get("to"), f"{lp}.to"),
            style=_style(line.get("style"), f"{lp}.style"),  # type: ignore[arg-type]
            color=_str(line.get("color", COLOR_BLACK), f"{lp}.color"),
        )
    if kind == "rotation":
        return Rotation(
            center=_point(d.get("centerOfRotation"), f"{path}.centerOfRotation"),
            angle_degrees=_num(d.get("angle"), f"{path}.angle"),
        )
    if kind == "dilation":
        return Dilation(
            center=_point(d.get("centerOfDilation"), f"{path}.centerOfDilation"),
            scale_factor=_num(d.get("scaleFactor"), f"{path}.scaleFactor"),
        )
    raise _fail(f"{path}.type", f"unknown transformation type {kind!r}")


def _transformation_diagram(d: dict) -> TransformationDiagram:
    return TransformationDiagram(
        width=_positive(d.get("width"), "width"),
        height=_positive(d.get("height"), "height"),
        pre_image=_shape(d.get("preImage"), "preImage"),
        transformation=_transformation(d.get("transformation"), "transformation"),
    )


# ----- triangle family -----


def _triangle_diagram(d: dict) -> TriangleDiagram:
    points = []
    for i, p in enumerate(_list(d.get("points"), "points")):
        pp = f"points[{i}]"
        p = _obj(p, pp)
        points.append(
            TrianglePoint(
                id=_str(p.get("id"), f"{pp}.id"),
                x=_num(p.get("x"), f"{pp}.x"),
                y=_num(p.get("y"), f"{pp}.y"),
                label=_label(p.get("label"), f"{pp}.label"),
            )
        )

    angles = []
    for i, a in enumerate(_list(d.get("angles"), "angles")):
        ap = f"angles[{i}]"
        a = _obj(a, ap)
        radius = a.get("radius")
        angles.append(
            TriangleAngleMark(
                point_on_first_ray=_str(a.get("pointOnFirstRay"), f"{ap}.pointOnFirstRay"),
                vertex=_str(a.get("vertex"), f"{ap}.vertex"),
                point_on_second_ray=_str(a.get("pointOnSecondRay"), f"{ap}.pointOnSecondRay"),
                label=_label(a.get("label"), f"{ap}.label"),
                color=_str(a.get("color", COLOR_BLACK), f"{ap}.color"),
                radius=None if radius is None else _positive(radius, f"{ap}.radius"),
                is_right_angle=_bool(a.get("isRightAngle"), f"{ap}.isRightAngle", False),
                show_arc=_bool(a.get("showArc"), f"{ap}.showArc", True),
                label_distance=_num(a.get("labelDistance", 0), f"{ap}.labelDistance"),
            )
        )

    sides = []
    for i, s in enumerate(_list(d.get("sides"), "sides")):
        sp = f"sides[{i}]"
        s = _obj(s, sp)
        sides.append(TriangleSide(a=_str(s.get("a"), f"{sp}.a"), b=_str(s.get("b"), f"{sp}.b"), label=_str(s.get("label"), f"{sp}.label")))

    lines = []
    for i, ln in enumerate(_list(d.get("internalLines"), "internalLines")):
        lp = f"internalLines[{i}]"
        ln = _obj(ln, lp)
        style = _style(ln.get("style"), f"{lp}.style")
        color = _str(ln.get("color", COLOR_BLACK), f"{lp}.color")
        if "points" in ln:
            ids = [_str(pid, f"{lp}.points[{k}]") for k, pid in enumerate(_list(ln["points"], f"{lp}.points"))]
            if not 2 <= len(ids) <= 3:
                raise _fail(f"{lp}.points", f"expected 2 or 3 point ids, got {len(ids)}")
        else:
            ids = [_str(ln.get("from"), f"{lp}.from"), _str(ln.get("to"), f"{lp}.to")]
        lines.extend(InternalLine.polyline(ids, style, color))  # type: ignore[arg-type]

    altitudes = []
    for i, alt in enumerate(_list(d.get("altitudes"), "altitudes")):
        hp = f"altitudes[{i}]"
        alt = _obj(alt, hp)
        side = _str(alt.get("toSide"), f"{hp}.toSide")
        if side not in ALTITUDE_SIDES:
            raise _fail(f"{hp}.toSide", f"expected one of {', '.join(ALTITUDE_SIDES)}, got {side!r}")
        style = _str(alt.get("style", "dashed"), f"{hp}.style")
        if style not in ALTITUDE_STYLES:
            raise _fail(f"{hp}.style", f"altitudes are dashed or dotted, got {style!r}")
        altitudes.append(
            Altitude(
                vertex=_str(alt.get("vertex"), f"{hp}.vertex"),
                to_side=side,  # type: ignore[arg-type]
                value=_value(alt.get("value"), f"{hp}.value"),
                style=style,  # type: ignore[arg-type]
                color=_str(alt.get("color", COLOR_BLACK), f"{hp}.color"),
            )
        )

    return TriangleDiagram(
        width=_positive(d.get("width"), "width"),
        height=_positive(d.get("height"), "height"),
        points=tuple(points),
        angles=tuple(angles),
        sides=tuple(sides),
        internal_lines=tuple(lines),
        altitudes=tuple(altitudes),
        y_axis_up=_bool(d.get("yAxisUp"), "yAxisUp", TRIANGLE_Y_AXIS_UP),
    )


def validate(data: Any) -> Diagram:
    """
    Build a diagram description from parsed JSON. Raises InvalidDiagramError.
    Point-count and id-reference problems of triangle diagrams are left to the
    renderer (fatal for the core triangle, skipped for annotations).
    """
    d = _obj(data, "$")
    kind = d.get("type")
    if kind == TRANSFORMATION_DIAGRAM:
        return _transformation_diagram(d)
    if kind == TRIANGLE_DIAGRAM:
        return _triangle_diagram(d)
    raise _fail("type", f"unknown diagram type {kind!r}")


def load_diagram(path: str | Path, repo_root: Path | None = None) -> Diagram:
    """Read a JSON description from disk and validate it."""
    p = Path(path)
    if not p.is_absolute() and repo_root is not None:
        p = repo_root / p
    p = p.resolve()
    if not p.exists():
        raise FileNotFoundError(f"Diagram file not found: {p}")
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise _fail(str(p), f"not valid JSON ({e})") from e
    return validate(data)
