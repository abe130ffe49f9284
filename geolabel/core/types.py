# geolabel/core/types.py
"""
Dataclasses for diagram descriptions, screen-space collision geometry,
placement results and render results.
Descriptions are immutable values; only OccupiedGeometry (collision.py) mutates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Sequence, Union

from geolabel.core.config import ARC_LABEL_DISTANCE, COLOR_BLACK, TRIANGLE_Y_AXIS_UP

if TYPE_CHECKING:
    from geolabel.core.canvas import Canvas
    from geolabel.core.collision import OccupiedGeometry


XY = tuple[float, float]
LineStyle = Literal["solid", "dashed", "dotted"]
SidePosition = Literal["inside", "outside"]
AltitudeSide = Literal["AB", "BC", "CA"]

LINE_STYLES: tuple[str, ...] = ("solid", "dashed", "dotted")
SIDE_POSITIONS: tuple[str, ...] = ("inside", "outside")
ALTITUDE_SIDES: tuple[str, ...] = ("AB", "BC", "CA")
ALTITUDE_STYLES: tuple[str, ...] = ("dashed", "dotted")


@dataclass(frozen=True)
class Point:
    """A position in data space (unscaled units)."""
    x: float
    y: float

    def as_xy(self) -> XY:
        return (self.x, self.y)


# ----- Transformation diagram -----


@dataclass(frozen=True)
class SideLength:
    """Edge label. Slot i labels the edge from vertex i to vertex i+1."""
    value: str
    position: SidePosition
    offset: float


@dataclass(frozen=True)
class PolygonAngleMark:
    """Angle arc at a polygon vertex; neighbors are taken from the polygon's own edges."""
    vertex_index: int
    radius: float
    label: str | None
    label_distance: float


@dataclass(frozen=True)
class Shape:
    """Polygon with >= 3 vertices plus labels, style and annotations."""
    vertices: tuple[Point, ...]
    vertex_labels: tuple[str, ...]
    label: str | None
    fill_color: str
    stroke_color: str
    angle_marks: tuple[PolygonAngleMark, ...] = ()
    side_lengths: tuple[SideLength | None, ...] = ()


@dataclass(frozen=True)
class Translation:
    vector: Point
    type: Literal["translation"] = "translation"


@dataclass(frozen=True)
class Reflection:
    line_from: Point
    line_to: Point
    style: LineStyle = "solid"
    color: str = COLOR_BLACK
    type: Literal["reflection"] = "reflection"


@dataclass(frozen=True)
class Rotation:
    center: Point
    angle_degrees: float
    type: Literal["rotation"] = "rotation"


@dataclass(frozen=True)
class Dilation:
    center: Point
    scale_factor: float
    type: Literal["dilation"] = "dilation"


Transformation = Union[Translation, Reflection, Rotation, Dilation]


@dataclass(frozen=True)
class TransformationDiagram:
    width: float
    height: float
    pre_image: Shape
    transformation: Transformation


# ----- Triangle diagram -----


@dataclass(frozen=True)
class TrianglePoint:
    """Point with a stable id and optional display label. The first three points are the core triangle."""
    id: str
    x: float
    y: float
    label: str | None = None


@dataclass(frozen=True)
class TriangleAngleMark:
    """Angle at `vertex` between rays toward two other points, referenced by id."""
    point_on_first_ray: str
    vertex: str
    point_on_second_ray: str
    label: str | None = None
    color: str = COLOR_BLACK
    radius: float | None = None
    is_right_angle: bool = False
    show_arc: bool = True
    label_distance: float = ARC_LABEL_DISTANCE


@dataclass(frozen=True)
class TriangleSide:
    """Label for the segment between two points, referenced by id."""
    a: str
    b: str
    label: str


@dataclass(frozen=True)
class InternalLine:
    """Altitude, median, bisector or other auxiliary segment between two point ids."""
    from_id: str
    to_id: str
    style: LineStyle = "solid"
    color: str = COLOR_BLACK

    @classmethod
    def polyline(cls, ids: Sequence[str], style: LineStyle = "solid", color: str = COLOR_BLACK) -> tuple[InternalLine, ...]:
        """Consecutive pieces of an open path through `ids` (A-M-B gives A-M and M-B)."""
        return tuple(cls(a, b, style, color) for a, b in zip(ids, ids[1:]))


@dataclass(frozen=True)
class Altitude:
    """Height from `vertex` dropped perpendicular onto the line of a core side."""
    vertex: str
    to_side: AltitudeSide
    value: str | None = None
    style: LineStyle = "dashed"
    color: str = COLOR_BLACK


@dataclass(frozen=True)
class TriangleDiagram:
    width: float
    height: float
    points: tuple[TrianglePoint, ...]
    angles: tuple[TriangleAngleMark, ...] = ()
    sides: tuple[TriangleSide, ...] = ()
    internal_lines: tuple[InternalLine, ...] = ()
    altitudes: tuple[Altitude, ...] = ()
    y_axis_up: bool = TRIANGLE_Y_AXIS_UP


# ----- Screen-space geometry -----


@dataclass(frozen=True)
class Segment:
    """Drawn segment in screen space."""
    a: XY
    b: XY


@dataclass(frozen=True)
class LabelRect:
    """Axis-aligned label box in screen space; (x, y) is the top-left corner."""
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def centered(cls, cx: float, cy: float, width: float, height: float) -> LabelRect:
        return cls(cx - width / 2.0, cy - height / 2.0, width, height)


@dataclass(frozen=True)
class Placement:
    """Accepted label center and how many steps the search took to get there."""
    x: float
    y: float
    iterations: int
    fits: bool


@dataclass
class RenderResult:
    """Finalized markup plus the state it was built from."""
    svg: str
    canvas: Canvas
    occupied: OccupiedGeometry
    image_vertices: tuple[Point, ...] = ()
