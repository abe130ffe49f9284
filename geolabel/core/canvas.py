# geolabel/core/canvas.py
"""
Drawing surface: records primitives in screen pixels, tracks the extents of
everything drawn, and serializes to a self-contained SVG with ElementTree.
The recorded commands are also replayed by render.py for PNG previews.
"""

from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from geolabel.core.config import COLOR_TEXT, FONT_FAMILY, LINE_HEIGHT, PADDING_PX
from geolabel.core.text_metrics import estimate_text_box, wrap_text
from geolabel.core.types import XY

SVG_NS = "http://www.w3.org/2000/svg"
ARC_SAMPLES = 24


def _fmt(v: float) -> str:
    s = f"{v:.2f}".rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s


def arc_points(p0: XY, p1: XY, radius: float, large_arc: int, sweep: int, n: int = ARC_SAMPLES) -> list[XY]:
    """
    Polyline samples of the circular SVG arc p0 -> p1 (endpoint form, rx = ry).
    The radius is grown to half the chord when too small, as SVG renderers do.
    """
    hx = (p0[0] - p1[0]) / 2.0
    hy = (p0[1] - p1[1]) / 2.0
    d2 = hx * hx + hy * hy
    if d2 == 0.0 or radius <= 0.0:
        return [p0, p1]
    r = max(radius, math.sqrt(d2))
    sign = -1.0 if large_arc == sweep else 1.0
    coef = sign * math.sqrt(max(0.0, (r * r - d2) / d2))
    cx = coef * hy + (p0[0] + p1[0]) / 2.0
    cy = -coef * hx + (p0[1] + p1[1]) / 2.0
    t0 = math.atan2(p0[1] - cy, p0[0] - cx)
    t1 = math.atan2(p1[1] - cy, p1[0] - cx)
    dt = t1 - t0
    if sweep and dt < 0:
        dt += 2.0 * math.pi
    elif not sweep and dt > 0:
        dt -= 2.0 * math.pi
    return [(cx + r * math.cos(t0 + dt * i / n), cy + r * math.sin(t0 + dt * i / n)) for i in range(n + 1)]


class PathBuilder:
    """SVG path data in screen pixels, with its own sampled outline for extents."""

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._points: list[XY] = []
        self._subpaths: list[list[XY]] = []
        self._current: XY | None = None
        self._start: XY | None = None
        self.closed = False

    def move_to(self, x: float, y: float) -> PathBuilder:
        self._parts.append(f"M {_fmt(x)} {_fmt(y)}")
        self._current = self._start = (x, y)
        self._subpaths.append([(x, y)])
        self._points.append((x, y))
        return self

    def line_to(self, x: float, y: float) -> PathBuilder:
        if self._current is None:
            return self.move_to(x, y)
        self._parts.append(f"L {_fmt(x)} {_fmt(y)}")
        self._current = (x, y)
        self._subpaths[-1].append((x, y))
        self._points.append((x, y))
        return self

    def arc_to(self, radius: float, large_arc: int, sweep: int, x: float, y: float) -> PathBuilder:
        if self._current is None:
            return self.move_to(x, y)
        self._parts.append(f"A {_fmt(radius)} {_fmt(radius)} 0 {int(large_arc)} {int(sweep)} {_fmt(x)} {_fmt(y)}")
        samples = arc_points(self._current, (x, y), radius, large_arc, sweep)[1:]
        self._subpaths[-1].extend(samples)
        self._points.extend(samples)
        self._current = (x, y)
        return self

    def close(self) -> PathBuilder:
        self._parts.append("Z")
        if self._start is not None and self._subpaths:
            self._subpaths[-1].append(self._start)
        self._current = self._start
        self.closed = True
        return self

    @property
    def d(self) -> str:
        return " ".join(self._parts)

    @property
    def points(self) -> list[XY]:
        return list(self._points)

    @property
    def subpaths(self) -> list[list[XY]]:
        return [list(s) for s in self._subpaths]


@dataclass
class DrawCommand:
    """One recorded primitive: SVG tag, its attributes, and sampled screen geometry."""
    tag: str
    attrs: dict[str, str]
    points: list[XY] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)
    subpaths: list[list[XY]] = field(default_factory=list)
    line_height: float = LINE_HEIGHT


@dataclass(frozen=True)
class FinalizedSvg:
    vb_min_x: int
    vb_min_y: int
    width: int
    height: int


def _stroke_attrs(stroke: str | None, stroke_width: float | None, dash: str | None) -> dict[str, str]:
    attrs: dict[str, str] = {}
    if stroke:
        attrs["stroke"] = stroke
    if stroke_width is not None:
        attrs["stroke-width"] = _fmt(stroke_width)
    if dash:
        attrs["stroke-dasharray"] = dash
    return attrs


class Canvas:
    """Screen-pixel drawing surface. One per render."""

    def __init__(self) -> None:
        self.commands: list[DrawCommand] = []
        self._min_x = math.inf
        self._min_y = math.inf
        self._max_x = -math.inf
        self._max_y = -math.inf

    # ----- extents -----

    def _update_extents(self, min_x: float, max_x: float, min_y: float, max_y: float) -> None:
        self._min_x = min(self._min_x, min_x)
        self._max_x = max(self._max_x, max_x)
        self._min_y = min(self._min_y, min_y)
        self._max_y = max(self._max_y, max_y)

    def _include_points(self, pts: list[XY], grow: float = 0.0) -> None:
        if not pts:
            return
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        self._update_extents(min(xs) - grow, max(xs) + grow, min(ys) - grow, max(ys) + grow)

    @property
    def extents(self) -> tuple[float, float, float, float] | None:
        """(min_x, min_y, max_x, max_y) of all content, or None when nothing was drawn."""
        if self._min_x == math.inf:
            return None
        return (self._min_x, self._min_y, self._max_x, self._max_y)

    # ----- primitives -----

    def draw_line(
        self,
        a: XY,
        b: XY,
        stroke: str,
        stroke_width: float,
        dash: str | None = None,
        opacity: float | None = None,
    ) -> None:
        attrs = {"x1": _fmt(a[0]), "y1": _fmt(a[1]), "x2": _fmt(b[0]), "y2": _fmt(b[1])}
        attrs.update(_stroke_attrs(stroke, stroke_width, dash))
        if opacity is not None:
            attrs["opacity"] = _fmt(opacity)
        self.commands.append(DrawCommand("line", attrs, points=[a, b]))
        self._include_points([a, b], grow=stroke_width / 2.0)

    def draw_polygon(
        self,
        pts: list[XY],
        fill: str,
        stroke: str,
        stroke_width: float,
        dash: str | None = None,
        fill_opacity: float | None = None,
    ) -> None:
        attrs = {"points": " ".join(f"{_fmt(x)},{_fmt(y)}" for x, y in pts), "fill": fill}
        attrs.update(_stroke_attrs(stroke, stroke_width, dash))
        if fill_opacity is not None:
            attrs["fill-opacity"] = _fmt(fill_opacity)
        self.commands.append(DrawCommand("polygon", attrs, points=list(pts)))
        self._include_points(list(pts), grow=stroke_width / 2.0)

    def draw_circle(
        self,
        center: XY,
        radius: float,
        fill: str,
        stroke: str | None = None,
        stroke_width: float | None = None,
        fill_opacity: float | None = None,
    ) -> None:
        attrs = {"cx": _fmt(center[0]), "cy": _fmt(center[1]), "r": _fmt(radius), "fill": fill}
        attrs.update(_stroke_attrs(stroke, stroke_width, None))
        if fill_opacity is not None:
            attrs["fill-opacity"] = _fmt(fill_opacity)
        self.commands.append(DrawCommand("circle", attrs, points=[center]))
        grow = radius + (stroke_width or 0.0) / 2.0
        self._include_points([center], grow=grow)

    def draw_path(
        self,
        path: PathBuilder,
        stroke: str,
        stroke_width: float,
        fill: str = "none",
        dash: str | None = None,
    ) -> None:
        attrs = {"d": path.d, "fill": fill}
        attrs.update(_stroke_attrs(stroke, stroke_width, dash))
        self.commands.append(DrawCommand("path", attrs, points=path.points, subpaths=path.subpaths))
        self._include_points(path.points, grow=stroke_width / 2.0)

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        font_px: float,
        fill: str = COLOR_TEXT,
        anchor: str = "middle",
        baseline: str = "middle",
        font_weight: str | None = None,
        max_width: float | None = None,
        line_height: float = LINE_HEIGHT,
    ) -> None:
        """Text at (x, y); anchor/baseline follow SVG text-anchor and dominant-baseline."""
        limit = max_width if max_width is not None else math.inf
        lines = wrap_text(text, limit, font_px)
        width, height = estimate_text_box(text, limit, font_px, line_height)

        min_x = x
        if anchor == "middle":
            min_x -= width / 2.0
        elif anchor == "end":
            min_x -= width
        min_y = y
        if baseline == "middle":
            min_y -= height / 2.0
        elif baseline in ("baseline", "alphabetic"):
            min_y -= font_px
        self._update_extents(min_x, min_x + width, min_y, min_y + height)

        attrs = {"x": _fmt(x), "y": _fmt(y), "font-size": _fmt(font_px), "fill": fill}
        if anchor != "start":
            attrs["text-anchor"] = anchor
        if baseline != "baseline":
            attrs["dominant-baseline"] = baseline
        if font_weight:
            attrs["font-weight"] = font_weight
        self.commands.append(DrawCommand("text", attrs, points=[(x, y)], lines=lines, line_height=line_height))

    # ----- output -----

    def finalize(self, padding: float = PADDING_PX) -> FinalizedSvg:
        """View box enclosing all content plus `padding` on every side."""
        ext = self.extents
        if ext is None:
            return FinalizedSvg(0, 0, int(math.ceil(2 * padding)), int(math.ceil(2 * padding)))
        min_x, min_y, max_x, max_y = ext
        return FinalizedSvg(
            vb_min_x=int(math.floor(min_x - padding)),
            vb_min_y=int(math.floor(min_y - padding)),
            width=int(math.ceil(max_x - min_x + 2 * padding)),
            height=int(math.ceil(max_y - min_y + 2 * padding)),
        )

    def to_svg(self, padding: float = PADDING_PX) -> str:
        fin = self.finalize(padding)
        root = ET.Element(
            "svg",
            {
                "xmlns": SVG_NS,
                "width": str(fin.width),
                "height": str(fin.height),
                "viewBox": f"{fin.vb_min_x} {fin.vb_min_y} {fin.width} {fin.height}",
                "font-family": FONT_FAMILY,
            },
        )
        for cmd in self.commands:
            el = ET.SubElement(root, cmd.tag, cmd.attrs)
            if cmd.tag != "text":
                continue
            if len(cmd.lines) <= 1:
                el.text = cmd.lines[0] if cmd.lines else ""
                continue
            for i, line in enumerate(cmd.lines):
                tspan_attrs = {"dy": "0" if i == 0 else f"{cmd.line_height}em"}
                if cmd.attrs.get("text-anchor"):
                    tspan_attrs["x"] = cmd.attrs["x"]
                tspan = ET.SubElement(el, "tspan", tspan_attrs)
                tspan.text = line
        return ET.tostring(root, encoding="unicode")
