# geolabel/core/render.py
"""
Matplotlib PNG preview of a recorded Canvas. The SVG stays the real output;
the preview replays the same commands in screen pixels (y down).
"""

from __future__ import annotations

import warnings
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.colors import is_color_like
from matplotlib.patches import Circle, Polygon

from geolabel.core.canvas import Canvas, DrawCommand
from geolabel.core.config import COLOR_BLACK, PADDING_PX

PX_TO_PT = 72.0 / 100.0

_HALIGN = {"start": "left", "middle": "center", "end": "right"}
_VALIGN = {"middle": "center", "baseline": "baseline", "alphabetic": "baseline", "hanging": "top"}


def _color(value: str | None, default: str = COLOR_BLACK) -> str:
    if value is None:
        return default
    if value == "none":
        return "none"
    return value if is_color_like(value) else default


def _linestyle(dash: str | None):
    if not dash:
        return "solid"
    parts = [float(v) for v in dash.replace(",", " ").split()]
    return (0, tuple(parts))


def _stroke_kwargs(cmd: DrawCommand) -> dict:
    a = cmd.attrs
    return {
        "color": _color(a.get("stroke")),
        "linewidth": float(a.get("stroke-width", "1")) * PX_TO_PT,
        "linestyle": _linestyle(a.get("stroke-dasharray")),
    }


def _draw_command(ax: plt.Axes, cmd: DrawCommand, zorder: int) -> None:
    a = cmd.attrs
    if cmd.tag == "line":
        (x1, y1), (x2, y2) = cmd.points
        ax.plot([x1, x2], [y1, y2], zorder=zorder, **_stroke_kwargs(cmd))
    elif cmd.tag == "polygon":
        kw = _stroke_kwargs(cmd)
        ax.add_patch(
            Polygon(
                cmd.points,
                closed=True,
                facecolor=_color(a.get("fill"), "none"),
                edgecolor=kw["color"],
                linewidth=kw["linewidth"],
                linestyle=kw["linestyle"],
                alpha=float(a["fill-opacity"]) if "fill-opacity" in a else None,
                zorder=zorder,
            )
        )
    elif cmd.tag == "circle":
        ax.add_patch(
            Circle(
                cmd.points[0],
                float(a["r"]),
                facecolor=_color(a.get("fill")),
                edgecolor=_color(a.get("stroke"), "none"),
                linewidth=float(a.get("stroke-width", "0")) * PX_TO_PT,
                alpha=float(a["fill-opacity"]) if "fill-opacity" in a else None,
                zorder=zorder,
            )
        )
    elif cmd.tag == "path":
        kw = _stroke_kwargs(cmd)
        for sub in cmd.subpaths:
            ax.plot([p[0] for p in sub], [p[1] for p in sub], zorder=zorder, **kw)
    elif cmd.tag == "text":
        x, y = cmd.points[0]
        ax.text(
            x,
            y,
            "\n".join(cmd.lines),
            fontsize=float(a["font-size"]) * PX_TO_PT,
            fontweight="bold" if a.get("font-weight") in ("bold", "700") else "normal",
            color=_color(a.get("fill")),
            ha=_HALIGN.get(a.get("text-anchor", "start"), "left"),
            va=_VALIGN.get(a.get("dominant-baseline", "baseline"), "baseline"),
            linespacing=cmd.line_height,
            zorder=zorder,
        )


def render_canvas_png(canvas: Canvas, output_path: str | Path, padding: float = PADDING_PX, scale: int = 1) -> None:
    """Write a PNG of the canvas at its finalized view box. scale multiplies resolution."""
    fin = canvas.finalize(padding)
    w, h = max(1, fin.width), max(1, fin.height)
    fig = plt.figure(figsize=(w / 100.0, h / 100.0), dpi=100 * scale)
    ax = fig.add_axes([0, 0, 1, 1])  # full-canvas axes
    ax.axis("off")
    for i, cmd in enumerate(canvas.commands):
        _draw_command(ax, cmd, zorder=i + 1)
    ax.set_xlim(fin.vb_min_x, fin.vb_min_x + w)
    # screen y grows downward
    ax.set_ylim(fin.vb_min_y + h, fin.vb_min_y)
    ax.set_aspect("equal", adjustable="box")
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message=".*constrained_layout.*", category=UserWarning)
        fig.savefig(output_path, dpi=100 * scale, facecolor="white")
    plt.close(fig)
