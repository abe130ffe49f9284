# geolabel/core/config.py
"""
Central configuration for diagram rendering and label placement.
All tunable values live here; no magic numbers in other modules.
Units are screen pixels unless stated otherwise.
"""

from __future__ import annotations

import os

# ----- Paths (repo-relative) -----
REPORTS_DIR: str = "reports"

# ----- Canvas -----
PADDING_PX: float = 20.0
"""Base padding around drawn content; also the finalize() margin of the canvas."""

TRANSFORMATION_PADDING_PX: float = PADDING_PX * 2
"""Viewport padding for transformation diagrams (room for aids and labels)."""

TRIANGLE_PADDING_PX: float = PADDING_PX
"""Viewport padding for triangle diagrams."""

DEGENERATE_EXTENT: float = 1e-9
"""Bounding box extent at or below which an axis scale defaults to 1."""

MIN_SCALE: float = 1e-9
"""Lower bound for the uniform viewport scale."""

# ----- Y convention per diagram family -----
TRANSFORMATION_Y_AXIS_UP: bool = True
"""Transformation diagrams use Cartesian data: data up maps to smaller screen y."""

TRIANGLE_Y_AXIS_UP: bool = False
"""Triangle diagrams are laid out in screen-like coordinates by default."""

# ----- Typography -----
FONT_FAMILY: str = "sans-serif"
"""Font family written to the SVG root."""

MEASURE_FONT_FAMILY: str = "DejaVu Sans"
"""Font used by Pillow to estimate text boxes."""

FONT_SIZE_MEDIUM: float = 14.0
FONT_SIZE_LARGE: float = 16.0
LINE_HEIGHT: float = 1.2
"""Line height multiplier for text box estimation."""

ANGLE_LABEL_FONT_PX: float = 13.0
SIDE_LABEL_FONT_PX: float = 13.0
FONT_WEIGHT_BOLD: str = "700"

# ----- Colors -----
COLOR_TEXT: str = "#333333"
COLOR_BLACK: str = "#000000"
COLOR_WHITE: str = "#ffffff"
COLOR_GRID_MINOR: str = "#cccccc"
COLOR_HIGHLIGHT: str = "#4472c4"
IMAGE_STROKE_COLOR: str = "#1fab54"
"""Stroke color of the transformed image polygon."""

# ----- Strokes and dashes -----
STROKE_THIN: float = 1.0
STROKE_BASE: float = 1.5
STROKE_THICK: float = 2.0
PREIMAGE_STROKE_WIDTH: float = 2.0
IMAGE_STROKE_WIDTH: float = 2.5
IMAGE_DASH: str = "4 4"

CORRESPONDENCE_DOT_RADIUS: float = 2.0
CORRESPONDENCE_IMAGE_DOT_RADIUS: float = 2.5
CORRESPONDENCE_DOT_OPACITY: float = 0.6
"""Fill opacity of the pre-image dots drawn for a dilation."""

LINE_DASH: dict[str, str | None] = {
    "solid": None,
    "dashed": "8 6",
    "dotted": "2 4",
}
"""Dash pattern per line style for transformation aids."""

INTERNAL_LINE_DASH: dict[str, str | None] = {
    "solid": None,
    "dashed": "4 3",
    "dotted": "2 4",
}
"""Dash pattern per line style for triangle internal lines."""

# ----- Points -----
VERTEX_DOT_RADIUS: float = 4.0
TRIANGLE_DOT_RADIUS: float = 5.0
CENTER_POINT_LABEL: str = "P"
CENTER_POINT_LABEL_RISE: float = 12.0
"""Center point label baseline sits this far above the point."""

PLACEHOLDER_LABEL: str = "•"
"""Vertex label treated as an empty slot."""

PRIME: str = "′"
"""Suffix appended to pre-image labels to name the image."""

# ----- Vertex labels (tangential stepping) -----
VERTEX_LABEL_OFFSET: float = 16.0
"""Base distance from the vertex along the outward bisector."""

TANGENTIAL_STEP: float = 3.0
TANGENTIAL_MAX_ITER: int = 80
LABEL_EDGE_PAD: float = 1.0
"""Padding of a label box when testing it against drawn segments."""

BISECTOR_EPS: float = 1e-9
"""Bisector magnitude below which the perpendicular fallback is used."""

# ----- Dilation label nudge -----
DILATION_NEAR_IDENTITY: float = 0.05
DILATION_NUDGE_PX: float = 14.0
COINCIDENT_NUDGE_PX: float = 16.0
COINCIDENT_EPS: float = 1e-9

# ----- Shape labels (horizontal sliding) -----
SHAPE_LABEL_MARGIN_ABOVE: float = 24.0
SHAPE_LABEL_MARGIN_BELOW: float = 28.0
SHAPE_LABEL_EDGE_PAD_BELOW: float = 2.0
HORIZONTAL_STEP: float = 4.0
HORIZONTAL_MAX_ITER: int = 120
LABEL_SEPARATION: float = 10.0
"""Inflation applied to placed label rects when placing shape labels."""

# ----- Side labels -----
SIDE_LABEL_OFFSET: float = 20.0
"""Triangle side labels sit this far outside the edge midpoint."""

ALTITUDE_LABEL_OFFSET: float = 14.0
"""Altitude value labels start this far off the altitude midpoint, along its normal."""

ZERO_LENGTH_EPS: float = 1e-9

# ----- Angle arcs -----
ARC_STROKE_WIDTH: float = 1.5
ARC_BASE_RADIUS: float = 24.0
"""Default screen radius of a triangle angle arc before scaling."""

ARC_RADIUS_MIN_MULT: float = 1.0
ARC_RADIUS_MAX_MULT: float = 2.5
ARC_RADIUS_LOG_GAIN: float = 0.5
"""mult = 1 - gain * ln(angle / pi), clamped to [MIN_MULT, MAX_MULT]."""

ARC_LABEL_CLEARANCE: float = 10.0
"""Gap between the arc and the label's near edge."""

ARC_LABEL_DISTANCE: float = 0.0
"""Default requested label distance for triangle angle marks."""

# ----- Right angles -----
RIGHT_ANGLE_MARKER_SIZE: float = 14.0
RIGHT_ANGLE_HELPER_LENGTH: float = 14.0
"""Length of a dashed helper ray beyond the marker corner."""

RIGHT_ANGLE_HELPER_DASH: str = "4 3"
COLINEAR_DOT_THRESHOLD: float = 0.995
"""Unit-vector dot product above which two directions count as the same ray."""

# ----- Collision primitives -----
ORIENT_EPS: float = 1e-9
"""Cross products within this band count as collinear (no intersection)."""

AUDIT_MIN_AREA: float = 0.5
"""Overlap area (px^2) above which the layout audit reports a label pair."""

# ----- Debug flags -----
LAYOUT_DEBUG: bool = os.environ.get("LAYOUT_DEBUG", "").lower() in ("1", "true", "yes")
"""Log every search step. Set env LAYOUT_DEBUG=1 to enable."""
