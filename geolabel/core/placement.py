# geolabel/core/placement.py
"""
Local greedy label search against OccupiedGeometry.
Vertex and angle labels step tangentially around their anchor; shape labels
slide horizontally above or below the shape. Every search is bounded by a
fixed iteration budget and falls back to its last candidate when exhausted.
"""

from __future__ import annotations

import logging
from typing import Callable

from geolabel.core.collision import OccupiedGeometry
from geolabel.core.config import (
    HORIZONTAL_MAX_ITER,
    HORIZONTAL_STEP,
    LABEL_EDGE_PAD,
    LABEL_SEPARATION,
    LAYOUT_DEBUG,
    PADDING_PX,
    SHAPE_LABEL_EDGE_PAD_BELOW,
    SHAPE_LABEL_MARGIN_ABOVE,
    SHAPE_LABEL_MARGIN_BELOW,
    TANGENTIAL_MAX_ITER,
    TANGENTIAL_STEP,
)
from geolabel.core.geometry import perpendicular, unit
from geolabel.core.types import XY, LabelRect, Placement

logger = logging.getLogger(__name__)

FitTest = Callable[[float, float], bool]


def search(
    start: XY,
    step: XY,
    fits: FitTest,
    max_iter: int,
    x_limits: tuple[float, float] | None = None,
) -> Placement:
    """
    Move from `start` by `step` until `fits(x, y)` holds or `max_iter` steps
    are spent. With `x_limits`, a step that leaves [lo, hi] is clamped to the
    limit and the search stops there.
    """
    x, y = start
    it = 0
    while not fits(x, y) and it < max_iter:
        x += step[0]
        y += step[1]
        if x_limits is not None:
            lo, hi = x_limits
            if x < lo:
                x = lo
                break
            if x > hi:
                x = hi
                break
        it += 1
    ok = fits(x, y)
    if LAYOUT_DEBUG:
        logger.debug("search start=%s step=%s -> (%.2f, %.2f) it=%d fits=%s", start, step, x, y, it, ok)
    return Placement(x=x, y=y, iterations=it, fits=ok)


def place_tangential(
    occupied: OccupiedGeometry,
    anchor: XY,
    radial: XY,
    width: float,
    height: float,
    step: float = TANGENTIAL_STEP,
    max_iter: int = TANGENTIAL_MAX_ITER,
    pad: float = LABEL_EDGE_PAD,
) -> Placement:
    """
    Search both directions perpendicular to `radial` from `anchor` and keep the
    one that needed fewer steps (ties go to the first direction).
    """
    t = perpendicular(unit(radial))

    def fits(x: float, y: float) -> bool:
        return occupied.is_free(LabelRect.centered(x, y, width, height), pad=pad)

    forward = search(anchor, (t[0] * step, t[1] * step), fits, max_iter)
    backward = search(anchor, (-t[0] * step, -t[1] * step), fits, max_iter)
    chosen = backward if backward.iterations < forward.iterations else forward
    if not chosen.fits:
        logger.debug("tangential search exhausted at anchor (%.1f, %.1f); using best candidate", *anchor)
    return chosen


def slide_horizontal(
    fits: FitTest,
    start: XY,
    x_limits: tuple[float, float],
    step: float = HORIZONTAL_STEP,
    max_iter: int = HORIZONTAL_MAX_ITER,
) -> Placement:
    """Slide left and right from `start`; keep the cheaper side (ties go left)."""
    left = search(start, (-step, 0.0), fits, max_iter, x_limits=x_limits)
    right = search(start, (step, 0.0), fits, max_iter, x_limits=x_limits)
    return left if left.iterations <= right.iterations else right


def place_shape_label(
    occupied: OccupiedGeometry,
    shape_bounds: tuple[float, float, float, float],
    width: float,
    height: float,
    canvas_width: float,
    prefer_below: bool = False,
) -> Placement:
    """
    Place a whole-shape label centered above or below the shape's screen bbox.
    The preferred side wins when it fits, then the other side; if neither fits
    the side with fewer slide steps is used (ties go to the preferred side).
    """
    minx, miny, maxx, maxy = shape_bounds
    half_w = width / 2.0
    half_h = height / 2.0
    margin = SHAPE_LABEL_MARGIN_BELOW if prefer_below else SHAPE_LABEL_MARGIN_ABOVE
    pad = SHAPE_LABEL_EDGE_PAD_BELOW if prefer_below else LABEL_EDGE_PAD

    center_x = (minx + maxx) / 2.0
    above_y = max(PADDING_PX + half_h, miny - margin - half_h)
    below_y = maxy + margin + half_h

    def fits(x: float, y: float) -> bool:
        return occupied.is_free(LabelRect.centered(x, y, width, height), pad=pad, grow=LABEL_SEPARATION)

    limits = (PADDING_PX + half_w, canvas_width - PADDING_PX - half_w)
    above = slide_horizontal(fits, (center_x, above_y), limits)
    below = slide_horizontal(fits, (center_x, below_y), limits)

    primary, secondary = (below, above) if prefer_below else (above, below)
    if primary.fits:
        return primary
    if secondary.fits:
        return secondary
    logger.debug("shape label search exhausted on both sides; using cheaper side")
    return primary if primary.iterations <= secondary.iterations else secondary


def accept(occupied: OccupiedGeometry, placement: Placement, width: float, height: float) -> LabelRect:
    """Record the accepted label box so later placements avoid it."""
    rect = LabelRect.centered(placement.x, placement.y, width, height)
    occupied.record_rect(rect)
    return rect
