# geolabel/core/layout.py
"""
Post-render layout audit. Rebuilds the occupied geometry of a render as
shapely geometries and counts labels that still touch drawn lines and label
pairs that overlap, i.e. where a placement search fell back to its best candidate.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from shapely.geometry import LineString, box
from shapely.ops import unary_union

from geolabel.core.collision import OccupiedGeometry
from geolabel.core.config import AUDIT_MIN_AREA
from geolabel.core.types import LabelRect


@dataclass
class LayoutSummary:
    """Summary of one render's label layout."""
    n_labels: int
    n_segments: int
    labels_on_segments: int
    overlapping_pairs: int
    overlap_area: float

    @property
    def clean(self) -> bool:
        return self.labels_on_segments == 0 and self.overlapping_pairs == 0

    def to_dict(self) -> dict:
        d = asdict(self)
        d["clean"] = self.clean
        return d


def _rect_geom(r: LabelRect):
    return box(r.x, r.y, r.x + r.width, r.y + r.height)


def summarize_layout(occupied: OccupiedGeometry, min_area: float = AUDIT_MIN_AREA) -> LayoutSummary:
    """
    Count labels crossing drawn segments (interior crossings only, edge
    contact is allowed) and label pairs overlapping by more than `min_area` px^2.
    """
    rects = [_rect_geom(r) for r in occupied.labels]
    lines = [LineString([s.a, s.b]) for s in occupied.segments if s.a != s.b]
    drawn = unary_union(lines) if lines else None

    on_segments = 0
    if drawn is not None and not drawn.is_empty:
        for rect in rects:
            inter = rect.intersection(drawn)
            if not inter.is_empty and inter.length > 0 and not rect.exterior.covers(inter):
                on_segments += 1

    pairs = 0
    total_area = 0.0
    for i in range(len(rects)):
        for j in range(i + 1, len(rects)):
            area = rects[i].intersection(rects[j]).area
            if area > min_area:
                pairs += 1
                total_area += area

    return LayoutSummary(
        n_labels=len(rects),
        n_segments=len(occupied.segments),
        labels_on_segments=on_segments,
        overlapping_pairs=pairs,
        overlap_area=round(total_area, 3),
    )
