# tests/test_placement.py
"""
Greedy label search: free anchors are accepted as-is, occupied anchors step
away, and every search terminates within its budget even when fully occluded.
"""

from __future__ import annotations

import pytest

from geolabel.core.collision import OccupiedGeometry
from geolabel.core.config import TANGENTIAL_MAX_ITER
from geolabel.core.placement import accept, place_shape_label, place_tangential, search, slide_horizontal
from geolabel.core.types import LabelRect


def _fully_occluded() -> OccupiedGeometry:
    occ = OccupiedGeometry()
    occ.record_rect(LabelRect(-10_000, -10_000, 20_000, 20_000))
    return occ


def test_search_accepts_free_start() -> None:
    p = search((5.0, 5.0), (1.0, 0.0), lambda x, y: True, max_iter=10)
    assert p.fits and p.iterations == 0
    assert (p.x, p.y) == (5.0, 5.0)


def test_search_steps_until_fit() -> None:
    p = search((0.0, 0.0), (2.0, 0.0), lambda x, y: x >= 7, max_iter=10)
    assert p.fits
    assert p.iterations == 4
    assert p.x == pytest.approx(8.0)


def test_search_stops_at_limit() -> None:
    p = search((0.0, 0.0), (3.0, 0.0), lambda x, y: False, max_iter=100, x_limits=(-5.0, 10.0))
    assert not p.fits
    assert p.x == 10.0
    assert p.iterations < 100


def test_tangential_free_anchor() -> None:
    occ = OccupiedGeometry()
    p = place_tangential(occ, (50.0, 50.0), (0.0, -1.0), 10.0, 8.0)
    assert p.fits and p.iterations == 0


def test_tangential_moves_off_segment() -> None:
    occ = OccupiedGeometry()
    occ.record_segment((50.0, 0.0), (50.0, 100.0))
    p = place_tangential(occ, (50.0, 50.0), (0.0, -1.0), 10.0, 8.0)
    assert p.fits
    assert p.iterations > 0
    assert abs(p.x - 50.0) > 5.0
    assert p.y == pytest.approx(50.0)


def test_tangential_terminates_when_fully_occluded() -> None:
    p = place_tangential(_fully_occluded(), (0.0, 0.0), (1.0, 0.0), 10.0, 10.0)
    assert not p.fits
    assert p.iterations == TANGENTIAL_MAX_ITER


def test_slide_horizontal_prefers_cheaper_side() -> None:
    p = slide_horizontal(lambda x, y: x >= 12, (0.0, 0.0), (-100.0, 100.0), step=4.0, max_iter=50)
    assert p.fits
    assert p.x == pytest.approx(12.0)


def test_shape_label_above_when_free() -> None:
    occ = OccupiedGeometry()
    occ.record_polygon([(100, 100), (200, 100), (200, 200), (100, 200)])
    p = place_shape_label(occ, (100, 100, 200, 200), 40.0, 14.0, 400.0)
    assert p.fits
    assert p.y < 100
    assert p.x == pytest.approx(150.0)


def test_shape_label_prefers_below() -> None:
    occ = OccupiedGeometry()
    p = place_shape_label(occ, (100, 100, 200, 200), 40.0, 14.0, 400.0, prefer_below=True)
    assert p.fits
    assert p.y > 200


def test_shape_label_terminates_when_fully_occluded() -> None:
    p = place_shape_label(_fully_occluded(), (100, 100, 200, 200), 40.0, 14.0, 400.0)
    assert not p.fits


def test_accept_records_rect() -> None:
    occ = OccupiedGeometry()
    p = place_tangential(occ, (30.0, 30.0), (1.0, 0.0), 10.0, 6.0)
    rect = accept(occ, p, 10.0, 6.0)
    assert occ.labels == (rect,)
    assert (rect.x + rect.width / 2.0, rect.y + rect.height / 2.0) == pytest.approx((30.0, 30.0))
    second = place_tangential(occ, (30.0, 30.0), (1.0, 0.0), 10.0, 6.0)
    assert second.iterations > 0
