# tests/test_geometry.py
"""
Deterministic tests for geometry helpers: centroid, bounds, unit vectors,
outward bisector (with the antiparallel fallback) and the largest angular gap.
"""

from __future__ import annotations

import math

import pytest

from geolabel.core.geometry import (
    centroid,
    direction_away,
    largest_gap_direction,
    norm,
    outward_bisector,
    perpendicular,
    points_bounds,
    unit,
)


def test_centroid_is_vertex_mean() -> None:
    assert centroid([(0, 0), (4, 0), (0, 3)]) == pytest.approx((4 / 3, 1.0))
    assert centroid([]) == (0.0, 0.0)


def test_points_bounds() -> None:
    assert points_bounds([(1, 2), (5, 2), (5, 6), (1, 6)]) == (1, 2, 5, 6)
    assert points_bounds([]) == (0.0, 0.0, 0.0, 0.0)


def test_unit_and_perpendicular() -> None:
    assert unit((3, 4)) == pytest.approx((0.6, 0.8))
    assert unit((0, 0)) == (0.0, 0.0)
    assert perpendicular((1, 0)) == (0, 1)


def test_outward_bisector_points_away_from_center() -> None:
    b = outward_bisector((0, 0), (10, 0), (0, 10), center=(3, 3))
    assert b == pytest.approx((-math.sqrt(0.5), -math.sqrt(0.5)))
    assert norm(b) == pytest.approx(1.0)


def test_outward_bisector_antiparallel_fallback() -> None:
    b = outward_bisector((0, 0), (-10, 0), (10, 0), center=(0, 5))
    assert b == pytest.approx((0.0, -1.0))


def test_direction_away() -> None:
    assert direction_away((10, 0), (0, 0)) == pytest.approx((1.0, 0.0))
    assert direction_away((1, 1), (1, 1)) == (0.0, -1.0)


def test_largest_gap_direction() -> None:
    d = largest_gap_direction([(1, 0), (0, 1)], fallback=(0, -1))
    assert d == pytest.approx((-math.sqrt(0.5), -math.sqrt(0.5)))
    one = largest_gap_direction([(1, 0)], fallback=(0, -1))
    assert one == pytest.approx((0.0, 1.0), abs=1e-12)
    assert largest_gap_direction([], fallback=(0, -1)) == (0, -1)
