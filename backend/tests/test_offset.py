"""Tests for per-edge setback offsetting."""

import math

import pytest
from shapely.geometry import Polygon

from lotfit.core.geometry.errors import DegenerateGeometry, InvalidGeometry
from lotfit.core.geometry.offset import (
    EDGE_ROLES,
    SetbackSpec,
    inset,
    inward_sign,
    intersect_lines,
    signed_area,
)


def _line_distance(p, a, b):
    """Distance from p to the infinite line through a and b."""
    (px, py), (ax, ay), (bx, by) = p, a, b
    cross = (bx - ax) * (py - ay) - (by - ay) * (px - ax)
    return abs(cross) / math.hypot(bx - ax, by - ay)


TRAPEZOID = [(0, 0), (20, 0), (15, 10), (5, 10), (0, 0)]


class TestWinding:
    def test_ccw_area_is_positive(self, square_ring):
        assert signed_area(square_ring) == pytest.approx(100)

    def test_cw_area_is_negative(self, square_ring):
        assert signed_area(list(reversed(square_ring))) == pytest.approx(-100)

    def test_inward_sign(self, square_ring):
        assert inward_sign(square_ring) == -1
        assert inward_sign(list(reversed(square_ring))) == 1


class TestIntersectLines:
    def test_perpendicular(self):
        pt = intersect_lines((0, 2), (10, 2), (9, 0), (9, 10))
        assert pt == pytest.approx((9, 2))

    def test_intersection_beyond_segments(self):
        pt = intersect_lines((0, 0), (1, 0), (5, 5), (5, 6))
        assert pt == pytest.approx((5, 0))

    def test_parallel_returns_end_of_first_line(self):
        pt = intersect_lines((0, 0), (10, 0), (10, 0), (20, 0))
        assert pt == (10, 0)


class TestSetbackSpec:
    def test_edge_order(self):
        spec = SetbackSpec(front=4, side=3, rear=2)
        assert spec.for_edges() == (4, 3, 3, 2)
        assert EDGE_ROLES == ("front", "side", "side", "rear")

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            SetbackSpec(front=-1)

    def test_nan_rejected(self):
        with pytest.raises(ValueError):
            SetbackSpec(rear=float("nan"))


class TestInset:
    def test_square_lot(self, square_ring):
        """Front 2, sides 1, rear 1 on a 10 m square."""
        env = inset(square_ring, SetbackSpec(front=2, side=1, rear=1))
        coords = list(env.exterior.coords)
        expected = [(1, 2), (9, 2), (9, 9), (1, 9), (1, 2)]
        for got, want in zip(coords, expected):
            assert got == pytest.approx(want)
        assert env.area == pytest.approx(56)

    def test_clockwise_ring(self, square_ring):
        """Edge0 of the reversed ring is the left side, so the front moves right."""
        cw = list(reversed(square_ring))
        env = inset(cw, SetbackSpec(front=2, side=1, rear=1))
        minx, miny, maxx, maxy = env.bounds
        assert (minx, miny, maxx, maxy) == pytest.approx((2, 1, 9, 9))
        assert env.area == pytest.approx(56)
        assert signed_area(list(env.exterior.coords)) < 0

    def test_zero_setbacks_return_lot(self, square_ring):
        env = inset(square_ring, SetbackSpec())
        assert env.area == pytest.approx(100)
        assert env.equals(Polygon(square_ring))

    def test_uniform_setback_matches_buffer(self):
        lot = Polygon(TRAPEZOID)
        env = inset(TRAPEZOID, SetbackSpec(front=1, side=1, rear=1))
        shrunk = lot.buffer(-1, join_style="mitre")
        assert env.area == pytest.approx(shrunk.area, rel=1e-9)
        assert env.symmetric_difference(shrunk).area == pytest.approx(0, abs=1e-9)

    def test_each_edge_moves_by_its_own_distance(self):
        setbacks = SetbackSpec(front=3, side=1, rear=2)
        env = inset(TRAPEZOID, setbacks)
        q = list(env.exterior.coords)[:4]
        p = TRAPEZOID[:4]
        distances = setbacks.for_edges()
        for i in range(4):
            a, b = p[i], p[(i + 1) % 4]
            # inset edge i runs from corner i to corner i+1
            assert _line_distance(q[i], a, b) == pytest.approx(distances[i])
            assert _line_distance(q[(i + 1) % 4], a, b) == pytest.approx(distances[i])

    def test_strictly_inside_convex_lot(self):
        lot = Polygon(TRAPEZOID)
        env = inset(TRAPEZOID, SetbackSpec(front=1.5, side=0.5, rear=2))
        assert lot.contains(env)
        assert env.area < lot.area

    def test_rotated_lot(self):
        """Insetting commutes with rotating the lot."""
        theta = math.radians(33)
        c, s = math.cos(theta), math.sin(theta)
        ring = [(x * c - y * s, x * s + y * c) for x, y in TRAPEZOID]
        env = inset(ring, SetbackSpec(front=2, side=1, rear=1))
        ref = inset(TRAPEZOID, SetbackSpec(front=2, side=1, rear=1))
        assert env.area == pytest.approx(ref.area)

    def test_deterministic(self, square_ring):
        spec = SetbackSpec(front=2.5, side=1.2, rear=0.7)
        a = list(inset(square_ring, spec).exterior.coords)
        b = list(inset(square_ring, spec).exterior.coords)
        assert a == b

    def test_setbacks_too_large(self, square_ring):
        with pytest.raises(DegenerateGeometry) as exc:
            inset(square_ring, SetbackSpec(front=6, side=6, rear=1))
        assert exc.value.code == "NON_POSITIVE_AREA"

    def test_setbacks_exactly_consume_lot(self, square_ring):
        with pytest.raises(DegenerateGeometry):
            inset(square_ring, SetbackSpec(front=5, side=5, rear=5))

    def test_pentagon_rejected(self):
        ring = [(0, 0), (10, 0), (12, 5), (10, 10), (0, 10), (0, 0)]
        with pytest.raises(InvalidGeometry) as exc:
            inset(ring, SetbackSpec(front=1))
        assert exc.value.code == "NOT_QUADRILATERAL"

    def test_unclosed_rejected(self):
        with pytest.raises(InvalidGeometry) as exc:
            inset([(0, 0), (10, 0), (10, 10), (0, 10), (0, 1)], SetbackSpec())
        assert exc.value.code == "NOT_CLOSED"
