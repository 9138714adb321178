"""Tests for lot ring validation."""

import pytest

from lotfit.core.geometry.errors import InvalidGeometry
from lotfit.core.geometry.validation import (
    ValidationSeverity,
    quad_corners,
    require_closed_ring,
    require_valid_lot,
    validate_lot,
    validate_ring,
)


def _codes(issues):
    return {i.code for i in issues}


class TestValidateRing:
    def test_valid_square(self, square_ring):
        issues = validate_ring(square_ring)
        assert not [i for i in issues if i.severity == ValidationSeverity.ERROR]

    def test_too_few_points(self):
        issues = validate_ring([(0, 0), (1, 0), (1, 1), (0, 0)])
        assert "TOO_FEW_POINTS" in _codes(issues)

    def test_not_closed(self):
        issues = validate_ring([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0.5)])
        assert "NOT_CLOSED" in _codes(issues)

    def test_nan_coordinate(self):
        issues = validate_ring([(0, 0), (float("nan"), 0), (1, 1), (0, 1), (0, 0)])
        assert "NON_FINITE_COORD" in _codes(issues)

    def test_consecutive_duplicate_is_warning(self):
        ring = [(0, 0), (10, 0), (10, 0), (10, 10), (0, 10), (0, 0)]
        issues = validate_ring(ring)
        dup = [i for i in issues if i.code == "CONSECUTIVE_DUPLICATE"]
        assert dup and dup[0].severity == ValidationSeverity.WARNING

    def test_degenerate_after_dedup(self):
        ring = [(0, 0), (10, 0), (10, 0), (10, 10), (0, 0)]
        assert "DEGENERATE_AFTER_DEDUP" in _codes(validate_ring(ring))

    def test_all_collinear(self):
        ring = [(0, 0), (1, 0), (2, 0), (3, 0), (0, 0)]
        assert "ALL_COLLINEAR" in _codes(validate_ring(ring))

    def test_small_geographic_lot_is_not_collinear(self):
        ring = [
            (151.2093, -33.8688), (151.2095, -33.8688),
            (151.2095, -33.8684), (151.2093, -33.8684), (151.2093, -33.8688),
        ]
        assert not _codes(validate_ring(ring))

    def test_self_intersecting(self):
        bowtie = [(0, 0), (10, 10), (10, 0), (0, 10), (0, 0)]
        assert "SELF_INTERSECTING" in _codes(validate_ring(bowtie))


class TestValidateLot:
    def test_polygon_built(self, square_ring):
        result = validate_lot(square_ring)
        assert result.valid
        assert result.polygon.area == pytest.approx(100)

    def test_invalid_has_no_polygon(self):
        result = validate_lot([(0, 0), (1, 0)])
        assert not result.valid
        assert result.polygon is None
        assert result.errors

    def test_require_valid_lot_raises_first_error(self):
        with pytest.raises(InvalidGeometry) as exc:
            require_valid_lot([(0, 0), (10, 10), (10, 0), (0, 10), (0, 0)])
        assert exc.value.code == "SELF_INTERSECTING"


class TestRingStructure:
    def test_closed_ring_as_floats(self, square_ring):
        coords = require_closed_ring(square_ring)
        assert all(isinstance(v, float) for c in coords for v in c)

    def test_quad_corners(self, square_ring):
        assert quad_corners(square_ring) == [(0, 0), (10, 0), (10, 10), (0, 10)]

    def test_quad_corners_drops_duplicates(self):
        ring = [(0, 0), (0, 0), (10, 0), (10, 10), (0, 10), (0, 0)]
        assert len(quad_corners(ring)) == 4

    def test_triangle_is_not_a_quad(self):
        with pytest.raises(InvalidGeometry):
            quad_corners([(0, 0), (10, 0), (10, 0), (0, 10), (0, 0)])
