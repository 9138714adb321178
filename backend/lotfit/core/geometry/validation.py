"""Lot ring validation and sanitization.

This module catches bad rings BEFORE they reach the projector or the offset
engine, producing clear issue codes instead of cryptic topology exceptions
further down the pipeline.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, auto

from shapely.geometry import Polygon
from shapely.validation import explain_validity

from lotfit.core.geometry.errors import GeometryError, InvalidGeometry

Point2D = tuple[float, float]

MIN_RING_VERTICES = 4


class ValidationSeverity(Enum):
    ERROR = auto()    # blocks processing
    WARNING = auto()  # processing continues, overlay may be missing
    INFO = auto()     # informational only


@dataclass
class GeometryIssue:
    severity: ValidationSeverity
    code: str
    message: str
    location: Point2D | None = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.name.lower(),
            "code": self.code,
            "message": self.message,
            "location": list(self.location) if self.location is not None else None,
        }

    @classmethod
    def from_error(
        cls,
        error: GeometryError,
        severity: ValidationSeverity = ValidationSeverity.WARNING,
    ) -> "GeometryIssue":
        return cls(severity, error.code, error.message)


@dataclass
class ValidationResult:
    polygon: Polygon | None
    issues: list[GeometryIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not any(i.severity == ValidationSeverity.ERROR for i in self.issues)

    @property
    def errors(self) -> list[GeometryIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> list[GeometryIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]


# ── 1. Ring structure ───────────────────────────────────────────────────

def ring_vertices(ring: list[Point2D]) -> list[Point2D]:
    """The ring's vertices without the closing repeat."""
    return [(float(x), float(y)) for x, y in ring[:-1]]


def require_closed_ring(ring: list[Point2D]) -> list[Point2D]:
    """Raise InvalidGeometry unless ``ring`` is closed with >= 4 vertices.

    Returns the ring as a list of float tuples.
    """
    coords = [tuple(map(float, c)) for c in ring]
    if any(len(c) != 2 for c in coords):
        raise InvalidGeometry("Ring coordinates must be (x, y) pairs", "BAD_COORDINATE")
    if len(coords) < MIN_RING_VERTICES + 1:
        raise InvalidGeometry(
            f"Ring needs at least {MIN_RING_VERTICES} vertices plus the closing "
            f"point, got {len(coords)} points",
            "TOO_FEW_POINTS",
        )
    for i, (x, y) in enumerate(coords):
        if not (math.isfinite(x) and math.isfinite(y)):
            raise InvalidGeometry(
                f"Point {i} has non-finite coordinate ({x}, {y})", "NON_FINITE_COORD",
            )
    if not _points_equal(coords[0], coords[-1]):
        raise InvalidGeometry(
            "Ring is not closed (first point differs from last)", "NOT_CLOSED",
        )
    return coords


def quad_corners(ring: list[Point2D]) -> list[Point2D]:
    """Return the four corners of a closed 4-vertex ring.

    Only quadrilateral lots can be inset, so anything else is rejected.
    """
    coords = require_closed_ring(ring)
    corners = _deduplicate_consecutive(ring_vertices(coords))
    if len(corners) > 1 and _points_equal(corners[0], corners[-1]):
        corners = corners[:-1]
    if len(corners) != 4:
        raise InvalidGeometry(
            f"Lot ring must have exactly 4 distinct corners, got {len(corners)}",
            "NOT_QUADRILATERAL",
        )
    return corners


# ── 2. Full lot validation ─────────────────────────────────────────────

def validate_ring(ring: list[Point2D]) -> list[GeometryIssue]:
    """Check a lot ring for every problem at once without raising."""
    issues: list[GeometryIssue] = []

    try:
        coords = require_closed_ring(ring)
    except InvalidGeometry as exc:
        issues.append(GeometryIssue.from_error(exc, ValidationSeverity.ERROR))
        return issues
    except (TypeError, ValueError) as exc:
        issues.append(GeometryIssue(
            ValidationSeverity.ERROR,
            "BAD_COORDINATE",
            f"Could not read ring coordinates: {exc}",
        ))
        return issues

    vertices = ring_vertices(coords)
    for i in range(len(vertices) - 1):
        if _points_equal(vertices[i], vertices[i + 1]):
            issues.append(GeometryIssue(
                ValidationSeverity.WARNING,
                "CONSECUTIVE_DUPLICATE",
                f"Vertices {i} and {i + 1} are identical",
                location=vertices[i],
            ))

    unique = _deduplicate_consecutive(vertices)
    if len(unique) < MIN_RING_VERTICES:
        issues.append(GeometryIssue(
            ValidationSeverity.ERROR,
            "DEGENERATE_AFTER_DEDUP",
            f"Only {len(unique)} distinct vertices, need {MIN_RING_VERTICES}",
        ))
        return issues

    if _all_collinear(unique):
        issues.append(GeometryIssue(
            ValidationSeverity.ERROR,
            "ALL_COLLINEAR",
            "All vertices are collinear, ring would have zero area",
        ))
        return issues

    poly = Polygon(coords)
    if not poly.is_valid:
        issues.append(GeometryIssue(
            ValidationSeverity.ERROR,
            "SELF_INTERSECTING",
            f"Shapely reports: {explain_validity(poly)}",
        ))
    elif poly.area <= 0:
        issues.append(GeometryIssue(
            ValidationSeverity.ERROR,
            "ZERO_AREA",
            "Ring encloses no area",
        ))

    return issues


def validate_lot(ring: list[Point2D]) -> ValidationResult:
    """Validate a lot ring and build its polygon when it is usable."""
    issues = validate_ring(ring)
    if any(i.severity == ValidationSeverity.ERROR for i in issues):
        return ValidationResult(polygon=None, issues=issues)
    return ValidationResult(polygon=Polygon(ring), issues=issues)


def require_valid_lot(ring: list[Point2D]) -> list[Point2D]:
    """Raise InvalidGeometry carrying the first blocking issue."""
    result = validate_lot(ring)
    if not result.valid:
        first = result.errors[0]
        raise InvalidGeometry(first.message, first.code)
    return [tuple(map(float, c)) for c in ring]


# ── Helpers ─────────────────────────────────────────────────────────────

def _points_equal(a: Point2D, b: Point2D, eps: float = 1e-12) -> bool:
    return abs(a[0] - b[0]) <= eps and abs(a[1] - b[1]) <= eps


def _deduplicate_consecutive(coords: list[Point2D]) -> list[Point2D]:
    if not coords:
        return []
    result = [coords[0]]
    for c in coords[1:]:
        if not _points_equal(c, result[-1]):
            result.append(c)
    return result


def _all_collinear(points: list[Point2D]) -> bool:
    """Check if all points lie on a single line using the cross product."""
    if len(points) < 3:
        return True
    x0, y0 = points[0]
    x1, y1 = points[1]
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    span = max(max(xs) - min(xs), max(ys) - min(ys))
    for x2, y2 in points[2:]:
        cross = (x1 - x0) * (y2 - y0) - (y1 - y0) * (x2 - x0)
        if abs(cross) > 1e-12 * span * span:
            return False
    return True
