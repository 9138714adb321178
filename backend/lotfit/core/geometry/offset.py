"""Per-edge setback offsetting for quadrilateral lots.

The setback envelope is the lot ring with every edge moved inward by its own
distance: the front edge by the front setback, the two side edges by the side
setback and the rear edge by the rear setback. Because adjacent edges move by
different amounts, offsetting vertices along their bisectors is wrong. The
inset corners are instead found where consecutive OFFSET EDGE LINES meet:

1. WINDING — the shoelace sign picks the inward normal for either orientation
2. EDGE OFFSET — each edge is translated along its inward normal
3. CORNER RECONSTRUCTION — consecutive offset lines are intersected
4. SANITY — reject rings that flipped, collapsed or escaped the lot

Edge roles follow ring order: edge0 (p0->p1) is the front, edge1 and edge2
are sides, edge3 (p3->p0) is the rear.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from shapely.geometry import Polygon

from lotfit.core.geometry.errors import DegenerateGeometry
from lotfit.core.geometry.validation import Point2D, quad_corners

EDGE_ROLES = ("front", "side", "side", "rear")

_PARALLEL_EPS = 1e-12


@dataclass(frozen=True)
class SetbackSpec:
    """Front/side/rear setback distances in metres."""

    front: float = 0.0
    side: float = 0.0
    rear: float = 0.0

    def __post_init__(self) -> None:
        for name in ("front", "side", "rear"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"Setback '{name}' must be a non-negative number, got {value}")

    def for_edges(self) -> tuple[float, float, float, float]:
        """Distances for edge0..edge3 in ring order."""
        return (self.front, self.side, self.side, self.rear)

    def to_dict(self) -> dict[str, float]:
        return {"front": self.front, "side": self.side, "rear": self.rear}


# ── 1. Winding ──────────────────────────────────────────────────────────

def signed_area(points: list[Point2D]) -> float:
    """Shoelace area of an open or closed vertex list; positive = CCW."""
    if len(points) > 1 and points[0] == points[-1]:
        points = points[:-1]
    total = 0.0
    n = len(points)
    for i in range(n):
        x1, y1 = points[i]
        x2, y2 = points[(i + 1) % n]
        total += x1 * y2 - x2 * y1
    return total / 2


def inward_sign(points: list[Point2D]) -> int:
    """-1 for counter-clockwise rings, +1 for clockwise ones."""
    return -1 if signed_area(points) > 0 else 1


# ── 2. Edge offset ──────────────────────────────────────────────────────

def unit(dx: float, dy: float) -> tuple[float, float]:
    length = math.hypot(dx, dy)
    if length == 0:
        return (0.0, 0.0)
    return (dx / length, dy / length)


def inward_normal(p1: Point2D, p2: Point2D, sign: int) -> tuple[float, float]:
    """Unit edge direction rotated 90° clockwise, then flipped by ``sign``."""
    ux, uy = unit(p2[0] - p1[0], p2[1] - p1[1])
    return (sign * uy, sign * -ux)


def offset_edge(
    p1: Point2D,
    p2: Point2D,
    normal: tuple[float, float],
    distance: float,
) -> tuple[Point2D, Point2D]:
    """Translate both endpoints of an edge along ``normal``."""
    nx, ny = normal
    return (
        (p1[0] + nx * distance, p1[1] + ny * distance),
        (p2[0] + nx * distance, p2[1] + ny * distance),
    )


# ── 3. Corner reconstruction ────────────────────────────────────────────

def intersect_lines(
    a1: Point2D, a2: Point2D,
    b1: Point2D, b2: Point2D,
) -> Point2D:
    """Intersection of the infinite lines through a1-a2 and b1-b2.

    Parallel lines have no single crossing; the end of line a is returned,
    which is the shared offset corner when both edges were collinear.
    """
    ux, uy = a2[0] - a1[0], a2[1] - a1[1]
    vx, vy = b2[0] - b1[0], b2[1] - b1[1]
    den = ux * vy - uy * vx
    scale = math.hypot(ux, uy) * math.hypot(vx, vy)
    if scale == 0 or abs(den) <= _PARALLEL_EPS * scale:
        return a2
    wx, wy = b1[0] - a1[0], b1[1] - a1[1]
    t = (wx * vy - wy * vx) / den
    return (a1[0] + t * ux, a1[1] + t * uy)


def inset(ring: list[Point2D], setbacks: SetbackSpec) -> Polygon:
    """Inset a planar 4-corner lot ring by per-edge setbacks.

    Returns the envelope polygon with the same winding as the input.
    Raises InvalidGeometry for malformed rings and DegenerateGeometry when
    the setbacks consume the lot.
    """
    corners = quad_corners(ring)
    lot_area = signed_area(corners)
    if lot_area == 0:
        raise DegenerateGeometry("Lot ring has zero area", "ZERO_AREA")

    sign = inward_sign(corners)
    distances = setbacks.for_edges()

    offset_lines = []
    for i in range(4):
        p1, p2 = corners[i], corners[(i + 1) % 4]
        normal = inward_normal(p1, p2, sign)
        offset_lines.append(offset_edge(p1, p2, normal, distances[i]))

    # Corner i sits between the offset of edge i-1 and the offset of edge i.
    inset_corners = [
        intersect_lines(*offset_lines[i - 1], *offset_lines[i])
        for i in range(4)
    ]

    envelope = Polygon(inset_corners + [inset_corners[0]])
    _check_envelope(envelope, inset_corners, corners, lot_area)
    return envelope


# ── 4. Sanity ───────────────────────────────────────────────────────────

def _check_envelope(
    envelope: Polygon,
    inset_corners: list[Point2D],
    corners: list[Point2D],
    lot_area: float,
) -> None:
    if not all(math.isfinite(v) for p in inset_corners for v in p):
        raise DegenerateGeometry("Setback corners are not finite", "NON_FINITE_COORD")

    if not envelope.is_valid:
        raise DegenerateGeometry(
            "Setbacks produce a self-intersecting envelope", "SELF_INTERSECTING",
        )

    area = signed_area(inset_corners)
    tolerance = 1e-12 * abs(lot_area)
    if area * lot_area <= 0 or abs(area) <= tolerance:
        raise DegenerateGeometry(
            "Setbacks are too large for the lot, envelope has no area",
            "NON_POSITIVE_AREA",
        )

    lot = Polygon(corners + [corners[0]])
    slack = 1e-9 * max(1.0, math.sqrt(abs(lot_area)))
    if not lot.buffer(slack, join_style="mitre").covers(envelope):
        raise DegenerateGeometry("Setback envelope extends outside the lot", "ESCAPES_LOT")
