"""House footprint placement and orientation.

A footprint is always rebuilt from the canonical, unrotated rectangle using
the absolute rotation angle. Rotating the previous result by a delta would
accumulate floating-point drift over thousands of slider events.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from shapely.affinity import rotate, translate
from shapely.geometry import Polygon

from lotfit.core.geometry.scaling import scale_to_area
from lotfit.core.geometry.validation import Point2D, quad_corners

SNAP_ANGLES = (0.0, 90.0, 180.0, 270.0)


def normalize_angle(angle: float) -> float:
    """Wrap an angle in degrees to [0, 360)."""
    if not math.isfinite(angle):
        raise ValueError(f"Rotation angle must be finite, got {angle}")
    wrapped = math.fmod(angle, 360.0)
    if wrapped < 0:
        wrapped += 360.0
    # -1e-14 + 360 rounds to exactly 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def snap_angle(angle: float, tolerance: float = 2.0) -> float:
    """Snap to the nearest preset if within ``tolerance`` degrees."""
    wrapped = normalize_angle(angle)
    for preset in SNAP_ANGLES + (360.0,):
        if abs(wrapped - preset) <= tolerance:
            return normalize_angle(preset)
    return wrapped


@dataclass(frozen=True)
class FootprintSpec:
    """Published width/depth of a house design (metres) plus its rotation."""

    width: float
    depth: float
    angle: float = 0.0

    def __post_init__(self) -> None:
        for name in ("width", "depth"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"Footprint {name} must be a positive number, got {value}")
        object.__setattr__(self, "angle", normalize_angle(self.angle))

    @property
    def area(self) -> float:
        return self.width * self.depth

    def rotated_to(self, angle: float) -> "FootprintSpec":
        return FootprintSpec(self.width, self.depth, angle)

    def place(self, center: Point2D) -> Polygon:
        return place_footprint(self.width, self.depth, self.angle, center)


def canonical_rectangle(width: float, depth: float) -> Polygon:
    """Axis-aligned rectangle centred on the origin.

    Vertex order is counter-clockwise from the bottom-left corner, so edge
    0->1 is the front of the design and edge 2->3 its back.
    """
    hw, hd = width / 2, depth / 2
    return Polygon([(-hw, -hd), (hw, -hd), (hw, hd), (-hw, hd), (-hw, -hd)])


def place_footprint(
    width: float,
    depth: float,
    angle_degrees: float,
    center: Point2D,
) -> Polygon:
    """Rectangle of ``width`` x ``depth`` rotated CCW by ``angle_degrees``
    about its own centroid and centred on ``center``."""
    rect = canonical_rectangle(width, depth)
    rotated = rotate(rect, normalize_angle(angle_degrees), origin=(0.0, 0.0))
    return translate(rotated, xoff=center[0], yoff=center[1])


def area_matched_footprint(envelope: Polygon, house_area: float) -> Polygon:
    """Stand-in footprint for designs that publish only a floor area.

    The envelope is shrunk about its centroid until it covers ``house_area``.
    """
    return scale_to_area(envelope, house_area)


# ── Orientation helpers ────────────────────────────────────────────────

def longest_edge_angle(ring: list[Point2D]) -> float:
    """Direction of the ring's longest edge, degrees CCW from +x in [0, 360).

    Used as the default absolute rotation so that a design's width runs
    along the long side of the lot.
    """
    corners = quad_corners(ring)
    best_length = -1.0
    best_angle = 0.0
    for i, (x1, y1) in enumerate(corners):
        x2, y2 = corners[(i + 1) % len(corners)]
        length = math.hypot(x2 - x1, y2 - y1)
        if length > best_length:
            best_length = length
            best_angle = math.degrees(math.atan2(y2 - y1, x2 - x1))
    return normalize_angle(best_angle)


def frontage_midpoint(ring: list[Point2D]) -> Point2D:
    """Midpoint of edge0, the lot's front edge by ring-order convention."""
    corners = quad_corners(ring)
    (x1, y1), (x2, y2) = corners[0], corners[1]
    return ((x1 + x2) / 2, (y1 + y2) / 2)


def frontage_flip(footprint: Polygon, frontage: Point2D) -> float:
    """180 if the footprint's front (edge 0->1) faces away from the street.

    Compares the distance from the lot frontage midpoint to the midpoints of
    the footprint's front and back edges.
    """
    coords = list(footprint.exterior.coords)
    front_mid = _midpoint(coords[0], coords[1])
    back_mid = _midpoint(coords[2], coords[3])
    front_dist = math.dist(frontage, front_mid)
    back_dist = math.dist(frontage, back_mid)
    return 180.0 if front_dist > back_dist else 0.0


def _midpoint(a: Point2D, b: Point2D) -> Point2D:
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)
