"""Area-matched scaling of planar polygons."""

from __future__ import annotations

import math

from shapely.affinity import scale
from shapely.geometry import Polygon

from lotfit.core.geometry.errors import DegenerateGeometry


def clamp_area(polygon: Polygon, target_area: float) -> float:
    """The area actually achievable: ``target_area`` clamped to [0, area]."""
    if not math.isfinite(target_area):
        raise ValueError(f"Target area must be finite, got {target_area}")
    return min(max(target_area, 0.0), polygon.area)


def scale_factor(polygon: Polygon, target_area: float) -> float:
    """Linear factor that brings ``polygon`` to the clamped target area."""
    area = polygon.area
    if polygon.is_empty or area <= 0:
        raise DegenerateGeometry("Cannot scale a polygon with no area", "NON_POSITIVE_AREA")
    return math.sqrt(clamp_area(polygon, target_area) / area)


def scale_to_area(polygon: Polygon, target_area: float) -> Polygon:
    """Uniformly scale ``polygon`` about its centroid to hit ``target_area``.

    The target is clamped to the polygon's own area, so the result never
    grows. A target of zero collapses every vertex onto the centroid.
    """
    factor = scale_factor(polygon, target_area)
    if factor == 1.0:
        return Polygon(polygon.exterior.coords)
    return scale(polygon, xfact=factor, yfact=factor, origin="centroid")
