"""Lot evaluation: setback envelope, FSR boundary and footprint fit.

One call runs the whole chain for the current inputs:

    project -> inset -> scale to FSR area -> place footprint -> containment

A failing stage records an issue and leaves its overlay (and everything
derived from it) as None; the lot itself is always returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from shapely.geometry import Polygon

from lotfit.core.geometry.containment import ViolationTracker, exceeds, max_overhang
from lotfit.core.geometry.errors import DegenerateGeometry, GeometryError
from lotfit.core.geometry.footprint import (
    FootprintSpec, area_matched_footprint, frontage_flip, frontage_midpoint, longest_edge_angle,
)
from lotfit.core.geometry.offset import SetbackSpec, inset
from lotfit.core.geometry.projection import LocalProjector
from lotfit.core.geometry.scaling import clamp_area, scale_to_area
from lotfit.core.geometry.validation import (
    GeometryIssue, Point2D, ValidationSeverity, require_valid_lot,
)

logger = logging.getLogger(__name__)


@dataclass
class SiteEvaluation:
    """Planar overlays for one lot plus the projector that maps them back."""

    projector: LocalProjector
    lot: Polygon
    setbacks: SetbackSpec
    envelope: Polygon | None = None
    fsr_boundary: Polygon | None = None
    applied_fsr_area: float | None = None
    footprint: Polygon | None = None
    footprint_angle: float | None = None
    exceeds: bool | None = None
    exceeds_envelope: bool | None = None
    became_exceeded: bool = False
    overhang: float = 0.0
    issues: list[GeometryIssue] = field(default_factory=list)

    @property
    def lot_area(self) -> float:
        return self.lot.area

    @property
    def envelope_area(self) -> float | None:
        return self.envelope.area if self.envelope is not None else None

    @property
    def fsr_area(self) -> float | None:
        return self.fsr_boundary.area if self.fsr_boundary is not None else None

    def geo_ring(self, poly: Polygon | None) -> list[list[float]] | None:
        """Planar polygon -> ``[[lon, lat], ...]`` ring, or None."""
        if poly is None or poly.is_empty:
            return None
        ring = self.projector.unproject(list(poly.exterior.coords))
        return [[x, y] for x, y in ring]

    def to_dict(self) -> dict:
        """Serialise to a plain dict for the API response."""
        def _area(value: float | None) -> float | None:
            return round(value, 2) if value is not None else None

        return {
            "lot": self.geo_ring(self.lot),
            "envelope": self.geo_ring(self.envelope),
            "fsr_boundary": self.geo_ring(self.fsr_boundary),
            "footprint": self.geo_ring(self.footprint),
            "lot_area_sq_m": round(self.lot_area, 2),
            "envelope_area_sq_m": _area(self.envelope_area),
            "fsr_area_sq_m": _area(self.fsr_area),
            "applied_fsr_area_sq_m": _area(self.applied_fsr_area),
            "footprint_angle": self.footprint_angle,
            "setbacks": self.setbacks.to_dict(),
            "exceeds": self.exceeds,
            "exceeds_envelope": self.exceeds_envelope,
            "became_exceeded": self.became_exceeded,
            "overhang_m": round(self.overhang, 3),
            "issues": [i.to_dict() for i in self.issues],
        }


def evaluate_site(
    lot_ring: list[Point2D],
    setbacks: SetbackSpec,
    fsr_area: float,
    footprint: FootprintSpec | None = None,
    house_area: float | None = None,
    tracker: ViolationTracker | None = None,
    tolerance: float = 1e-6,
    orient_to_lot: bool = False,
) -> SiteEvaluation:
    """Evaluate a geographic lot ring against setbacks, FSR and a footprint.

    ``footprint`` places a rotated rectangle; without one, ``house_area``
    falls back to an area-matched copy of the envelope. ``tracker`` carries
    the previous violation state of the caller's session. With
    ``orient_to_lot`` the footprint's own angle is replaced by the direction
    of the lot's longest edge, turned 180 degrees if its front would face
    away from the street.

    Raises InvalidGeometry when the lot ring itself is unusable.
    """
    ring = require_valid_lot(lot_ring)
    projector = LocalProjector.for_ring(ring)
    planar = projector.project(ring)
    result = SiteEvaluation(projector=projector, lot=Polygon(planar), setbacks=setbacks)

    # Step 1: setback envelope
    try:
        result.envelope = inset(planar, setbacks)
    except GeometryError as exc:
        _omit(result, exc, "envelope")
        return result

    # Step 2: FSR boundary
    try:
        result.applied_fsr_area = clamp_area(result.envelope, fsr_area)
        fsr_boundary = scale_to_area(result.envelope, fsr_area)
        if fsr_boundary.area <= 0:
            raise DegenerateGeometry("FSR area of zero leaves no buildable boundary", "ZERO_FSR_AREA")
        result.fsr_boundary = fsr_boundary
    except GeometryError as exc:
        _omit(result, exc, "fsr_boundary")

    # Step 3: footprint, centred on the envelope (and FSR boundary) centroid
    c = result.envelope.centroid
    if footprint is not None:
        if orient_to_lot:
            footprint = _orient_to_lot(footprint, planar, (c.x, c.y))
        result.footprint = footprint.place((c.x, c.y))
        result.footprint_angle = footprint.angle
    elif house_area is not None and house_area > 0:
        result.footprint = area_matched_footprint(result.envelope, house_area)

    if result.footprint is None:
        return result

    # Step 4: containment
    result.exceeds_envelope = exceeds(result.footprint, result.envelope, tolerance)
    if result.fsr_boundary is None:
        return result

    tracker = tracker or ViolationTracker()
    update = tracker.check(result.footprint, result.fsr_boundary, tolerance)
    result.exceeds = update.exceeds
    result.became_exceeded = update.became_exceeded
    if update.exceeds:
        result.overhang = max_overhang(result.footprint, result.fsr_boundary)
    return result


def _omit(result: SiteEvaluation, exc: GeometryError, overlay: str) -> None:
    logger.debug("overlay_omitted", extra={"overlay": overlay, "code": exc.code})
    result.issues.append(GeometryIssue.from_error(exc, ValidationSeverity.WARNING))


def _orient_to_lot(
    footprint: FootprintSpec, planar: list[Point2D], center: Point2D,
) -> FootprintSpec:
    oriented = footprint.rotated_to(longest_edge_angle(planar))
    flip = frontage_flip(oriented.place(center), frontage_midpoint(planar))
    return oriented.rotated_to(oriented.angle + flip)
