"""Footprint containment and violation-onset tracking."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Optional

from shapely.geometry import Point, Polygon


def exceeds(footprint: Polygon, boundary: Polygon, tolerance: float = 1e-6) -> bool:
    """True when ``footprint`` is not fully inside ``boundary``.

    The test is boundary-inclusive: a footprint touching or coinciding with
    the boundary does not exceed it. ``tolerance`` (metres) absorbs rounding
    from rotation and scaling so that exact touches are not reported.
    """
    if footprint.is_empty:
        return False
    if boundary.is_empty or boundary.area <= 0:
        return True
    if tolerance > 0:
        boundary = boundary.buffer(tolerance, join_style="mitre")
    return not boundary.covers(footprint)


def max_overhang(footprint: Polygon, boundary: Polygon) -> float:
    """Largest distance (metres) by which a footprint corner sits outside."""
    worst = 0.0
    for x, y in list(footprint.exterior.coords)[:-1]:
        pt = Point(x, y)
        if not boundary.covers(pt):
            worst = max(worst, boundary.exterior.distance(pt))
    return worst


@dataclass(frozen=True)
class ViolationUpdate:
    exceeds: bool
    became_exceeded: bool


class ViolationTracker:
    """Remembers the last containment result for one (lot, footprint) session.

    ``update`` is cheap enough to call on every animation frame; only the
    frame on which the footprint first leaves the boundary reports
    ``became_exceeded``.
    """

    def __init__(self, previous: bool = False):
        self._previous = previous
        self._session: Optional[tuple[Hashable, Hashable]] = None

    @property
    def previous(self) -> bool:
        return self._previous

    @property
    def session(self) -> Optional[tuple[Hashable, Hashable]]:
        return self._session

    def bind(self, lot_id: Hashable, footprint_id: Hashable) -> bool:
        """Attach to a (lot, footprint) session, resetting on change.

        Returns True when the session changed.
        """
        key = (lot_id, footprint_id)
        if key == self._session:
            return False
        self._session = key
        self.reset()
        return True

    def reset(self) -> None:
        self._previous = False

    def update(self, exceeded: bool) -> ViolationUpdate:
        became = exceeded and not self._previous
        self._previous = exceeded
        return ViolationUpdate(exceeds=exceeded, became_exceeded=became)

    def check(
        self,
        footprint: Polygon,
        boundary: Polygon,
        tolerance: float = 1e-6,
    ) -> ViolationUpdate:
        return self.update(exceeds(footprint, boundary, tolerance))
