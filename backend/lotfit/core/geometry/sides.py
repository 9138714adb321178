"""Matching published side-length labels to lot ring edges.

Lot records carry four nominal side lengths (``s1``..``s4``) with no
guarantee that ``s1`` belongs to edge0 of the ring. The assignment is
recovered by comparing against the measured edge lengths over every
rotation of the 4-cycle and of its mirror image.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from lotfit.core.geometry.errors import DataMismatch
from lotfit.core.geometry.projection import geodesic_edge_lengths
from lotfit.core.geometry.validation import Point2D, quad_corners

logger = logging.getLogger(__name__)

IDENTITY = (0, 1, 2, 3)


def candidate_permutations() -> list[tuple[int, ...]]:
    """Rotations of the cycle, identity first, then rotations of its mirror.

    ``perm[i]`` is the index of the nominal label assigned to edge i.
    """
    forward = [tuple((i + k) % 4 for i in range(4)) for k in range(4)]
    mirrored = [tuple((k - i) % 4 for i in range(4)) for k in range(4)]
    return forward + mirrored


@dataclass
class SideAssignment:
    permutation: tuple[int, ...]
    assigned: list[float]   # nominal length for edge0..edge3
    actual: list[float]     # measured length of edge0..edge3
    deviation: float        # sum of |assigned - actual|
    mismatch: DataMismatch | None = None

    @property
    def is_identity(self) -> bool:
        return self.permutation == IDENTITY

    def to_dict(self) -> dict:
        return {
            "permutation": list(self.permutation),
            "assigned": self.assigned,
            "actual": [round(a, 3) for a in self.actual],
            "deviation": round(self.deviation, 3),
            "mismatch": self.mismatch.message if self.mismatch else None,
        }


def assign_side_lengths(
    actual: list[float],
    nominal: list[float],
    threshold: float = 0.5,
) -> SideAssignment:
    """Pick the permutation of ``nominal`` that best matches ``actual``.

    Ties keep the earlier candidate, so the identity wins any tie. When the
    winner still misses some edge by more than ``threshold`` (relative to the
    measured length) the identity is returned with a DataMismatch attached.
    """
    if len(actual) != 4 or len(nominal) != 4:
        raise ValueError("Exactly four actual and four nominal lengths are required")
    if not all(math.isfinite(v) and v >= 0 for v in list(actual) + list(nominal)):
        raise ValueError("Side lengths must be non-negative finite numbers")

    best_perm = IDENTITY
    best_dev = math.inf
    for perm in candidate_permutations():
        dev = sum(abs(nominal[perm[i]] - actual[i]) for i in range(4))
        if dev < best_dev:
            best_perm, best_dev = perm, dev

    worst = _worst_relative_error(actual, [nominal[j] for j in best_perm])
    if worst > threshold:
        mismatch = DataMismatch(
            f"Side labels {list(nominal)} do not match measured edges "
            f"{[round(a, 2) for a in actual]} (worst error {worst:.0%})"
        )
        logger.warning("side_length_mismatch", extra={
            "nominal": list(nominal), "actual": list(actual), "worst_error": worst,
        })
        return SideAssignment(
            permutation=IDENTITY,
            assigned=list(nominal),
            actual=list(actual),
            deviation=sum(abs(n - a) for n, a in zip(nominal, actual)),
            mismatch=mismatch,
        )

    return SideAssignment(
        permutation=best_perm,
        assigned=[nominal[j] for j in best_perm],
        actual=list(actual),
        deviation=best_dev,
    )


def map_side_lengths(
    ring: list[Point2D],
    nominal: list[float],
    threshold: float = 0.5,
) -> SideAssignment:
    """Assign nominal labels to the edges of a geographic 4-corner ring."""
    corners = quad_corners(ring)
    lengths = geodesic_edge_lengths(corners + [corners[0]])
    return assign_side_lengths(lengths, nominal, threshold)


def _worst_relative_error(actual: list[float], assigned: list[float]) -> float:
    worst = 0.0
    for a, n in zip(actual, assigned):
        if a <= 0:
            return math.inf
        worst = max(worst, abs(n - a) / a)
    return worst
