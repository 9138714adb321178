"""Local metric projection for lot rings.

Lot boundaries arrive as WGS84 ``(longitude, latitude)`` rings. Setbacks and
footprints are metric, so every computation happens in a transverse Mercator
plane centred on the lot itself, where scale error over a few hundred metres
is negligible (well under 0.01%). Results are projected back to WGS84 for
rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from pyproj import CRS, Geod, Transformer

from lotfit.core.geometry.errors import InvalidGeometry
from lotfit.core.geometry.validation import Point2D, require_closed_ring, ring_vertices

WGS84 = "EPSG:4326"

_GEOD = Geod(ellps="WGS84")


@lru_cache(maxsize=64)
def _transformers(lon_0: float, lat_0: float) -> tuple[Transformer, Transformer]:
    """Forward/inverse transformers for a tmerc plane centred at (lon_0, lat_0)."""
    local = CRS.from_proj4(
        f"+proj=tmerc +lat_0={lat_0!r} +lon_0={lon_0!r} +k=1 "
        "+x_0=0 +y_0=0 +ellps=WGS84 +units=m +no_defs"
    )
    forward = Transformer.from_crs(WGS84, local, always_xy=True)
    inverse = Transformer.from_crs(local, WGS84, always_xy=True)
    return forward, inverse


@dataclass(frozen=True)
class LocalProjector:
    """Projects WGS84 rings to a local metric plane and back.

    Origin is the mean vertex of the ring the projector was built for.
    X = east, Y = north, both in metres.
    """

    lon_0: float
    lat_0: float

    @classmethod
    def for_ring(cls, ring: list[Point2D]) -> "LocalProjector":
        coords = require_closed_ring(ring)
        _check_geographic(coords)
        vertices = ring_vertices(coords)
        lon_0 = sum(x for x, _ in vertices) / len(vertices)
        lat_0 = sum(y for _, y in vertices) / len(vertices)
        return cls(lon_0=lon_0, lat_0=lat_0)

    def project(self, ring: list[Point2D]) -> list[Point2D]:
        """Geographic ring -> planar ring in metres."""
        coords = require_closed_ring(ring)
        _check_geographic(coords)
        forward, _ = _transformers(self.lon_0, self.lat_0)
        return _transform_ring(forward, coords)

    def unproject(self, ring: list[Point2D]) -> list[Point2D]:
        """Planar ring in metres -> geographic ring."""
        coords = require_closed_ring(ring)
        _, inverse = _transformers(self.lon_0, self.lat_0)
        return _transform_ring(inverse, coords)

    def project_point(self, point: Point2D) -> Point2D:
        forward, _ = _transformers(self.lon_0, self.lat_0)
        return forward.transform(point[0], point[1])

    def unproject_point(self, point: Point2D) -> Point2D:
        _, inverse = _transformers(self.lon_0, self.lat_0)
        return inverse.transform(point[0], point[1])


def geodesic_edge_lengths(ring: list[Point2D]) -> list[float]:
    """Ellipsoidal length in metres of every edge of a geographic ring."""
    coords = require_closed_ring(ring)
    _check_geographic(coords)
    lengths = []
    for (lon1, lat1), (lon2, lat2) in zip(coords, coords[1:]):
        _, _, dist = _GEOD.inv(lon1, lat1, lon2, lat2)
        lengths.append(dist)
    return lengths


def _transform_ring(transformer: Transformer, coords: list[Point2D]) -> list[Point2D]:
    out = [transformer.transform(x, y) for x, y in coords[:-1]]
    # Re-close exactly so downstream equality checks see a closed ring.
    out.append(out[0])
    return [(float(x), float(y)) for x, y in out]


def _check_geographic(coords: list[Point2D]) -> None:
    for i, (lon, lat) in enumerate(coords):
        if not (-180.0 <= lon <= 180.0 and -90.0 <= lat <= 90.0):
            raise InvalidGeometry(
                f"Point {i} ({lon}, {lat}) is not a valid longitude/latitude pair",
                "OUT_OF_RANGE",
            )
