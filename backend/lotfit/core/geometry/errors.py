"""Typed failures raised by the geometry core.

Every one of these is recoverable: callers drop the overlay that could not
be derived and keep going with the rest.
"""

from __future__ import annotations


class GeometryError(Exception):
    """Base class for geometry-core failures."""

    code = "GEOMETRY_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code

    @property
    def message(self) -> str:
        return str(self)


class InvalidGeometry(GeometryError):
    """Malformed input ring: unclosed, too few vertices, non-finite, zero area."""

    code = "INVALID_GEOMETRY"


class DegenerateGeometry(GeometryError):
    """An offset or scale produced a self-intersecting or non-positive-area polygon."""

    code = "DEGENERATE_GEOMETRY"


class DataMismatch(GeometryError):
    """Nominal side-length labels cannot be confidently matched to ring edges."""

    code = "DATA_MISMATCH"
