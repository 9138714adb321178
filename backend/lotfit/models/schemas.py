"""Pydantic schemas for API request/response validation."""

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _check_ring(v: list[list[float]]) -> list[list[float]]:
    for pair in v:
        if len(pair) != 2:
            raise ValueError("Coordinate must be [longitude, latitude]")
        if not all(math.isfinite(c) for c in pair):
            raise ValueError("Coordinate must be a finite number")
    return v


class SetbackInput(BaseModel):
    front: float = Field(ge=0)
    side: float = Field(ge=0)
    rear: float = Field(ge=0)

    @field_validator("front", "side", "rear")
    @classmethod
    def must_be_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("Setback must be a finite number")
        return v


class FootprintInput(BaseModel):
    width: float = Field(gt=0)
    depth: float = Field(gt=0)

    @field_validator("width", "depth")
    @classmethod
    def must_be_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("Footprint dimension must be a finite number")
        return v


class EvaluateRequest(BaseModel):
    lot: list[list[float]]  # closed ring of [lon, lat]
    setbacks: Optional[SetbackInput] = None
    fsr_area: Optional[float] = Field(default=None, ge=0)
    footprint: Optional[FootprintInput] = None
    house_area: Optional[float] = Field(default=None, gt=0)
    angle: Optional[float] = None  # None: along the lot's longest edge
    snap: bool = False
    previous_exceeds: bool = False

    @field_validator("lot")
    @classmethod
    def lot_pairs(cls, v: list[list[float]]) -> list[list[float]]:
        return _check_ring(v)

    @field_validator("angle", "fsr_area", "house_area")
    @classmethod
    def must_be_finite(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not math.isfinite(v):
            raise ValueError("Value must be a finite number")
        return v


class SidesRequest(BaseModel):
    lot: list[list[float]]
    nominal: list[float]

    @field_validator("lot")
    @classmethod
    def lot_pairs(cls, v: list[list[float]]) -> list[list[float]]:
        return _check_ring(v)

    @field_validator("nominal")
    @classmethod
    def four_lengths(cls, v: list[float]) -> list[float]:
        if len(v) != 4:
            raise ValueError("Exactly four nominal side lengths are required")
        if not all(math.isfinite(x) and x >= 0 for x in v):
            raise ValueError("Side lengths must be non-negative finite numbers")
        return v


class IssueResponse(BaseModel):
    severity: str
    code: str
    message: str
    location: Optional[list[float]] = None


class EvaluateResponse(BaseModel):
    lot: list[list[float]]
    envelope: Optional[list[list[float]]] = None
    fsr_boundary: Optional[list[list[float]]] = None
    footprint: Optional[list[list[float]]] = None
    lot_area_sq_m: float
    envelope_area_sq_m: Optional[float] = None
    fsr_area_sq_m: Optional[float] = None
    applied_fsr_area_sq_m: Optional[float] = None
    footprint_angle: Optional[float] = None
    setbacks: dict[str, float]
    exceeds: Optional[bool] = None
    exceeds_envelope: Optional[bool] = None
    became_exceeded: bool = False
    overhang_m: float = 0.0
    issues: list[IssueResponse] = []


class SidesResponse(BaseModel):
    permutation: list[int]
    assigned: list[float]
    actual: list[float]
    deviation: float
    mismatch: Optional[str] = None
