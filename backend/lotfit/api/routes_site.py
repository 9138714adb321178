"""Site endpoints — setback envelope, FSR boundary and footprint fit for a lot."""

from fastapi import APIRouter, HTTPException

from lotfit.config import settings
from lotfit.models.schemas import (
    EvaluateRequest, EvaluateResponse, SidesRequest, SidesResponse,
)
from lotfit.core.geometry.containment import ViolationTracker
from lotfit.core.geometry.errors import InvalidGeometry
from lotfit.core.geometry.footprint import SNAP_ANGLES, FootprintSpec, snap_angle
from lotfit.core.geometry.offset import SetbackSpec
from lotfit.core.geometry.sides import map_side_lengths
from lotfit.core.geometry.site import evaluate_site

router = APIRouter(tags=["site"])


def _default_setbacks() -> SetbackSpec:
    return SetbackSpec(
        front=settings.default_front_setback,
        side=settings.default_side_setback,
        rear=settings.default_rear_setback,
    )


@router.post("/site/evaluate", response_model=EvaluateResponse)
async def evaluate(req: EvaluateRequest):
    """Derive the overlays for one lot and report whether the footprint fits."""
    setbacks = (
        SetbackSpec(**req.setbacks.model_dump()) if req.setbacks else _default_setbacks()
    )
    fsr_area = req.fsr_area if req.fsr_area is not None else settings.default_fsr_area

    angle = req.angle
    if angle is not None and req.snap:
        angle = snap_angle(angle, settings.snap_tolerance_degrees)
    footprint = None
    if req.footprint is not None:
        footprint = FootprintSpec(req.footprint.width, req.footprint.depth, angle or 0.0)

    try:
        result = evaluate_site(
            req.lot,
            setbacks,
            fsr_area,
            footprint=footprint,
            house_area=req.house_area,
            tracker=ViolationTracker(previous=req.previous_exceeds),
            tolerance=settings.containment_tolerance,
            orient_to_lot=angle is None,
        )
    except InvalidGeometry as e:
        raise HTTPException(422, detail=[{"message": e.message, "code": e.code}])

    return result.to_dict()


@router.post("/site/sides", response_model=SidesResponse)
async def sides(req: SidesRequest):
    """Match published side-length labels to the lot's edges."""
    try:
        assignment = map_side_lengths(
            req.lot, req.nominal, threshold=settings.side_mismatch_threshold,
        )
    except InvalidGeometry as e:
        raise HTTPException(422, detail=[{"message": e.message, "code": e.code}])

    return assignment.to_dict()


@router.get("/site/snap-angles")
async def snap_angles():
    return {"angles": list(SNAP_ANGLES)}
