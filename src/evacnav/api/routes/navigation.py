"""Navigation guidance endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from ...models.domain import Position
from ...schemas.routing import GuidanceModel, GuidanceRequest
from ...services.navigation.guidance import compute_guidance

router = APIRouter(prefix="/navigation", tags=["navigation"])


@router.post("/guidance", response_model=GuidanceModel, status_code=status.HTTP_200_OK)
def guidance(payload: GuidanceRequest) -> GuidanceModel:
    position = Position(lat=payload.position.lat, lon=payload.position.lon)
    result = compute_guidance(position, payload.shape, payload.precision)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Route shape is empty or could not be decoded.",
        )
    return GuidanceModel(
        distance_m=result.distance_m,
        bearing_deg=result.bearing_deg,
        next_index=result.next_index,
        next_point=result.next_point,
    )
