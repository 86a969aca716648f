"""Shelter endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...data.backend_client import BackendClient
from ...errors import BackendError, ConfigurationError
from ...models.domain import Position
from ...schemas.routing import ShelterModel
from ...services import shelters as shelter_service
from ..deps import bearer_token

router = APIRouter(prefix="/shelters", tags=["shelters"])


@router.get("/nearest", response_model=ShelterModel, status_code=status.HTTP_200_OK)
def get_nearest_shelter(
    lat: float = Query(..., ge=-90.0, le=90.0),
    lon: float = Query(..., ge=-180.0, le=180.0),
    token: str | None = Depends(bearer_token),
) -> ShelterModel:
    try:
        shelters = shelter_service.list_shelters(BackendClient(auth_token=token))
    except BackendError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    nearest = shelter_service.nearest_shelter(Position(lat=lat, lon=lon), shelters)
    if nearest is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No shelters available.")
    return ShelterModel(
        id=nearest.id,
        name=nearest.name,
        lat=nearest.lat,
        lon=nearest.lon,
        address=nearest.address,
        elevation=nearest.elevation,
        tsunami_safety_level=nearest.tsunami_safety_level,
    )
