"""Evacuation routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...errors import BackendError, ConfigurationError
from ...models.domain import Position
from ...schemas.routing import (
    EvacuationRouteRequest,
    EvacuationRouteResponse,
    LocateRequest,
    LocateResponse,
)
from ...services.routing import service as routing_service
from ...services.routing import valhalla_client
from ..deps import bearer_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["evacuation"])


@router.post("/evacuation/route", response_model=EvacuationRouteResponse, status_code=status.HTTP_200_OK)
def evacuation_route(
    payload: EvacuationRouteRequest,
    token: str | None = Depends(bearer_token),
) -> EvacuationRouteResponse:
    """Safest route from the current position to the nearest shelter.

    A routing failure is not an HTTP error: it is reported in ``error`` so the
    client can show it and trigger a new search.
    """
    try:
        return routing_service.plan_evacuation_route(payload, auth_token=token)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except BackendError as exc:
        status_code = exc.status_code if exc.status_code in (401, 403) else status.HTTP_502_BAD_GATEWAY
        raise HTTPException(status_code=status_code, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error planning evacuation route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to plan evacuation route: {str(exc)}",
        ) from exc


@router.post("/routing/locate", response_model=LocateResponse, status_code=status.HTTP_200_OK)
def locate(payload: LocateRequest, token: str | None = Depends(bearer_token)) -> LocateResponse:
    """Nearest road to a position, used when reporting an obstacle."""
    try:
        client = valhalla_client.RoutingClient(auth_token=token)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    located = client.locate(Position(lat=payload.position.lat, lon=payload.position.lon), costing=payload.costing)
    if located is None:
        return LocateResponse(found=False)
    return LocateResponse(
        found=True,
        way_id=located.get("way_id"),
        distance=located.get("distance"),
        raw=located,
    )
