"""Obstacle report endpoints, proxied to the backend."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ...data.backend_client import BackendClient
from ...errors import BackendError, ConfigurationError
from ...schemas.backend import ObstacleDraft, ObstacleListResponse
from ...schemas.routing import ObstacleModel
from ...services.obstacles import ObstacleClient, obstacle_model
from ..deps import bearer_token

router = APIRouter(prefix="/obstacles", tags=["obstacles"])

# Backend statuses that describe the caller's request and are passed through as is.
_PASSTHROUGH_STATUSES = (400, 401, 403, 404)


def _obstacle_client(token: str | None) -> ObstacleClient:
    try:
        return ObstacleClient(BackendClient(auth_token=token))
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def _backend_failure(exc: BackendError) -> HTTPException:
    status_code = exc.status_code if exc.status_code in _PASSTHROUGH_STATUSES else status.HTTP_502_BAD_GATEWAY
    return HTTPException(status_code=status_code, detail=str(exc))


@router.get("", response_model=ObstacleListResponse, status_code=status.HTTP_200_OK)
def list_obstacles(token: str | None = Depends(bearer_token)) -> ObstacleListResponse:
    client = _obstacle_client(token)
    try:
        obstacles = client.list()
    except BackendError as exc:
        raise _backend_failure(exc) from exc
    return ObstacleListResponse(items=[obstacle_model(obstacle) for obstacle in obstacles])


@router.get("/{obstacle_id}", response_model=ObstacleModel, status_code=status.HTTP_200_OK)
def get_obstacle(obstacle_id: int, token: str | None = Depends(bearer_token)) -> ObstacleModel:
    client = _obstacle_client(token)
    try:
        return obstacle_model(client.get(obstacle_id))
    except BackendError as exc:
        raise _backend_failure(exc) from exc


@router.post("", response_model=ObstacleModel, status_code=status.HTTP_201_CREATED)
def create_obstacle(payload: ObstacleDraft, token: str | None = Depends(bearer_token)) -> ObstacleModel:
    """Report a new obstacle; the backend requires a signed-in user."""
    client = _obstacle_client(token)
    try:
        return obstacle_model(client.create(payload))
    except BackendError as exc:
        raise _backend_failure(exc) from exc


@router.put("/{obstacle_id}", response_model=ObstacleModel, status_code=status.HTTP_200_OK)
def update_obstacle(
    obstacle_id: int,
    payload: ObstacleDraft,
    token: str | None = Depends(bearer_token),
) -> ObstacleModel:
    client = _obstacle_client(token)
    try:
        return obstacle_model(client.update(obstacle_id, payload))
    except BackendError as exc:
        raise _backend_failure(exc) from exc
