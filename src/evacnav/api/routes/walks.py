"""Walked route endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from ...data.backend_client import BackendClient
from ...errors import BackendError, ConfigurationError
from ...services import walks as walk_service
from ..deps import bearer_token

router = APIRouter(prefix="/walks", tags=["walks"])


class WalkRequest(BaseModel):
    trace_points: List[tuple[float, float]] = Field(..., min_length=2)
    start_time: datetime
    end_time: datetime
    title: str = walk_service.DEFAULT_WALK_TITLE


@router.post("", status_code=status.HTTP_201_CREATED)
def save_walk(payload: WalkRequest, token: str | None = Depends(bearer_token)) -> dict:
    """Forward a recorded GPS track to the backend."""
    if payload.end_time < payload.start_time:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="end_time is before start_time.")
    body = {
        "trace_points": [list(point) for point in payload.trace_points],
        "start_time": payload.start_time.isoformat(),
        "end_time": payload.end_time.isoformat(),
        "title": payload.title,
    }
    try:
        return walk_service.save_walk(BackendClient(auth_token=token), body)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except BackendError as exc:
        status_code = exc.status_code if exc.status_code in (400, 401, 403) else status.HTTP_502_BAD_GATEWAY
        raise HTTPException(status_code=status_code, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
