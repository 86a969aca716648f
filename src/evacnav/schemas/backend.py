"""Payloads exchanged with the backend REST API (obstacles, users)."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.domain import DangerLevel, ObstacleType, Position
from .routing import ObstacleModel


class ObstacleDraft(BaseModel):
    """Body of an obstacle report, as created or updated by a user.

    ``nodes`` and ``nearest_distance`` come from a prior ``/routing/locate``
    call and are forwarded untouched.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    position: tuple[float, float]
    type: ObstacleType
    description: str = Field(default="", max_length=1000)
    danger_level: DangerLevel = Field(..., alias="dangerLevel")
    nodes: Optional[List[int]] = None
    nearest_distance: Optional[float] = Field(default=None, alias="nearestDistance", ge=0.0)

    @field_validator("position")
    @classmethod
    def _check_position(cls, value: tuple[float, float]) -> tuple[float, float]:
        Position.from_pair(value)
        return value

    def to_backend(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ObstacleListResponse(BaseModel):
    items: List[ObstacleModel]


class UserPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    evacuation_level: int = Field(..., ge=1, le=5)
