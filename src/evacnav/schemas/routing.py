"""Routing request/response schemas.

``TripPayload`` and friends validate what the routing engine returns; the
remaining models are the public API of ``/evacuation`` and ``/navigation``.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import DangerLevel, ObstacleType


class LocationModel(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)


# --------------------------------------------------------------------------- #
# Routing engine payloads
# --------------------------------------------------------------------------- #


class ObstaclePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    position: tuple[float, float]
    type: ObstacleType
    description: str = ""
    danger_level: DangerLevel = Field(..., alias="dangerLevel")
    image_s3_key: Optional[str] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")


class TripSummaryPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    length: float = 0.0
    time: float = 0.0


class LegPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    shape: str
    summary: Optional[TripSummaryPayload] = None


class TripPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    summary: TripSummaryPayload = Field(default_factory=TripSummaryPayload)
    legs: List[LegPayload] = Field(default_factory=list)
    # A missing or null obstacles field means "none found along the route".
    obstacles: Optional[List[ObstaclePayload]] = None
    status: Optional[int] = None
    status_message: Optional[str] = None


class RouteResponsePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    trip: TripPayload
    # The backend reports obstacles next to the trip; some engines nest them inside it.
    obstacles: Optional[List[ObstaclePayload]] = None


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #


class ShelterModel(BaseModel):
    id: int
    name: str
    lat: float
    lon: float
    address: Optional[str] = None
    elevation: Optional[float] = None
    tsunami_safety_level: Optional[int] = None


class EvacuationRouteRequest(BaseModel):
    position: LocationModel
    evacuation_level: Optional[int] = Field(
        default=None,
        ge=1,
        le=5,
        description="User's self-reported evacuation capability (1-5). If omitted, read from the signed-in user's profile.",
    )
    destination: Optional[LocationModel] = Field(
        default=None,
        description="Explicit destination. If omitted, the nearest shelter is used.",
    )
    shelters: Optional[List[ShelterModel]] = Field(
        default=None,
        description="Candidate shelters. If omitted, they are fetched from the backend.",
    )
    costing: Optional[Literal["pedestrian", "auto", "bicycle"]] = None


class ObstacleModel(BaseModel):
    id: int
    position: tuple[float, float]
    type: ObstacleType
    description: str
    danger_level: DangerLevel
    image_s3_key: Optional[str] = None
    created_at: Optional[str] = None


class GuidanceModel(BaseModel):
    distance_m: float
    bearing_deg: float
    next_index: int
    next_point: tuple[float, float]


class RouteCandidateModel(BaseModel):
    attempt: int
    length_km: float
    time_s: float
    shape: Optional[str]
    danger_sum: int
    obstacles: List[ObstacleModel]
    trip: dict


class EvacuationRouteResponse(BaseModel):
    destination: LocationModel
    shelter: Optional[ShelterModel] = None
    route: Optional[RouteCandidateModel] = None
    attempts: int
    excluded_locations: List[List[LocationModel]]
    warning: Optional[str] = None
    error: Optional[str] = None
    guidance: Optional[GuidanceModel] = None


class GuidanceRequest(BaseModel):
    position: LocationModel
    shape: str
    precision: Optional[Literal[5, 6]] = None


class LocateRequest(BaseModel):
    position: LocationModel
    costing: Optional[Literal["pedestrian", "auto", "bicycle"]] = None


class LocateResponse(BaseModel):
    found: bool
    way_id: Optional[int] = None
    distance: Optional[float] = None
    raw: Optional[dict] = None
