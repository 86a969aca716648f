"""Evacuation route planning service."""

from __future__ import annotations

import logging

from ...data.backend_client import BackendClient
from ...models.domain import Position, Shelter, UserProfile
from ...schemas.routing import (
    EvacuationRouteRequest,
    EvacuationRouteResponse,
    GuidanceModel,
    LocationModel,
    RouteCandidateModel,
    ShelterModel,
)
from ..navigation.guidance import Guidance, guidance_for_trip
from ..obstacles import obstacle_model
from ..shelters import list_shelters, nearest_shelter
from ..users import get_current_user
from .models import RouteCandidate, SearchOutcome
from .orchestrator import search_safest_route
from .valhalla_client import RoutingClient

logger = logging.getLogger(__name__)


def _resolve_shelters(payload: EvacuationRouteRequest, auth_token: str | None) -> list[Shelter]:
    if payload.shelters is not None:
        return [Shelter(**shelter.model_dump()) for shelter in payload.shelters]
    return list_shelters(BackendClient(auth_token=auth_token))


def _candidate_model(candidate: RouteCandidate) -> RouteCandidateModel:
    trip = candidate.trip
    return RouteCandidateModel(
        attempt=candidate.attempt,
        length_km=trip.summary.length_km,
        time_s=trip.summary.time_s,
        shape=trip.shape,
        danger_sum=candidate.danger_sum,
        obstacles=[obstacle_model(obstacle) for obstacle in trip.obstacles],
        trip=trip.raw,
    )


def _guidance_model(guidance: Guidance | None) -> GuidanceModel | None:
    if guidance is None:
        return None
    return GuidanceModel(
        distance_m=guidance.distance_m,
        bearing_deg=guidance.bearing_deg,
        next_index=guidance.next_index,
        next_point=guidance.next_point,
    )


def _to_response(
    destination: Position,
    shelter: Shelter | None,
    outcome: SearchOutcome,
    guidance: Guidance | None,
) -> EvacuationRouteResponse:
    return EvacuationRouteResponse(
        destination=LocationModel(**destination.to_location()),
        shelter=ShelterModel(
            id=shelter.id,
            name=shelter.name,
            lat=shelter.lat,
            lon=shelter.lon,
            address=shelter.address,
            elevation=shelter.elevation,
            tsunami_safety_level=shelter.tsunami_safety_level,
        )
        if shelter
        else None,
        route=_candidate_model(outcome.best) if outcome.best else None,
        attempts=outcome.attempts,
        excluded_locations=[
            [LocationModel(**position.to_location()) for position in snapshot]
            for snapshot in outcome.exclusion_history
        ],
        warning=outcome.warning,
        error=outcome.error,
        guidance=_guidance_model(guidance),
    )


def _resolve_user(payload: EvacuationRouteRequest, auth_token: str | None) -> UserProfile:
    if payload.evacuation_level is not None:
        return UserProfile(evacuation_level=payload.evacuation_level)
    if not auth_token:
        raise ValueError("evacuation_level is required when no user is signed in.")
    user = get_current_user(BackendClient(auth_token=auth_token))
    logger.info(f"Using evacuation level {user.evacuation_level} from the user profile")
    return user


def plan_evacuation_route(payload: EvacuationRouteRequest, auth_token: str | None = None) -> EvacuationRouteResponse:
    """Pick the destination, search the safest route and derive guidance.

    Raises:
        ConfigurationError: the routing engine or backend URL is not set.
        ValueError: no destination was given and no shelter is available, or
            no evacuation level was given and nobody is signed in.
        BackendError: shelters or the user profile had to be fetched and the
            backend failed.
    """
    client = RoutingClient(auth_token=auth_token)
    user = _resolve_user(payload, auth_token)
    origin = Position(lat=payload.position.lat, lon=payload.position.lon)
    shelter: Shelter | None = None

    if payload.destination is not None:
        destination = Position(lat=payload.destination.lat, lon=payload.destination.lon)
    else:
        shelters = _resolve_shelters(payload, auth_token)
        shelter = nearest_shelter(origin, shelters)
        if shelter is None:
            raise ValueError("No shelters available to evacuate to.")
        destination = shelter.position
        logger.info(f"Nearest shelter for ({origin.lat:.6f}, {origin.lon:.6f}) is '{shelter.name}'")

    outcome = search_safest_route(client, origin, destination, user, costing=payload.costing)

    guidance = guidance_for_trip(origin, outcome.best.trip) if outcome.best else None
    return _to_response(destination, shelter, outcome, guidance)
