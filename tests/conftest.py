from __future__ import annotations

from typing import Sequence

import pytest

from evacnav.models.domain import DangerLevel, Obstacle, ObstacleType, Position
from evacnav.services.routing.models import RouteSummary, RouteTrip
from evacnav.services.routing.polyline import encode_polyline

# A short walk in Kobe, used as a route shape in several tests.
SHAPE_POINTS = [
    (33.8880, 135.1620),
    (33.8889, 135.1629),
    (33.8900, 135.1640),
    (33.8910, 135.1650),
]


def make_obstacle(oid: int, danger: int, lat: float = 33.889, lon: float = 135.163) -> Obstacle:
    return Obstacle(
        id=oid,
        position=Position(lat=lat + oid * 0.0001, lon=lon),
        type=ObstacleType.BLOCK_WALL,
        description=f"Obstacle {oid}",
        danger_level=DangerLevel(danger),
    )


def make_trip(*dangers: int, first_id: int = 1) -> RouteTrip:
    obstacles = [make_obstacle(first_id + i, danger) for i, danger in enumerate(dangers)]
    return RouteTrip(
        summary=RouteSummary(length_km=0.5, time_s=420.0),
        shapes=[encode_polyline(SHAPE_POINTS, 6)],
        obstacles=obstacles,
        raw={"summary": {"length": 0.5, "time": 420.0}},
    )


class ScriptedProvider:
    """Routing provider returning canned trips (or raising) in order."""

    def __init__(self, responses: Sequence[object]):
        self.responses = list(responses)
        self.calls: list[list[Position]] = []
        self.costings: list[str | None] = []

    def route_with_obstacles(self, origin, destination, exclude=None, costing=None, language=None):
        self.calls.append(list(exclude or []))
        self.costings.append(costing)
        response = self.responses.pop(0)
        if callable(response) and not isinstance(response, RouteTrip):
            response = response()
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def origin() -> Position:
    return Position(lat=33.8890, lon=135.1630)


@pytest.fixture
def destination() -> Position:
    return Position(lat=33.8910, lon=135.1650)
