"""Turn-by-turn guidance: distance and direction to the next route point."""

from __future__ import annotations

from dataclasses import dataclass

from ...config import settings
from ...models.domain import Position
from ..geospatial import bearing_degrees, haversine_m, nearest_index
from ..routing.models import RouteTrip
from ..routing.polyline import decode_polyline


@dataclass(slots=True)
class Guidance:
    distance_m: float
    bearing_deg: float
    next_index: int
    next_point: tuple[float, float]


def guidance_from_points(position: Position, points: list[tuple[float, float]]) -> Guidance | None:
    # Nearest point is searched in raw degree space, not geodesically.
    nearest = nearest_index(points, position.as_tuple())
    if nearest is None:
        return None
    next_index = min(nearest + 1, len(points) - 1)
    next_lat, next_lon = points[next_index]
    return Guidance(
        distance_m=haversine_m(position.lat, position.lon, next_lat, next_lon),
        bearing_deg=bearing_degrees(position.lat, position.lon, next_lat, next_lon),
        next_index=next_index,
        next_point=(next_lat, next_lon),
    )


def compute_guidance(position: Position, shape: str, precision: int | None = None) -> Guidance | None:
    """Distance (m) and bearing (deg) from ``position`` to the next shape point.

    Returns ``None`` when the shape is empty or cannot be decoded.
    """
    points = decode_polyline(shape, precision or settings.polyline_precision)
    return guidance_from_points(position, points)


def guidance_for_trip(position: Position, trip: RouteTrip, precision: int | None = None) -> Guidance | None:
    if not trip.shape:
        return None
    return compute_guidance(position, trip.shape, precision)
