"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import Point

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    return haversine_km(lat1, lon1, lat2, lon2) * 1000.0


def bearing_degrees(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the initial bearing from (lat1, lon1) to (lat2, lon2)."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_lambda = math.radians(lon2 - lon1)
    y = math.sin(delta_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda)
    bearing = math.degrees(math.atan2(y, x))
    # atan2 can give -0.0 or a value that rounds up to 360.0 after the modulo
    bearing = (bearing + 360) % 360
    return 0.0 if bearing >= 360.0 else bearing


def planar_distance(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Euclidean distance in raw degree space.

    Not a geographic distance: it is only meant for ranking nearby points.
    """
    return Point(a).distance(Point(b))


def nearest_index(points: Sequence[tuple[float, float]], target: tuple[float, float]) -> int | None:
    """Index of the point closest to ``target`` in degree space; first wins on ties."""
    if not points:
        return None
    origin = Point(target)
    best_index = 0
    best_distance = math.inf
    for index, point in enumerate(points):
        distance = origin.distance(Point(point))
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index
