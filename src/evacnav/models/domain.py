"""Domain models for positions, obstacles, shelters and users."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class DangerLevel(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2


class ObstacleType(IntEnum):
    BLOCK_WALL = 0
    VENDING_MACHINE = 1
    STAIRS = 2
    STEEP_SLOPES = 3
    NARROW_ROADS = 4
    OTHER = 5


@dataclass(frozen=True, slots=True)
class Position:
    """A WGS84 coordinate pair in degrees."""

    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude {self.lat} is outside [-90, 90].")
        if not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"Longitude {self.lon} is outside [-180, 180].")

    @classmethod
    def from_pair(cls, pair: tuple[float, float] | list[float]) -> "Position":
        lat, lon = pair
        return cls(lat=float(lat), lon=float(lon))

    def as_tuple(self) -> tuple[float, float]:
        return (self.lat, self.lon)

    def to_location(self) -> dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


@dataclass(frozen=True, slots=True)
class Obstacle:
    """An obstacle reported by users and returned alongside a route."""

    id: int
    position: Position
    type: ObstacleType
    description: str
    danger_level: DangerLevel
    image_s3_key: Optional[str] = None
    created_at: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Shelter:
    """An evacuation shelter as listed by the backend."""

    id: int
    name: str
    lat: float
    lon: float
    address: Optional[str] = None
    elevation: Optional[float] = None
    tsunami_safety_level: Optional[int] = None

    @property
    def position(self) -> Position:
        return Position(lat=self.lat, lon=self.lon)


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Risk profile of the person evacuating.

    ``evacuation_level`` is the self-reported capability rating (1-5). Any
    obstacle whose danger level is strictly greater than it is considered too
    dangerous to cross.
    """

    evacuation_level: int

    def tolerates(self, danger_level: int) -> bool:
        return danger_level <= self.evacuation_level
