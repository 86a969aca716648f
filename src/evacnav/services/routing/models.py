"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ...models.domain import Obstacle, Position

NO_SAFE_ROUTE_WARNING = (
    "No fully safe route was found. Showing the safest available route."
)


@dataclass(slots=True)
class RouteSummary:
    length_km: float
    time_s: float


@dataclass(slots=True)
class RouteTrip:
    """Validated trip returned by the routing engine."""

    summary: RouteSummary
    shapes: List[str]
    obstacles: List[Obstacle]
    raw: dict

    @property
    def shape(self) -> Optional[str]:
        """Encoded shape of the first leg, used for guidance."""
        return self.shapes[0] if self.shapes else None


@dataclass(slots=True)
class RouteCandidate:
    attempt: int
    trip: RouteTrip

    @property
    def danger_sum(self) -> int:
        return sum(int(obstacle.danger_level) for obstacle in self.trip.obstacles)

    def high_danger(self, threshold: int) -> List[Obstacle]:
        return [obstacle for obstacle in self.trip.obstacles if obstacle.danger_level > threshold]


class ExclusionSet:
    """Append-only list of positions the routing engine should avoid."""

    def __init__(self) -> None:
        self._positions: List[Position] = []

    def extend(self, positions: List[Position]) -> None:
        self._positions.extend(positions)

    def snapshot(self) -> List[Position]:
        return list(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self):
        return iter(self._positions)


@dataclass(slots=True)
class SearchState:
    """Mutable state of one orchestration run."""

    attempts: int = 0
    exclusions: ExclusionSet = field(default_factory=ExclusionSet)
    best: Optional[RouteCandidate] = None
    best_danger_sum: float = float("inf")
    exclusion_history: List[List[Position]] = field(default_factory=list)

    def consider(self, candidate: RouteCandidate) -> bool:
        """Keep ``candidate`` if it is strictly safer than the best so far."""
        danger_sum = candidate.danger_sum
        if danger_sum < self.best_danger_sum:
            self.best = candidate
            self.best_danger_sum = danger_sum
            return True
        return False


@dataclass(slots=True)
class SearchOutcome:
    best: Optional[RouteCandidate]
    attempts: int
    exclusion_history: List[List[Position]]
    warning: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.best is not None
