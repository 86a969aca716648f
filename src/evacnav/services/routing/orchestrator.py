"""Obstacle-avoiding route search.

A route is requested between the current position and a destination. When
the returned route passes obstacles more dangerous than the user tolerates,
their positions are added to an exclusion list and the route is requested
again, up to ``max_attempts`` times. The candidate with the lowest danger sum
seen during the run is returned, with a warning attached when even that one
still crosses dangerous obstacles.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol, Sequence

from ...config import settings
from ...errors import RoutingError, SearchCancelled
from ...models.domain import Position, UserProfile
from .models import (
    NO_SAFE_ROUTE_WARNING,
    RouteCandidate,
    RouteTrip,
    SearchOutcome,
    SearchState,
)

logger = logging.getLogger(__name__)

ROUTE_FAILED_MESSAGE = "Failed to fetch a route"


class RouteProvider(Protocol):
    def route_with_obstacles(
        self,
        origin: Position,
        destination: Position,
        exclude: Sequence[Position] | None = None,
        costing: str | None = None,
        language: str | None = None,
    ) -> RouteTrip: ...


class CancellationToken:
    """Cooperative cancellation flag shared between a search and its owner."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise SearchCancelled("Route search was superseded.")


def search_safest_route(
    provider: RouteProvider,
    origin: Position,
    destination: Position,
    user: UserProfile,
    *,
    costing: str | None = None,
    max_attempts: int | None = None,
    token: CancellationToken | None = None,
) -> SearchOutcome:
    """Search for the route with the least exposure to dangerous obstacles.

    Attempts are strictly sequential; the exclusion list passed to attempt N
    contains every high-danger obstacle found in attempts 1..N-1. A routing
    failure ends the run at once with ``error`` set and no route.

    Raises:
        SearchCancelled: ``token`` was cancelled before an attempt started.
    """
    limit = max_attempts if max_attempts is not None else settings.max_route_attempts
    state = SearchState()

    while True:
        if token is not None:
            token.raise_if_cancelled()

        state.attempts += 1
        exclude = state.exclusions.snapshot()
        state.exclusion_history.append(exclude)
        logger.info(
            "Route attempt %d/%d from (%.6f, %.6f) to (%.6f, %.6f) excluding %d location(s)",
            state.attempts,
            limit,
            origin.lat,
            origin.lon,
            destination.lat,
            destination.lon,
            len(exclude),
        )

        try:
            trip = provider.route_with_obstacles(
                origin,
                destination,
                exclude=exclude or None,
                costing=costing,
            )
        except RoutingError as exc:
            logger.warning(f"Route attempt {state.attempts} failed, aborting search: {exc}")
            return SearchOutcome(
                best=None,
                attempts=state.attempts,
                exclusion_history=state.exclusion_history,
                error=str(exc) or ROUTE_FAILED_MESSAGE,
            )

        candidate = RouteCandidate(attempt=state.attempts, trip=trip)
        high_danger = candidate.high_danger(user.evacuation_level)
        if state.consider(candidate):
            logger.info(
                "Attempt %d is the safest so far (danger sum %d)",
                state.attempts,
                candidate.danger_sum,
            )

        if high_danger and state.attempts < limit:
            state.exclusions.extend([obstacle.position for obstacle in high_danger])
            logger.info(
                "Attempt %d crosses %d obstacle(s) above level %d; retrying",
                state.attempts,
                len(high_danger),
                user.evacuation_level,
            )
            continue

        # The returned best may be an earlier attempt than the last one.
        unsafe = high_danger or state.best.high_danger(user.evacuation_level)
        warning = NO_SAFE_ROUTE_WARNING if unsafe else None
        if warning:
            logger.info(
                "No safe route after %d attempt(s); best is attempt %d with danger sum %d",
                state.attempts,
                state.best.attempt,
                state.best.danger_sum,
            )
        return SearchOutcome(
            best=state.best,
            attempts=state.attempts,
            exclusion_history=state.exclusion_history,
            warning=warning,
        )
