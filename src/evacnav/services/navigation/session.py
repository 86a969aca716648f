"""Evacuation session: position updates drive route search and guidance."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future
from typing import Optional, Sequence

from ...errors import SearchCancelled
from ...models.domain import Position, Shelter, UserProfile
from ..routing.models import SearchOutcome
from ..routing.orchestrator import CancellationToken, RouteProvider, search_safest_route
from ..shelters import nearest_shelter
from .geolocation import PositionWatcher
from .guidance import Guidance, guidance_for_trip

logger = logging.getLogger(__name__)

NO_SHELTER_MESSAGE = "No shelter is available."


class EvacuationSession:
    """Keeps the safest route to the nearest shelter up to date.

    Each position update supersedes the running search: its token is
    cancelled and a fresh search (with an empty exclusion list) starts. With
    an ``executor`` searches run in the background; without one they run
    inline in the position callback.
    """

    def __init__(
        self,
        watcher: PositionWatcher,
        provider: RouteProvider,
        user: UserProfile,
        shelters: Sequence[Shelter],
        *,
        costing: str | None = None,
        executor: Executor | None = None,
    ) -> None:
        self.watcher = watcher
        self.provider = provider
        self.user = user
        self.shelters = list(shelters)
        self.costing = costing
        self.executor = executor

        self.shelter: Optional[Shelter] = None
        self.outcome: Optional[SearchOutcome] = None
        self.guidance: Optional[Guidance] = None
        self.error: Optional[str] = None

        self._lock = threading.Lock()
        self._token: Optional[CancellationToken] = None
        self._pending: Optional[Future] = None
        self._watch_id = watcher.subscribe(self.on_position)

    @property
    def searching(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def on_position(self, position: Position) -> None:
        shelter = nearest_shelter(position, self.shelters)
        with self._lock:
            self.shelter = shelter
            if shelter is None:
                self.error = NO_SHELTER_MESSAGE
                return
            if self._token is not None:
                self._token.cancel()
            token = CancellationToken()
            self._token = token

        if self.executor is None:
            self._search(position, shelter.position, token)
        else:
            self._pending = self.executor.submit(self._search, position, shelter.position, token)

        self._refresh_guidance(position)

    def _search(self, origin: Position, destination: Position, token: CancellationToken) -> None:
        try:
            outcome = search_safest_route(
                self.provider,
                origin,
                destination,
                self.user,
                costing=self.costing,
                token=token,
            )
        except SearchCancelled:
            logger.info("Route search superseded by a newer position")
            return

        with self._lock:
            if token.cancelled:
                return
            self.outcome = outcome
            self.error = outcome.error or outcome.warning
        self._refresh_guidance(self.watcher.current or origin)

    def _refresh_guidance(self, position: Position) -> None:
        with self._lock:
            outcome = self.outcome
        if outcome is None or outcome.best is None:
            return
        guidance = guidance_for_trip(position, outcome.best.trip)
        with self._lock:
            self.guidance = guidance

    def close(self) -> None:
        with self._lock:
            if self._token is not None:
                self._token.cancel()
        self.watcher.unsubscribe(self._watch_id)
