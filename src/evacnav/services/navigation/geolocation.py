"""Continuous position watch.

Position samples are pushed in by whatever owns the device feed (a websocket
handler, a GPS reader, a test). The watcher keeps the latest position and
fans it out to subscribers.
"""

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from ...config import settings
from ...errors import GeolocationError, GeolocationErrorCode
from ...models.domain import Position

logger = logging.getLogger(__name__)

PositionCallback = Callable[[Position], None]


@dataclass(slots=True)
class WatchOptions:
    enable_high_accuracy: bool = True
    maximum_age: float = field(default_factory=lambda: settings.geolocation_maximum_age_seconds)
    timeout: float = field(default_factory=lambda: settings.geolocation_timeout_seconds)


@dataclass(slots=True)
class PositionSample:
    position: Position
    timestamp: float
    accuracy: Optional[float] = None


class PositionWatcher:
    """Latest-position holder with subscribe/unsubscribe semantics.

    Every accepted sample replaces the current position as-is. Errors are
    recorded and reported to the owner; the watch is never retried
    automatically.
    """

    def __init__(
        self,
        options: WatchOptions | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.options = options or WatchOptions()
        self._clock = clock
        self._subscribers: Dict[int, PositionCallback] = {}
        self._ids = itertools.count(1)
        self._started_at = clock()
        self._last_sample_at: Optional[float] = None
        self.current: Optional[Position] = None
        self.error: Optional[GeolocationError] = None
        self.closed = False

    def __enter__(self) -> "PositionWatcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def subscribe(self, callback: PositionCallback) -> int:
        if self.closed:
            raise RuntimeError("Cannot subscribe to a closed position watcher.")
        watch_id = next(self._ids)
        self._subscribers[watch_id] = callback
        return watch_id

    def unsubscribe(self, watch_id: int) -> None:
        self._subscribers.pop(watch_id, None)

    def push(self, sample: PositionSample) -> bool:
        """Accept a new sample. Returns False if it was ignored."""
        if self.closed:
            return False
        now = self._clock()
        if now - sample.timestamp > self.options.maximum_age:
            logger.debug(f"Ignoring cached position older than {self.options.maximum_age:.1f}s")
            return False

        self.current = sample.position
        self._last_sample_at = now
        self.error = None
        for callback in list(self._subscribers.values()):
            callback(sample.position)
        return True

    def fail(self, code: GeolocationErrorCode, detail: str | None = None) -> GeolocationError:
        error = GeolocationError(code, detail)
        self.error = error
        logger.warning(f"Geolocation error: {error}")
        return error

    def check_timeout(self) -> Optional[GeolocationError]:
        """Record a TIMEOUT error if no sample arrived within ``options.timeout``."""
        if self.closed:
            return None
        reference = self._last_sample_at if self._last_sample_at is not None else self._started_at
        if self._clock() - reference > self.options.timeout:
            return self.fail(GeolocationErrorCode.TIMEOUT)
        return None

    def close(self) -> None:
        self._subscribers.clear()
        self.closed = True
