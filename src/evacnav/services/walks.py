"""GPS walk recording and upload."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..data.backend_client import BackendClient
from ..models.domain import Position

logger = logging.getLogger(__name__)

DEFAULT_WALK_TITLE = "New walk"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WalkRecorder:
    """Collects trace points between ``start()`` and ``stop()``."""

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock
        self.points: List[Position] = []
        self.started_at: Optional[datetime] = None
        self.ended_at: Optional[datetime] = None
        self.recording = False

    def start(self) -> None:
        self.points = []
        self.started_at = self._clock()
        self.ended_at = None
        self.recording = True

    def push(self, position: Position) -> None:
        if self.recording:
            self.points.append(position)

    def stop(self) -> None:
        if not self.recording:
            return
        self.recording = False
        self.ended_at = self._clock()

    def to_payload(self, title: str = DEFAULT_WALK_TITLE) -> dict:
        if self.recording:
            raise ValueError("Stop recording before saving the walk.")
        if self.started_at is None or self.ended_at is None or len(self.points) < 2:
            raise ValueError("Not enough data: a walk needs at least two points and a start and end time.")
        return {
            "trace_points": [[point.lat, point.lon] for point in self.points],
            "start_time": self.started_at.isoformat(),
            "end_time": self.ended_at.isoformat(),
            "title": title,
        }


def save_walk(client: BackendClient, payload: dict) -> dict:
    """Send a recorded walk to the backend, which map-matches and stores it."""
    if len(payload.get("trace_points") or []) < 2:
        raise ValueError("A walk needs at least two trace points.")
    result = client.post_json("/walked_routes", payload)
    logger.info(f"Saved walk with {len(payload['trace_points'])} points")
    return result
