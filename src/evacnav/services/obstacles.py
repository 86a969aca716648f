"""Obstacle reports stored by the backend."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from ..data.backend_client import BackendClient
from ..errors import BackendError
from ..models.domain import Obstacle, Position
from ..schemas.backend import ObstacleDraft
from ..schemas.routing import ObstacleModel, ObstaclePayload

logger = logging.getLogger(__name__)


def obstacle_from_payload(item: ObstaclePayload) -> Obstacle:
    """Convert a validated obstacle record; raises ``ValueError`` on a bad position."""
    return Obstacle(
        id=item.id,
        position=Position.from_pair(item.position),
        type=item.type,
        description=item.description,
        danger_level=item.danger_level,
        image_s3_key=item.image_s3_key,
        created_at=item.created_at,
    )


def obstacle_model(obstacle: Obstacle) -> ObstacleModel:
    return ObstacleModel(
        id=obstacle.id,
        position=obstacle.position.as_tuple(),
        type=obstacle.type,
        description=obstacle.description,
        danger_level=obstacle.danger_level,
        image_s3_key=obstacle.image_s3_key,
        created_at=obstacle.created_at,
    )


def _parse_obstacle(record: object) -> Obstacle:
    try:
        return obstacle_from_payload(ObstaclePayload.model_validate(record))
    except (ValidationError, ValueError) as exc:
        raise BackendError(f"Backend returned an invalid obstacle: {exc}") from exc


class ObstacleClient:
    """CRUD access to ``/obstacles`` on the backend."""

    def __init__(self, client: BackendClient) -> None:
        self.client = client

    def list(self) -> list[Obstacle]:
        """All reported obstacles; malformed records are skipped with a warning."""
        data = self.client.get_json("/obstacles")
        obstacles = []
        for record in data.get("items") or []:
            try:
                obstacles.append(_parse_obstacle(record))
            except BackendError as exc:
                logger.warning(f"Skipping malformed obstacle record {record!r}: {exc}")
        logger.info(f"Loaded {len(obstacles)} obstacles from backend")
        return obstacles

    def get(self, obstacle_id: int) -> Obstacle:
        return _parse_obstacle(self.client.get_json(f"/obstacles/{obstacle_id}"))

    def create(self, draft: ObstacleDraft) -> Obstacle:
        obstacle = _parse_obstacle(self.client.post_json("/obstacles", draft.to_backend()))
        logger.info(
            f"Reported obstacle {obstacle.id} (type {obstacle.type.name}, danger {int(obstacle.danger_level)})"
        )
        return obstacle

    def update(self, obstacle_id: int, draft: ObstacleDraft) -> Obstacle:
        return _parse_obstacle(self.client.put_json(f"/obstacles/{obstacle_id}", draft.to_backend()))
