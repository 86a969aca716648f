"""Shelter listing and nearest-shelter selection."""

from __future__ import annotations

import logging
from typing import Sequence

from ..data.backend_client import BackendClient
from ..models.domain import Position, Shelter
from .geospatial import nearest_index

logger = logging.getLogger(__name__)


def _shelter_from_record(record: dict) -> Shelter:
    return Shelter(
        id=int(record["id"]),
        name=str(record.get("name", "")),
        lat=float(record["lat"]),
        lon=float(record["lon"]),
        address=record.get("address"),
        elevation=record.get("elevation"),
        tsunami_safety_level=record.get("tsunami_safety_level"),
    )


def list_shelters(client: BackendClient) -> list[Shelter]:
    """Fetch every shelter from the backend.

    Records missing coordinates are skipped with a warning.
    """
    data = client.get_json("/shelters")
    items = data.get("items") or []
    shelters = []
    for record in items:
        try:
            shelters.append(_shelter_from_record(record))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(f"Skipping malformed shelter record {record!r}: {exc}")
    logger.info(f"Loaded {len(shelters)} shelters from backend")
    return shelters


def nearest_shelter(position: Position, shelters: Sequence[Shelter]) -> Shelter | None:
    """Closest shelter by straight-line distance in degree space."""
    index = nearest_index([(shelter.lat, shelter.lon) for shelter in shelters], position.as_tuple())
    if index is None:
        return None
    return shelters[index]
