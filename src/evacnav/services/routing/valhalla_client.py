"""HTTP client for the obstacle-aware routing endpoints."""

from __future__ import annotations

import logging
import time
from typing import Sequence

import httpx
from pydantic import ValidationError

from ...config import settings
from ...errors import ConfigurationError, RoutePayloadError, RoutingTransportError
from ...models.domain import Position
from ...schemas.routing import ObstaclePayload, RouteResponsePayload, TripPayload
from ..obstacles import obstacle_from_payload
from .models import RouteSummary, RouteTrip

logger = logging.getLogger(__name__)


class RoutingClient:
    def __init__(
        self,
        base_url: str | None = None,
        costing: str | None = None,
        language: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        auth_token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.resolved_routing_base_url
        if not self.base_url:
            raise ConfigurationError("Routing base URL is not configured.")
        self.base_url = self.base_url.rstrip("/")
        self.costing = costing or settings.routing_costing
        self.language = language or settings.routing_language
        self.timeout = timeout if timeout is not None else settings.routing_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.routing_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.routing_backoff_seconds
        )
        self.auth_token = auth_token
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        headers = {"Content-Type": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            headers=headers,
            transport=self._transport,
        )

    def _post(self, path: str, body: dict) -> dict | list:
        url = f"{self.base_url}{path}"
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.post(url, json=body)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as exc:
                    # 4xx means the request itself is wrong; retrying will not help
                    status_code = exc.response.status_code
                    attempt += 1
                    if status_code < 500 or attempt > self.max_retries:
                        raise RoutingTransportError(
                            f"Routing engine returned HTTP {status_code} for {path}",
                            status_code=status_code,
                        ) from exc
                    time.sleep(self.backoff_seconds * attempt)
                except (httpx.TimeoutException, httpx.NetworkError) as exc:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Routing request to {url} failed after {attempt} attempt(s): {exc}")
                        raise RoutingTransportError(
                            f"Failed to reach routing engine at {self.base_url}: {exc}"
                        ) from exc
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(
                        f"Routing network error, retrying in {wait_time:.1f}s "
                        f"(attempt {attempt}/{self.max_retries}): {exc}"
                    )
                    time.sleep(wait_time)
                except ValueError as exc:
                    raise RoutePayloadError(f"Routing engine returned invalid JSON for {path}") from exc
                except httpx.HTTPError as exc:
                    raise RoutingTransportError(f"Routing request to {path} failed: {exc}") from exc
        finally:
            client.close()

    def route_with_obstacles(
        self,
        origin: Position,
        destination: Position,
        exclude: Sequence[Position] | None = None,
        costing: str | None = None,
        language: str | None = None,
    ) -> RouteTrip:
        """Request a route and the obstacles found along it.

        Raises:
            RoutingTransportError: network or HTTP failure.
            RoutePayloadError: the response did not contain a valid trip.
        """
        body: dict = {
            "locations": [origin.to_location(), destination.to_location()],
            "costing": costing or self.costing,
            "language": language or self.language,
        }
        if exclude:
            body["exclude_locations"] = [position.to_location() for position in exclude]

        data = self._post("/route-with-obstacles", body)
        return parse_route_response(data)

    def locate(self, position: Position, costing: str | None = None) -> dict | None:
        """Find the road nearest to ``position``.

        Returns the first located correlation enriched with ``way_id`` or
        ``None`` when the engine could not be reached.
        """
        body = {
            "locations": [position.to_location()],
            "costing": costing or self.costing,
        }
        try:
            data = self._post("/locate", body)
        except (RoutingTransportError, RoutePayloadError) as exc:
            logger.warning(f"Locate request failed for ({position.lat:.6f}, {position.lon:.6f}): {exc}")
            return None

        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            return None
        located = dict(data[0])
        edges = located.get("edges") or []
        way_id = edges[0].get("way_id") if edges and isinstance(edges[0], dict) else None
        located["way_id"] = way_id
        if "distance" not in located and edges and isinstance(edges[0], dict):
            located["distance"] = edges[0].get("distance")
        return located


def parse_route_response(data: object) -> RouteTrip:
    """Validate a raw routing response and convert it to a ``RouteTrip``.

    Obstacles are read from ``trip.obstacles`` when present, otherwise from the
    top-level ``obstacles`` field the backend adds next to the trip.
    """
    if not isinstance(data, dict):
        raise RoutePayloadError("Routing response is not a JSON object.")
    try:
        payload = RouteResponsePayload.model_validate(data)
    except ValidationError as exc:
        raise RoutePayloadError(f"Routing response failed validation: {exc}") from exc
    items = payload.trip.obstacles if payload.trip.obstacles is not None else payload.obstacles
    return _trip_from_payload(payload.trip, items or [], data["trip"])


def _trip_from_payload(trip: TripPayload, items: list[ObstaclePayload], raw: dict) -> RouteTrip:
    obstacles = []
    for item in items:
        try:
            obstacles.append(obstacle_from_payload(item))
        except ValueError as exc:
            raise RoutePayloadError(f"Obstacle {item.id} has an invalid position: {exc}") from exc
    return RouteTrip(
        summary=RouteSummary(length_km=trip.summary.length, time_s=trip.summary.time),
        shapes=[leg.shape for leg in trip.legs],
        obstacles=obstacles,
        raw=raw,
    )


def check_health(base_url: str | None = None) -> bool:
    """Check that the routing endpoint answers at all.

    Any HTTP response (even 4xx for the empty probe body) means the service is
    reachable; only transport failures count as unhealthy.
    """
    base = base_url or settings.resolved_routing_base_url
    if not base:
        return False
    try:
        response = httpx.post(f"{base.rstrip('/')}/locate", json={"locations": []}, timeout=5.0)
        return response.status_code < 500
    except httpx.HTTPError:
        return False
