import json

import httpx
import pytest

from evacnav.errors import ConfigurationError, RoutePayloadError, RoutingTransportError
from evacnav.models.domain import DangerLevel, ObstacleType, Position
from evacnav.services.routing.valhalla_client import RoutingClient, parse_route_response

ORIGIN = Position(lat=33.889, lon=135.163)
DESTINATION = Position(lat=33.891, lon=135.165)


def _trip_payload(obstacles=None):
    trip = {
        "summary": {"length": 0.42, "time": 360.0},
        "legs": [{"shape": "_izlhA~rlgdF_{geC~ywl@", "summary": {"length": 0.42, "time": 360.0}}],
        "status": 0,
        "status_message": "Found route between points",
    }
    if obstacles is not None:
        trip["obstacles"] = obstacles
    return {"trip": trip, "units": "kilometers", "language": "ja-JP"}


def _client(handler, **kwargs) -> RoutingClient:
    return RoutingClient(
        base_url="http://routing.test/",
        transport=httpx.MockTransport(handler),
        backoff_seconds=0.0,
        **kwargs,
    )


def test_route_request_body_and_parsing():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json=_trip_payload(
                [
                    {
                        "id": 7,
                        "position": [33.8895, 135.1635],
                        "type": 2,
                        "description": "Stairs",
                        "dangerLevel": 2,
                        "createdAt": "2025-01-01T00:00:00Z",
                    }
                ]
            ),
        )

    client = _client(handler, auth_token="firebase-token")
    trip = client.route_with_obstacles(ORIGIN, DESTINATION)

    request = requests[0]
    body = json.loads(request.content)
    assert request.url == "http://routing.test/route-with-obstacles"
    assert request.headers["Authorization"] == "Bearer firebase-token"
    assert body["locations"] == [{"lat": 33.889, "lon": 135.163}, {"lat": 33.891, "lon": 135.165}]
    assert body["costing"] == "pedestrian"
    assert "exclude_locations" not in body

    assert trip.summary.length_km == pytest.approx(0.42)
    assert trip.shape == "_izlhA~rlgdF_{geC~ywl@"
    assert len(trip.obstacles) == 1
    obstacle = trip.obstacles[0]
    assert obstacle.id == 7
    assert obstacle.type is ObstacleType.STAIRS
    assert obstacle.danger_level is DangerLevel.HIGH
    assert obstacle.position == Position(lat=33.8895, lon=135.1635)


def test_exclusions_and_costing_are_sent():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=_trip_payload())

    client = _client(handler)
    client.route_with_obstacles(
        ORIGIN,
        DESTINATION,
        exclude=[Position(lat=33.8895, lon=135.1635)],
        costing="auto",
    )

    assert bodies[0]["exclude_locations"] == [{"lat": 33.8895, "lon": 135.1635}]
    assert bodies[0]["costing"] == "auto"


def test_missing_obstacles_field_is_empty_list():
    client = _client(lambda request: httpx.Response(200, json=_trip_payload()))

    trip = client.route_with_obstacles(ORIGIN, DESTINATION)

    assert trip.obstacles == []


def test_top_level_obstacles_next_to_trip():
    payload = _trip_payload()
    payload["obstacles"] = [
        {"id": 3, "position": [33.8897, 135.1637], "type": 0, "description": "Block wall", "dangerLevel": 2},
        {"id": 4, "position": [33.8899, 135.1639], "type": 4, "dangerLevel": 1},
    ]
    client = _client(lambda request: httpx.Response(200, json=payload))

    trip = client.route_with_obstacles(ORIGIN, DESTINATION)

    assert [obstacle.id for obstacle in trip.obstacles] == [3, 4]
    assert trip.obstacles[0].danger_level is DangerLevel.HIGH
    assert trip.obstacles[1].type is ObstacleType.NARROW_ROADS
    assert trip.obstacles[0].position == Position(lat=33.8897, lon=135.1637)


def test_obstacles_inside_trip_take_precedence():
    payload = _trip_payload([{"id": 7, "position": [33.8895, 135.1635], "type": 2, "dangerLevel": 2}])
    payload["obstacles"] = [{"id": 8, "position": [33.8896, 135.1636], "type": 2, "dangerLevel": 0}]

    trip = parse_route_response(payload)

    assert [obstacle.id for obstacle in trip.obstacles] == [7]


def test_malformed_top_level_obstacle_is_payload_error():
    payload = _trip_payload()
    payload["obstacles"] = [{"id": 1, "position": [133.8, 135.1], "type": 0, "dangerLevel": 1}]

    with pytest.raises(RoutePayloadError):
        parse_route_response(payload)


def test_unknown_danger_level_fails_fast():
    payload = _trip_payload([{"id": 1, "position": [33.8, 135.1], "type": 0, "dangerLevel": 9}])

    with pytest.raises(RoutePayloadError):
        parse_route_response(payload)


def test_missing_trip_is_payload_error():
    with pytest.raises(RoutePayloadError):
        parse_route_response({"units": "kilometers"})


def test_http_error_raises_transport_error_without_retry():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500, json={"message": "internal"})

    client = _client(handler, max_retries=0)

    with pytest.raises(RoutingTransportError) as excinfo:
        client.route_with_obstacles(ORIGIN, DESTINATION)

    assert excinfo.value.status_code == 500
    assert len(calls) == 1


def test_client_errors_are_not_retried():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(400, json={"message": "bad locations"})

    client = _client(handler, max_retries=3)

    with pytest.raises(RoutingTransportError):
        client.route_with_obstacles(ORIGIN, DESTINATION)

    assert len(calls) == 1


def test_server_errors_are_retried_when_configured():
    responses = [httpx.Response(503), httpx.Response(200, json=_trip_payload())]

    client = _client(lambda request: responses.pop(0), max_retries=1)
    trip = client.route_with_obstacles(ORIGIN, DESTINATION)

    assert trip.obstacles == []
    assert responses == []


def test_network_error_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    with pytest.raises(RoutingTransportError):
        client.route_with_obstacles(ORIGIN, DESTINATION)


def test_invalid_json_is_payload_error():
    client = _client(lambda request: httpx.Response(200, content=b"<html>"))

    with pytest.raises(RoutePayloadError):
        client.route_with_obstacles(ORIGIN, DESTINATION)


def test_locate_extracts_way_id():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/locate"
        return httpx.Response(
            200,
            json=[{"input_lat": 33.889, "input_lon": 135.163, "edges": [{"way_id": 4242, "distance": 3.5}]}],
        )

    located = _client(handler).locate(ORIGIN)

    assert located["way_id"] == 4242
    assert located["distance"] == 3.5


def test_locate_returns_none_on_failure():
    located = _client(lambda request: httpx.Response(502)).locate(ORIGIN)

    assert located is None


def test_missing_base_url(monkeypatch):
    from evacnav.config import settings

    monkeypatch.setattr(settings, "backend_base_url", None)
    monkeypatch.setattr(settings, "routing_base_url", None)

    with pytest.raises(ConfigurationError):
        RoutingClient()
