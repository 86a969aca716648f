import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from evacnav.data.backend_client import BackendClient
from evacnav.errors import BackendError
from evacnav.models.domain import Position, Shelter
from evacnav.services.shelters import list_shelters, nearest_shelter
from evacnav.services.walks import WalkRecorder, save_walk


def _backend(handler, token=None) -> BackendClient:
    return BackendClient(base_url="http://backend.test/api", auth_token=token, transport=httpx.MockTransport(handler))


def test_list_shelters_skips_malformed_records():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/shelters"
        return httpx.Response(
            200,
            json={
                "items": [
                    {"id": 1, "name": "School", "lat": 33.89, "lon": 135.16, "tsunami_safety_level": 3},
                    {"id": 2, "name": "Broken"},
                ]
            },
        )

    shelters = list_shelters(_backend(handler))

    assert shelters == [Shelter(id=1, name="School", lat=33.89, lon=135.16, tsunami_safety_level=3)]


def test_backend_error_message_is_surfaced():
    client = _backend(lambda request: httpx.Response(401, json={"message": "Unauthorized"}))

    with pytest.raises(BackendError) as excinfo:
        list_shelters(client)

    assert excinfo.value.status_code == 401
    assert str(excinfo.value) == "Unauthorized"


def test_nearest_shelter_by_planar_distance():
    shelters = [
        Shelter(id=1, name="A", lat=33.90, lon=135.20),
        Shelter(id=2, name="B", lat=33.889, lon=135.164),
    ]

    assert nearest_shelter(Position(lat=33.889, lon=135.163), shelters).id == 2
    assert nearest_shelter(Position(lat=33.889, lon=135.163), []) is None


class StepClock:
    def __init__(self):
        self.now = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        value = self.now
        self.now += timedelta(minutes=10)
        return value


def test_walk_recorder_builds_payload():
    recorder = WalkRecorder(clock=StepClock())
    recorder.push(Position(lat=0.0, lon=0.0))  # ignored, not recording yet
    recorder.start()
    recorder.push(Position(lat=33.889, lon=135.163))
    recorder.push(Position(lat=33.890, lon=135.164))
    recorder.stop()

    payload = recorder.to_payload(title="Morning drill")

    assert payload["trace_points"] == [[33.889, 135.163], [33.890, 135.164]]
    assert payload["start_time"] == "2025-01-01T09:00:00+00:00"
    assert payload["end_time"] == "2025-01-01T09:10:00+00:00"
    assert payload["title"] == "Morning drill"


def test_walk_recorder_needs_two_points():
    recorder = WalkRecorder(clock=StepClock())
    recorder.start()
    recorder.push(Position(lat=33.889, lon=135.163))

    with pytest.raises(ValueError):
        recorder.to_payload()

    recorder.stop()
    with pytest.raises(ValueError):
        recorder.to_payload()


def test_save_walk_posts_to_backend():
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(201, json={"id": "walk-1"})

    payload = {
        "trace_points": [[33.889, 135.163], [33.890, 135.164]],
        "start_time": "2025-01-01T09:00:00+00:00",
        "end_time": "2025-01-01T09:10:00+00:00",
        "title": "Drill",
    }
    result = save_walk(_backend(handler, token="tok"), payload)

    assert result == {"id": "walk-1"}
    assert captured[0].method == "POST"
    assert captured[0].url.path == "/api/walked_routes"
    assert captured[0].headers["Authorization"] == "Bearer tok"
    assert json.loads(captured[0].content) == payload
