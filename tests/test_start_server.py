import runpy
from pathlib import Path

import pytest
import uvicorn

SCRIPT = Path(__file__).resolve().parents[1] / "start_server.py"


def test_start_server_uses_port_from_environment(monkeypatch: pytest.MonkeyPatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setenv("PORT", "9001")

    runpy.run_path(str(SCRIPT), run_name="__main__")

    app, kwargs = calls[0]
    assert app == "evacnav.main:app"
    assert kwargs["port"] == 9001
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["proxy_headers"] is True


def test_start_server_defaults_to_port_8000(monkeypatch: pytest.MonkeyPatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append(kwargs))
    monkeypatch.delenv("PORT", raising=False)

    runpy.run_path(str(SCRIPT), run_name="__main__")

    assert calls[0]["port"] == 8000
