"""HTTP client for the evacuation backend REST API."""

from __future__ import annotations

import logging

import httpx

from ..config import settings
from ..errors import BackendError, ConfigurationError

logger = logging.getLogger(__name__)


class BackendClient:
    """Thin JSON client; Firebase ID tokens are forwarded as bearer tokens."""

    def __init__(
        self,
        base_url: str | None = None,
        auth_token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.backend_base_url
        if not self.base_url:
            raise ConfigurationError("Backend base URL is not configured.")
        self.base_url = self.base_url.rstrip("/")
        self.auth_token = auth_token
        self.timeout = timeout
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        headers = {"Content-Type": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return httpx.Client(timeout=self.timeout, headers=headers, transport=self._transport)

    def request(self, method: str, path: str, json: dict | None = None) -> dict:
        url = f"{self.base_url}/{path.lstrip('/')}"
        with self._get_client() as client:
            try:
                response = client.request(method, url, json=json)
            except httpx.HTTPError as exc:
                logger.warning(f"Backend request {method} {url} failed: {exc}")
                raise BackendError(f"Failed to reach backend at {self.base_url}: {exc}") from exc

        if response.status_code >= 400:
            raise BackendError(_error_message(response), status_code=response.status_code)
        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise BackendError(f"Backend returned invalid JSON for {path}", status_code=response.status_code) from exc

    def get_json(self, path: str) -> dict:
        return self.request("GET", path)

    def post_json(self, path: str, payload: dict) -> dict:
        return self.request("POST", path, json=payload)

    def put_json(self, path: str, payload: dict) -> dict:
        return self.request("PUT", path, json=payload)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return f"An error occurred ({response.status_code})"
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return "Something went wrong"
