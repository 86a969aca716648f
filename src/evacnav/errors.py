"""Error taxonomy shared by services and API routes."""

from __future__ import annotations

from enum import IntEnum


class ConfigurationError(ValueError):
    """A required upstream base URL is not configured."""


class RoutingError(Exception):
    """Base class for failures talking to the routing engine."""


class RoutingTransportError(RoutingError):
    """Network or HTTP failure while calling the routing engine."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RoutePayloadError(RoutingError):
    """The routing engine answered, but the payload failed validation."""


class BackendError(Exception):
    """Failure talking to the backend REST API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SearchCancelled(Exception):
    """A route search was superseded before it finished."""


class GeolocationErrorCode(IntEnum):
    # Numeric values follow the W3C GeolocationPositionError codes.
    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


GEOLOCATION_MESSAGES = {
    GeolocationErrorCode.PERMISSION_DENIED: "Location permission was denied.",
    GeolocationErrorCode.POSITION_UNAVAILABLE: "Current position is unavailable.",
    GeolocationErrorCode.TIMEOUT: "Timed out while acquiring the current position.",
}


class GeolocationError(Exception):
    def __init__(self, code: GeolocationErrorCode, detail: str | None = None) -> None:
        self.code = GeolocationErrorCode(code)
        self.detail = detail
        message = GEOLOCATION_MESSAGES[self.code]
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return str(self)
