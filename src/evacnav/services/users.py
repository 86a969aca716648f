"""Signed-in user profile lookup."""

from __future__ import annotations

from pydantic import ValidationError

from ..data.backend_client import BackendClient
from ..errors import BackendError
from ..models.domain import UserProfile
from ..schemas.backend import UserPayload


def get_current_user(client: BackendClient) -> UserProfile:
    """Risk profile of the user owning the client's bearer token."""
    try:
        payload = UserPayload.model_validate(client.get_json("/users/me"))
    except ValidationError as exc:
        raise BackendError(f"Backend returned an invalid user profile: {exc}") from exc
    return UserProfile(evacuation_level=payload.evacuation_level)
