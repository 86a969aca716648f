"""Shared request dependencies."""

from __future__ import annotations

from fastapi import Header


def bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    """Extract the Firebase ID token so it can be forwarded to the backend."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
