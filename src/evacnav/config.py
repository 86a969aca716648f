"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="EVAC_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Evacuation Navigator API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logger level.")
    backend_base_url: Optional[str] = Field(
        default=None,
        description="Base URL of the backend REST API (shelters, walked routes).",
    )
    routing_base_url: Optional[str] = Field(
        default=None,
        description="Base URL exposing /route-with-obstacles and /locate. Falls back to backend_base_url.",
    )
    routing_costing: Literal["pedestrian", "auto", "bicycle"] = Field(
        default="pedestrian",
        description="Default costing profile sent to the routing engine.",
    )
    routing_language: str = Field(default="ja-JP")
    routing_timeout_seconds: float = Field(default=15.0, gt=0.0)
    routing_max_retries: int = Field(
        default=0,
        ge=0,
        description="Transport-level retries per routing request.",
    )
    routing_backoff_seconds: float = Field(default=1.0, ge=0.0)
    polyline_precision: int = Field(
        default=6,
        ge=5,
        le=6,
        description="Decimal precision of encoded route shapes (Valhalla uses 6).",
    )
    max_route_attempts: int = Field(default=3, ge=1)
    geolocation_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geolocation_maximum_age_seconds: float = Field(default=5.0, ge=0.0)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @property
    def resolved_routing_base_url(self) -> Optional[str]:
        return self.routing_base_url or self.backend_base_url

    @field_validator("backend_base_url", "routing_base_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().rstrip("/")
            return value or None
        return value

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
