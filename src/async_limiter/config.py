"""Limiter settings."""

import math
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class LimiterSettings(BaseSettings):
    """Limiter defaults loaded from environment variables."""

    limit: int = 10
    max_queue: int | None = None
    queue_timeout_seconds: float | None = None
    http_queue_timeout_seconds: float | None = None
    http_exempt_paths: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["/healthz"]
    )
    status_route_prefix: str = "/limiter"

    @field_validator("http_exempt_paths", mode="before")
    @classmethod
    def parse_csv_list(cls, value: object) -> object:
        """Support comma-separated env var values in addition to JSON arrays."""

        if not isinstance(value, str):
            return value
        return [item.strip() for item in value.split(",") if item.strip()]

    @model_validator(mode="after")
    def validate_limiter_settings(self) -> "LimiterSettings":
        """Ensure numeric limiter settings are in range."""

        if self.limit < 1:
            raise ValueError("ASYNC_LIMITER_LIMIT must be >= 1.")
        if self.max_queue is not None and self.max_queue < 0:
            raise ValueError("ASYNC_LIMITER_MAX_QUEUE must be >= 0.")
        for env_name, value in (
            ("ASYNC_LIMITER_QUEUE_TIMEOUT_SECONDS", self.queue_timeout_seconds),
            ("ASYNC_LIMITER_HTTP_QUEUE_TIMEOUT_SECONDS", self.http_queue_timeout_seconds),
        ):
            if value is not None and (not math.isfinite(value) or value < 0):
                raise ValueError(f"{env_name} must be a finite number >= 0.")
        if not self.status_route_prefix.startswith("/"):
            raise ValueError("ASYNC_LIMITER_STATUS_ROUTE_PREFIX must start with '/'.")
        return self

    model_config = SettingsConfigDict(env_prefix="ASYNC_LIMITER_", extra="ignore")


__all__ = ["LimiterSettings"]
