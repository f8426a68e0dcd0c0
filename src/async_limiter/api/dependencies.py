"""Dependency providers for FastAPI routes."""

from functools import lru_cache

from async_limiter.bootstrap import build_limit
from async_limiter.config import LimiterSettings
from async_limiter.limit import LimitFunction


@lru_cache(maxsize=1)
def get_settings() -> LimiterSettings:
    """Return singleton settings."""

    return LimiterSettings()


@lru_cache(maxsize=1)
def get_limit() -> LimitFunction:
    """Return the process-wide limiter facade."""

    return build_limit(get_settings())


__all__ = ["get_limit", "get_settings"]
