"""FastAPI integration public API."""

from async_limiter.api.integration import install_limiter
from async_limiter.api.middleware import LimiterMiddleware
from async_limiter.api.router import api_router

__all__ = ["LimiterMiddleware", "api_router", "install_limiter"]
