"""Route modules public API."""

from async_limiter.api.routes.status import router as status_router

__all__ = ["status_router"]
