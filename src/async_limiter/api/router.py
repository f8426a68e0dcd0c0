"""Top-level API router composition."""

from fastapi import APIRouter

from async_limiter.api.routes import status_router

api_router = APIRouter()
api_router.include_router(status_router)

__all__ = ["api_router"]
