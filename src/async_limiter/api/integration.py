"""Attach a limiter to a FastAPI application."""

import logging

from fastapi import FastAPI

from async_limiter.api.dependencies import get_limit, get_settings
from async_limiter.api.middleware import LimiterMiddleware
from async_limiter.api.router import api_router
from async_limiter.bootstrap import build_limit
from async_limiter.config import LimiterSettings
from async_limiter.limit import LimitFunction

logger = logging.getLogger(__name__)

_STATUS_ROUTE_PATHS = ("/status", "/idle")


def install_limiter(
    app: FastAPI,
    limit: LimitFunction | None = None,
    settings: LimiterSettings | None = None,
) -> LimitFunction:
    """Gate ``app`` requests through ``limit`` and mount the status routes.

    Without ``limit`` the limiter is built from ``settings``; without either,
    the process-wide settings and limiter from ``async_limiter.api.dependencies``
    are used.
    """

    if limit is None and settings is None:
        settings = get_settings()
        limit = get_limit()
    else:
        if settings is None:
            settings = get_settings()
        if limit is None:
            limit = build_limit(settings)
        installed = limit
        app.dependency_overrides[get_limit] = lambda: installed

    prefix = settings.status_route_prefix.rstrip("/")
    app.include_router(api_router, prefix=prefix)
    app.add_middleware(
        LimiterMiddleware,
        limiter=limit.limiter,
        queue_timeout_seconds=settings.http_queue_timeout_seconds,
        exempt_paths=[
            *settings.http_exempt_paths,
            *(f"{prefix}{path}" for path in _STATUS_ROUTE_PATHS),
        ],
    )
    logger.info(
        "Installed limiter on '%s' (limit=%s, status routes under '%s').",
        app.title,
        limit.limiter.limit,
        prefix or "/",
    )
    return limit


__all__ = ["install_limiter"]
