"""Limiter wiring from settings."""

import logging

from async_limiter.config import LimiterSettings
from async_limiter.core import Limiter
from async_limiter.limit import LimitFunction

logger = logging.getLogger(__name__)


def build_limiter(settings: LimiterSettings) -> Limiter:
    """Compose a limiter from settings."""

    limiter = Limiter(
        settings.limit,
        max_queue=settings.max_queue,
        queue_timeout_seconds=settings.queue_timeout_seconds,
    )
    logger.info(
        "Built limiter with limit=%s, max_queue=%s, queue_timeout_seconds=%s.",
        settings.limit,
        "unbounded" if settings.max_queue is None else settings.max_queue,
        settings.queue_timeout_seconds,
    )
    return limiter


def build_limit(settings: LimiterSettings) -> LimitFunction:
    """Compose the callable facade from settings."""

    return LimitFunction(build_limiter(settings))


__all__ = ["build_limit", "build_limiter"]
