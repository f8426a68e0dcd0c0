"""Bounded-concurrency admission gate for asyncio."""

from async_limiter.core import Limiter
from async_limiter.domain import (
    AbortError,
    AsyncLimiterError,
    CancelToken,
    IdleTimeoutError,
    LimiterErrorCode,
    LimiterRangeError,
    LimiterSnapshot,
    QueueOverflowError,
    QueueTimeoutError,
)
from async_limiter.limit import LimitFunction, create_limit

__version__ = "0.1.0"

__all__ = [
    "AbortError",
    "AsyncLimiterError",
    "CancelToken",
    "IdleTimeoutError",
    "LimitFunction",
    "Limiter",
    "LimiterErrorCode",
    "LimiterRangeError",
    "LimiterSnapshot",
    "QueueOverflowError",
    "QueueTimeoutError",
    "__version__",
    "create_limit",
]
