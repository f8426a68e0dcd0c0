"""Domain public API."""

from async_limiter.domain.cancellation import CancelListener, CancelToken
from async_limiter.domain.errors import (
    AbortError,
    AsyncLimiterError,
    IdleTimeoutError,
    LimiterErrorCode,
    LimiterRangeError,
    QueueOverflowError,
    QueueTimeoutError,
)
from async_limiter.domain.models import (
    IdleResponse,
    LimiterSnapshot,
    LimiterStatusResponse,
)
from async_limiter.domain.options import (
    LimiterOptions,
    validate_limit,
    validate_max_queue,
    validate_timeout,
)

__all__ = [
    "AbortError",
    "AsyncLimiterError",
    "CancelListener",
    "CancelToken",
    "IdleResponse",
    "IdleTimeoutError",
    "LimiterErrorCode",
    "LimiterOptions",
    "LimiterRangeError",
    "LimiterSnapshot",
    "LimiterStatusResponse",
    "QueueOverflowError",
    "QueueTimeoutError",
    "validate_limit",
    "validate_max_queue",
    "validate_timeout",
]
