"""Limiter exceptions."""

from enum import StrEnum


class LimiterErrorCode(StrEnum):
    """Stable machine-readable codes carried by limiter errors."""

    QUEUE_OVERFLOW = "ERR_ASYNC_LIMITER_QUEUE_OVERFLOW"
    QUEUE_TIMEOUT = "ERR_ASYNC_LIMITER_QUEUE_TIMEOUT"
    ABORTED = "ERR_ASYNC_LIMITER_ABORTED"
    IDLE_TIMEOUT = "ERR_ASYNC_LIMITER_IDLE_TIMEOUT"


class AsyncLimiterError(Exception):
    """Base class for failures raised by the limiter itself."""

    code: LimiterErrorCode

    def __init__(self, message: str, code: LimiterErrorCode) -> None:
        super().__init__(message)
        self.code = code


class QueueOverflowError(AsyncLimiterError):
    """Raised when a submission arrives while the wait queue is full."""

    def __init__(self, message: str = "Queue overflow: too many tasks are waiting") -> None:
        super().__init__(message, LimiterErrorCode.QUEUE_OVERFLOW)


class QueueTimeoutError(AsyncLimiterError, TimeoutError):
    """Raised when a queued submission waits longer than its queue timeout."""

    def __init__(
        self,
        message: str = "Queue timeout: task waited too long before execution",
    ) -> None:
        super().__init__(message, LimiterErrorCode.QUEUE_TIMEOUT)


class AbortError(AsyncLimiterError):
    """Raised when a cancel token fires before admission or idle."""

    def __init__(self, message: str = "Aborted", reason: object | None = None) -> None:
        super().__init__(message, LimiterErrorCode.ABORTED)
        self.reason = reason


class IdleTimeoutError(AsyncLimiterError, TimeoutError):
    """Raised when an idle wait exceeds its timeout."""

    def __init__(
        self,
        message: str = "Idle timeout: limiter did not become idle in time",
    ) -> None:
        super().__init__(message, LimiterErrorCode.IDLE_TIMEOUT)


class LimiterRangeError(ValueError):
    """Raised for invalid numeric limiter options."""


__all__ = [
    "AbortError",
    "AsyncLimiterError",
    "IdleTimeoutError",
    "LimiterErrorCode",
    "LimiterRangeError",
    "QueueOverflowError",
    "QueueTimeoutError",
]
