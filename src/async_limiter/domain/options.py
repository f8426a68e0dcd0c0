"""Limiter options and their range checks."""

from __future__ import annotations

import math
from dataclasses import dataclass

from async_limiter.domain.cancellation import CancelToken
from async_limiter.domain.errors import LimiterRangeError


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def validate_limit(limit: float) -> None:
    """Ensure ``limit`` is a positive finite number."""

    if not _is_number(limit) or not math.isfinite(limit) or limit <= 0:
        raise LimiterRangeError(
            f"Limiter limit must be a positive finite number. Received: {limit!r}"
        )


def validate_max_queue(max_queue: float | None) -> None:
    """Ensure ``max_queue`` is ``None``, ``math.inf`` or a finite number >= 0."""

    if max_queue is None:
        return
    if not _is_number(max_queue) or math.isnan(max_queue) or max_queue < 0:
        raise LimiterRangeError(
            f"Limiter max_queue must be a number >= 0 (or None/inf). Received: {max_queue!r}"
        )


def validate_timeout(name: str, seconds: float | None) -> None:
    """Ensure an optional timeout is a finite number >= 0."""

    if seconds is None:
        return
    if not _is_number(seconds) or not math.isfinite(seconds) or seconds < 0:
        raise LimiterRangeError(
            f"{name} must be a finite number >= 0 (or None). Received: {seconds!r}"
        )


@dataclass(slots=True, frozen=True)
class LimiterOptions:
    """Construction-time limiter defaults."""

    max_queue: float | None = None
    queue_timeout_seconds: float | None = None
    cancel_token: CancelToken | None = None

    def __post_init__(self) -> None:
        validate_max_queue(self.max_queue)
        validate_timeout("queue_timeout_seconds", self.queue_timeout_seconds)

    @property
    def queue_capacity(self) -> float:
        """Return the queue capacity with ``None`` meaning unbounded."""

        return math.inf if self.max_queue is None else self.max_queue


__all__ = [
    "LimiterOptions",
    "validate_limit",
    "validate_max_queue",
    "validate_timeout",
]
