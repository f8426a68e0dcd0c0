"""Callable facade over a ``Limiter``."""

from __future__ import annotations

from typing import TypeVar

from async_limiter.core import Limiter, Task
from async_limiter.domain.cancellation import CancelToken

T = TypeVar("T")


class LimitFunction:
    """Call-through wrapper exposing limiter counters.

    Example:
        >>> limit = create_limit(2)
        >>> result = await limit(fetch_page)
        >>> limit.active_count, limit.pending_count
    """

    __slots__ = ("_limiter",)

    def __init__(self, limiter: Limiter) -> None:
        self._limiter = limiter

    async def __call__(
        self,
        fn: Task[T],
        *,
        cancel_token: CancelToken | None = None,
        queue_timeout_seconds: float | None = None,
    ) -> T:
        return await self._limiter.run(
            fn,
            cancel_token=cancel_token,
            queue_timeout_seconds=queue_timeout_seconds,
        )

    @property
    def limiter(self) -> Limiter:
        return self._limiter

    @property
    def active_count(self) -> int:
        return self._limiter.active_count

    @property
    def pending_count(self) -> int:
        return self._limiter.pending_count

    async def on_idle(
        self,
        *,
        cancel_token: CancelToken | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        await self._limiter.on_idle(cancel_token=cancel_token, timeout_seconds=timeout_seconds)


def create_limit(
    limit: float,
    *,
    max_queue: float | None = None,
    queue_timeout_seconds: float | None = None,
    cancel_token: CancelToken | None = None,
) -> LimitFunction:
    """Build a ``Limiter`` and wrap it in a ``LimitFunction``."""

    return LimitFunction(
        Limiter(
            limit,
            max_queue=max_queue,
            queue_timeout_seconds=queue_timeout_seconds,
            cancel_token=cancel_token,
        )
    )


__all__ = ["LimitFunction", "create_limit"]
