"""Bounded-concurrency admission gate with FIFO wait queue."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

from async_limiter.core.deferred import Deferred
from async_limiter.core.idle import IdleSynchronizer
from async_limiter.core.wait_queue import QueueEntry, WaitQueue
from async_limiter.domain.cancellation import CancelToken
from async_limiter.domain.errors import AbortError, QueueOverflowError, QueueTimeoutError
from async_limiter.domain.models import LimiterSnapshot
from async_limiter.domain.options import LimiterOptions, validate_limit, validate_timeout

logger = logging.getLogger(__name__)

T = TypeVar("T")

Task = Callable[[], T | Awaitable[T]]


class Limiter:
    """Admit at most ``limit`` tasks at once and queue the rest in arrival order.

    ``cancel_token`` and ``queue_timeout_seconds`` only apply while a task waits
    in the queue. A task that has started is never interrupted by the limiter.
    """

    def __init__(
        self,
        limit: float,
        *,
        max_queue: float | None = None,
        queue_timeout_seconds: float | None = None,
        cancel_token: CancelToken | None = None,
    ) -> None:
        validate_limit(limit)
        self._limit = limit
        self._options = LimiterOptions(
            max_queue=max_queue,
            queue_timeout_seconds=queue_timeout_seconds,
            cancel_token=cancel_token,
        )
        self._active = 0
        self._queue = WaitQueue()
        self._idle = IdleSynchronizer(self._is_idle)

    @property
    def limit(self) -> float:
        """Return the maximum number of concurrently admitted tasks."""

        return self._limit

    @property
    def max_queue(self) -> float | None:
        return self._options.max_queue

    @property
    def queue_timeout_seconds(self) -> float | None:
        """Return the default queue wait timeout, if any."""

        return self._options.queue_timeout_seconds

    @property
    def active_count(self) -> int:
        """Return the number of admitted, still-running tasks."""

        return self._active

    @property
    def pending_count(self) -> int:
        """Return the number of tasks waiting for a slot."""

        return len(self._queue)

    def snapshot(self) -> LimiterSnapshot:
        return LimiterSnapshot(
            limit=self._limit,
            max_queue=self._options.max_queue,
            active_count=self._active,
            pending_count=len(self._queue),
        )

    async def run(
        self,
        fn: Task[T],
        *,
        cancel_token: CancelToken | None = None,
        queue_timeout_seconds: float | None = None,
    ) -> T:
        """Run ``fn`` once a slot is available and return its result.

        ``fn`` may be a plain or async callable. Its exceptions propagate
        unchanged; the slot is released on every exit path.
        """

        await self._acquire(
            cancel_token=cancel_token,
            queue_timeout_seconds=queue_timeout_seconds,
        )
        try:
            result = fn()
            if inspect.isawaitable(result):
                result = await result
            return result
        finally:
            self._release()

    @asynccontextmanager
    async def acquire(
        self,
        *,
        cancel_token: CancelToken | None = None,
        queue_timeout_seconds: float | None = None,
    ) -> AsyncIterator[None]:
        """Hold one slot for the duration of the ``async with`` block."""

        await self._acquire(
            cancel_token=cancel_token,
            queue_timeout_seconds=queue_timeout_seconds,
        )
        try:
            yield
        finally:
            self._release()

    async def on_idle(
        self,
        *,
        cancel_token: CancelToken | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """Wait until nothing is running and nothing is queued."""

        await self._idle.wait(cancel_token=cancel_token, timeout_seconds=timeout_seconds)

    def _is_idle(self) -> bool:
        return self._active == 0 and len(self._queue) == 0

    async def _acquire(
        self,
        *,
        cancel_token: CancelToken | None,
        queue_timeout_seconds: float | None,
    ) -> None:
        token = cancel_token if cancel_token is not None else self._options.cancel_token
        timeout_seconds = (
            queue_timeout_seconds
            if queue_timeout_seconds is not None
            else self._options.queue_timeout_seconds
        )
        validate_timeout("queue_timeout_seconds", timeout_seconds)

        if token is not None:
            token.raise_if_cancelled("Task aborted before start")

        if self._active < self._limit:
            self._active += 1
            return

        if len(self._queue) >= self._options.queue_capacity:
            raise QueueOverflowError(
                f"Queue overflow: pending={len(self._queue)}, "
                f"max_queue={self._options.max_queue}"
            )

        await self._wait_for_turn(token, timeout_seconds)

    def _release(self) -> None:
        """Hand the freed slot to the next live entry, or give it back."""

        while True:
            entry = self._queue.pop_next()
            if entry is None:
                self._active -= 1
                self._idle.notify()
                return

            entry.remove()
            if entry.deferred.resolve():
                logger.debug("Slot handed to queued task; pending=%d.", len(self._queue))
                return

    async def _wait_for_turn(
        self,
        token: CancelToken | None,
        timeout_seconds: float | None,
    ) -> None:
        loop = asyncio.get_running_loop()
        entry = QueueEntry(Deferred(loop))

        def remove_from_queue() -> None:
            if self._queue.discard(entry):
                self._idle.notify()

        if token is not None:
            abort_token = token

            def on_abort() -> None:
                remove_from_queue()
                entry.deferred.reject(
                    AbortError(
                        "Task aborted while waiting in queue",
                        reason=abort_token.reason,
                    )
                )

            entry.add_cleanup(token.add_listener(on_abort))

        if timeout_seconds is not None:
            started_at = loop.time()

            def on_timeout() -> None:
                remove_from_queue()
                waited = loop.time() - started_at
                entry.deferred.reject(QueueTimeoutError(f"Task waited {waited:.3f}s in queue"))

            handle = loop.call_later(timeout_seconds, on_timeout)
            entry.add_cleanup(handle.cancel)

        self._queue.append(entry)
        logger.debug(
            "Task queued; active=%d, pending=%d.",
            self._active,
            len(self._queue),
        )

        try:
            await entry.deferred
        except asyncio.CancelledError:
            if entry.deferred.resolved:
                # The slot was already handed over; pass it on.
                self._release()
            else:
                remove_from_queue()
            raise

    def __repr__(self) -> str:
        return (
            f"Limiter(limit={self._limit!r}, active={self._active}, "
            f"pending={len(self._queue)})"
        )


__all__ = ["Limiter", "Task"]
