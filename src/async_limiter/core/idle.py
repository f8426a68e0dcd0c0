"""Idle waiters notified when a limiter drains."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from async_limiter.core.deferred import Deferred
from async_limiter.domain.cancellation import CancelToken
from async_limiter.domain.errors import AbortError, IdleTimeoutError
from async_limiter.domain.options import validate_timeout

logger = logging.getLogger(__name__)

IdleWaiter = Callable[[], None]


class IdleSynchronizer:
    """Registry of one-shot idle waiters, broadcast on drain."""

    def __init__(self, is_idle: Callable[[], bool]) -> None:
        self._is_idle = is_idle
        self._waiters: set[IdleWaiter] = set()

    @property
    def waiter_count(self) -> int:
        return len(self._waiters)

    def notify(self) -> None:
        """Fire every registered waiter when the owner is idle."""

        if not self._is_idle() or not self._waiters:
            return
        logger.debug("Limiter idle; notifying %d waiter(s).", len(self._waiters))
        for waiter in list(self._waiters):
            waiter()

    async def wait(
        self,
        *,
        cancel_token: CancelToken | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """Block until the owner is idle, the token fires, or the timeout elapses."""

        validate_timeout("timeout_seconds", timeout_seconds)
        if cancel_token is not None:
            cancel_token.raise_if_cancelled("Idle wait aborted")
        if self._is_idle():
            return

        loop = asyncio.get_running_loop()
        deferred = Deferred(loop)
        cleanups: list[Callable[[], None]] = []

        def teardown() -> None:
            actions = cleanups[:]
            cleanups.clear()
            for action in actions:
                action()

        def finish(error: BaseException | None = None) -> None:
            if deferred.settled:
                return
            teardown()
            if error is None:
                deferred.resolve()
            else:
                deferred.reject(error)

        def waiter() -> None:
            finish()

        self._waiters.add(waiter)
        cleanups.append(lambda: self._waiters.discard(waiter))

        if cancel_token is not None:
            token = cancel_token
            cleanups.append(
                token.add_listener(
                    lambda: finish(AbortError("Idle wait aborted", reason=token.reason))
                )
            )

        if timeout_seconds is not None:
            handle = loop.call_later(timeout_seconds, lambda: finish(IdleTimeoutError()))
            cleanups.append(handle.cancel)

        self.notify()
        try:
            await deferred
        finally:
            teardown()


__all__ = ["IdleSynchronizer", "IdleWaiter"]
