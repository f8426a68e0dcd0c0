"""Single-assignment settlement handle backed by an asyncio future."""

from __future__ import annotations

import asyncio
from collections.abc import Generator
from typing import Any


class Deferred:
    """Resolve-or-reject-once waiter.

    ``resolve`` and ``reject`` report whether they settled the waiter. A
    ``False`` return means another path (timeout, abort, or cancellation of the
    awaiting task) got there first and the call had no effect.
    """

    __slots__ = ("_future",)

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        if loop is None:
            loop = asyncio.get_running_loop()
        self._future: asyncio.Future[None] = loop.create_future()

    @property
    def settled(self) -> bool:
        return self._future.done()

    @property
    def resolved(self) -> bool:
        """Return whether the waiter settled through ``resolve``."""

        future = self._future
        return future.done() and not future.cancelled() and future.exception() is None

    def resolve(self) -> bool:
        if self._future.done():
            return False
        self._future.set_result(None)
        return True

    def reject(self, error: BaseException) -> bool:
        if self._future.done():
            return False
        self._future.set_exception(error)
        return True

    def __await__(self) -> Generator[Any, None, None]:
        return self._future.__await__()


__all__ = ["Deferred"]
