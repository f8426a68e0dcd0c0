"""Cooperative cancellation token used for queue and idle waits."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import suppress

from async_limiter.domain.errors import AbortError

CancelListener = Callable[[], None]


class CancelToken:
    """One-shot cancellation signal with listener registration.

    Cancelling a token only affects limiter waits (queued submissions and idle
    waits). Work that has already been admitted keeps running.
    """

    __slots__ = ("_cancelled", "_listeners", "_reason")

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: object | None = None
        self._listeners: list[CancelListener] = []

    @property
    def cancelled(self) -> bool:
        """Return whether ``cancel`` has been called."""

        return self._cancelled

    @property
    def reason(self) -> object | None:
        """Return the value passed to ``cancel``, if any."""

        return self._reason

    def cancel(self, reason: object | None = None) -> bool:
        """Cancel the token and fire every listener once.

        Returns ``False`` when the token was already cancelled.
        """

        if self._cancelled:
            return False
        self._cancelled = True
        self._reason = reason
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener()
        return True

    def add_listener(self, listener: CancelListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that detaches it.

        Callers check ``cancelled`` before registering; a listener added to an
        already-cancelled token never fires.
        """

        self._listeners.append(listener)

        def remove() -> None:
            with suppress(ValueError):
                self._listeners.remove(listener)

        return remove

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def raise_if_cancelled(self, message: str = "Aborted") -> None:
        """Raise ``AbortError`` when the token is cancelled."""

        if self._cancelled:
            raise AbortError(message, reason=self._reason)

    def __repr__(self) -> str:
        return f"CancelToken(cancelled={self._cancelled!r})"


__all__ = ["CancelListener", "CancelToken"]
