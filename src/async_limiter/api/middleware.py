"""ASGI middleware admitting HTTP requests through a limiter."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from contextlib import AsyncExitStack

from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from async_limiter.core import Limiter
from async_limiter.domain.errors import (
    AbortError,
    AsyncLimiterError,
    QueueOverflowError,
    QueueTimeoutError,
)

logger = logging.getLogger(__name__)

_RETRY_AFTER_SECONDS = "1"


class LimiterMiddleware:
    """Gate HTTP requests through a ``Limiter``.

    Requests over the queue capacity, that wait longer than
    ``queue_timeout_seconds``, or that are aborted by the limiter's default
    cancel token get a 503 without reaching the app. Exempt paths (and the
    paths below them) and non-HTTP scopes bypass the limiter.
    """

    def __init__(
        self,
        app: ASGIApp,
        limiter: Limiter,
        *,
        queue_timeout_seconds: float | None = None,
        exempt_paths: Iterable[str] = (),
    ) -> None:
        self.app = app
        self._limiter = limiter
        self._queue_timeout_seconds = queue_timeout_seconds
        self._exempt_prefixes = tuple(path.rstrip("/") or "/" for path in exempt_paths)

    def _is_exempt(self, path: str) -> bool:
        for prefix in self._exempt_prefixes:
            if path == prefix:
                return True
            # The root matches itself only.
            if prefix != "/" and path.startswith(f"{prefix}/"):
                return True
        return False

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or self._is_exempt(scope["path"]):
            await self.app(scope, receive, send)
            return

        limit_header = (b"x-concurrency-limit", str(self._limiter.limit).encode())

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append(limit_header)
                message["headers"] = headers
            await send(message)

        async with AsyncExitStack() as stack:
            try:
                await stack.enter_async_context(
                    self._limiter.acquire(queue_timeout_seconds=self._queue_timeout_seconds)
                )
            except (QueueOverflowError, QueueTimeoutError, AbortError) as exc:
                logger.warning(
                    "Rejected %s %s: %s (active=%d, pending=%d).",
                    scope.get("method", "?"),
                    scope["path"],
                    exc,
                    self._limiter.active_count,
                    self._limiter.pending_count,
                )
                response = _rejection_response(exc, limit_header[1].decode())
                await response(scope, receive, send)
                return

            await self.app(scope, receive, send_with_headers)


def _rejection_response(exc: AsyncLimiterError, limit: str) -> JSONResponse:
    return JSONResponse(
        {"detail": str(exc), "code": exc.code.value},
        status_code=503,
        headers={"Retry-After": _RETRY_AFTER_SECONDS, "X-Concurrency-Limit": limit},
    )


__all__ = ["LimiterMiddleware"]
