"""Limiter status routes."""

from __future__ import annotations

from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query

from async_limiter.api.dependencies import get_limit
from async_limiter.domain.errors import AbortError, IdleTimeoutError, LimiterRangeError
from async_limiter.domain.models import IdleResponse, LimiterStatusResponse
from async_limiter.limit import LimitFunction

router = APIRouter(tags=["limiter"])


def _raise_http_exception(exc: Exception) -> NoReturn:
    if isinstance(exc, IdleTimeoutError):
        raise HTTPException(status_code=504, detail=str(exc))
    if isinstance(exc, LimiterRangeError):
        raise HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, AbortError):
        raise HTTPException(status_code=409, detail=str(exc))
    raise HTTPException(status_code=500, detail="Unexpected limiter error")


@router.get("/status", response_model=LimiterStatusResponse, status_code=200)
async def get_limiter_status(
    limit: LimitFunction = Depends(get_limit),
) -> LimiterStatusResponse:
    """Report active and pending counts."""

    return LimiterStatusResponse.from_snapshot(limit.limiter.snapshot())


@router.get("/idle", response_model=IdleResponse, status_code=200)
async def wait_for_idle(
    timeout_seconds: float | None = Query(default=None, alias="timeoutSeconds"),
    limit: LimitFunction = Depends(get_limit),
) -> IdleResponse:
    """Block until the limiter drains or the timeout elapses."""

    try:
        await limit.on_idle(timeout_seconds=timeout_seconds)
    except Exception as exc:  # noqa: BLE001
        _raise_http_exception(exc)
    return IdleResponse()


__all__ = ["router"]
