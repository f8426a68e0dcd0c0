from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx
from fastapi import FastAPI
from fastapi.testclient import TestClient

from async_limiter import CancelToken, create_limit
from async_limiter.api import install_limiter
from async_limiter.api.dependencies import get_limit, get_settings
from async_limiter.config import LimiterSettings
from async_limiter.limit import LimitFunction


def _build_app(limit: LimitFunction, release: asyncio.Event | None = None) -> FastAPI:
    app = FastAPI(title="limited-app")

    @app.get("/work")
    async def work() -> dict[str, str]:
        if release is not None:
            await release.wait()
        return {"status": "done"}

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    install_limiter(app, limit, LimiterSettings())
    return app


async def _wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        assert loop.time() < deadline, "condition not reached in time"
        await asyncio.sleep(0.005)


def test_status_route_reports_counters() -> None:
    app = _build_app(create_limit(2, max_queue=3))

    with TestClient(app) as client:
        response = client.get("/limiter/status")

    assert response.status_code == 200
    assert response.json() == {
        "limit": 2,
        "maxQueue": 3,
        "activeCount": 0,
        "pendingCount": 0,
        "idle": True,
    }


def test_gated_route_passes_through_with_limit_header() -> None:
    limit = create_limit(2)
    app = _build_app(limit)

    with TestClient(app) as client:
        response = client.get("/work")

    assert response.status_code == 200
    assert response.json() == {"status": "done"}
    assert response.headers["x-concurrency-limit"] == "2"
    assert limit.active_count == 0


def test_overflow_returns_503_and_first_request_completes() -> None:
    limit = create_limit(1, max_queue=0)

    async def scenario() -> None:
        release = asyncio.Event()
        app = _build_app(limit, release)
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            first = asyncio.create_task(client.get("/work"))
            await _wait_until(lambda: limit.active_count == 1)

            rejected = await client.get("/work")
            assert rejected.status_code == 503
            assert rejected.json()["code"] == "ERR_ASYNC_LIMITER_QUEUE_OVERFLOW"
            assert rejected.headers["retry-after"] == "1"

            health = await client.get("/healthz")
            assert health.status_code == 200

            status = await client.get("/limiter/status")
            assert status.json()["activeCount"] == 1

            release.set()
            response = await first
            assert response.status_code == 200

    asyncio.run(scenario())

    assert limit.active_count == 0
    assert limit.pending_count == 0


def test_queue_timeout_returns_503() -> None:
    limit = create_limit(1)

    async def scenario() -> None:
        release = asyncio.Event()
        app = FastAPI()

        @app.get("/work")
        async def work() -> dict[str, str]:
            await release.wait()
            return {"status": "done"}

        install_limiter(app, limit, LimiterSettings(http_queue_timeout_seconds=0.05))
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            first = asyncio.create_task(client.get("/work"))
            await _wait_until(lambda: limit.active_count == 1)

            timed_out = await client.get("/work")
            assert timed_out.status_code == 503
            assert timed_out.json()["code"] == "ERR_ASYNC_LIMITER_QUEUE_TIMEOUT"
            assert limit.pending_count == 0

            release.set()
            assert (await first).status_code == 200

    asyncio.run(scenario())


def test_idle_route_times_out_then_reports_idle() -> None:
    limit = create_limit(1)

    async def scenario() -> None:
        release = asyncio.Event()
        app = _build_app(limit, release)
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            first = asyncio.create_task(client.get("/work"))
            await _wait_until(lambda: limit.active_count == 1)

            busy = await client.get("/limiter/idle", params={"timeoutSeconds": 0.05})
            assert busy.status_code == 504

            invalid = await client.get("/limiter/idle", params={"timeoutSeconds": -1})
            assert invalid.status_code == 400

            release.set()
            await first

            idle = await client.get("/limiter/idle", params={"timeoutSeconds": 0.05})
            assert idle.status_code == 200
            assert idle.json() == {"status": "idle"}

    asyncio.run(scenario())


def test_install_limiter_uses_process_wide_limit_by_default() -> None:
    get_settings.cache_clear()
    get_limit.cache_clear()

    app = FastAPI()
    limit = install_limiter(app)

    with TestClient(app) as client:
        response = client.get("/limiter/status")

    assert limit is get_limit()
    assert response.status_code == 200
    assert response.json()["limit"] == 10

    get_settings.cache_clear()
    get_limit.cache_clear()


def test_root_status_prefix_keeps_application_routes_gated() -> None:
    limit = create_limit(1, max_queue=0)

    async def scenario() -> None:
        release = asyncio.Event()
        app = FastAPI()

        @app.get("/work")
        async def work() -> dict[str, str]:
            await release.wait()
            return {"status": "done"}

        install_limiter(app, limit, LimiterSettings(status_route_prefix="/"))
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            first = asyncio.create_task(client.get("/work"))
            await _wait_until(lambda: limit.active_count == 1)

            rejected = await client.get("/work")
            assert rejected.status_code == 503

            status = await client.get("/status")
            assert status.status_code == 200
            assert status.json()["activeCount"] == 1

            release.set()
            assert (await first).status_code == 200

    asyncio.run(scenario())

    assert limit.active_count == 0


def test_install_limiter_builds_limit_from_given_settings() -> None:
    get_settings.cache_clear()
    get_limit.cache_clear()

    app = FastAPI()
    limit = install_limiter(app, settings=LimiterSettings(limit=3, max_queue=1))

    with TestClient(app) as client:
        response = client.get("/limiter/status")

    assert limit.limiter.limit == 3
    assert limit.limiter.max_queue == 1
    assert response.json()["limit"] == 3
    assert response.json()["maxQueue"] == 1

    get_settings.cache_clear()
    get_limit.cache_clear()


def test_cancelled_default_token_returns_503() -> None:
    token = CancelToken()
    token.cancel("shutting down")
    app = _build_app(create_limit(1, cancel_token=token))

    with TestClient(app) as client:
        response = client.get("/work")
        health = client.get("/healthz")

    assert response.status_code == 503
    assert response.json()["code"] == "ERR_ASYNC_LIMITER_ABORTED"
    assert response.headers["retry-after"] == "1"
    assert health.status_code == 200
