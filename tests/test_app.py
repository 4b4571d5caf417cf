"""Application-level behavior: envelope for unknown routes and errors, middleware."""

import importlib

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.responses import PlainTextResponse
from structlog.testing import capture_logs

import taskboard.main
from taskboard.main import create_app
from taskboard.middleware import RateLimitMiddleware

from .helpers import API


def test_import_builds_no_app(monkeypatch):
    monkeypatch.setenv("TASKBOARD_ENV", "production")
    monkeypatch.delenv("TASKBOARD_JWT_SECRET", raising=False)

    module = importlib.reload(taskboard.main)
    assert not hasattr(module, "app")
    with pytest.raises(ValueError):
        module.create_app()


async def test_unknown_route(client: AsyncClient):
    resp = await client.get(f"{API}/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Route not found"}


async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert body["uptime"] >= 0


async def test_security_and_request_headers(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "SAMEORIGIN"
    assert len(resp.headers["X-Request-ID"]) == 26
    assert resp.headers["X-RateLimit-Limit"] == "10000"


async def test_request_log_names_authenticated_caller(client: AsyncClient, alice):
    with capture_logs() as logs:
        await client.get(f"{API}/auth/me", headers=alice.headers)
        await client.get("/health")

    completed = [e for e in logs if e["event"] == "request_completed"]
    assert [e["user_id"] for e in completed] == [alice.id, None]
    assert all(e["duration_ms"] >= 0 for e in completed)


async def test_cors_preflight(client: AsyncClient):
    resp = await client.options(
        f"{API}/tasks",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:5173"

    resp = await client.options(
        f"{API}/tasks",
        headers={
            "Origin": "https://evil.example",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert "access-control-allow-origin" not in resp.headers


async def test_rate_limit(settings):
    app = create_app(settings.model_copy(update={"rate_limit_max": 3}))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        for remaining in ("2", "1", "0"):
            resp = await ac.get("/health")
            assert resp.status_code == 200
            assert resp.headers["X-RateLimit-Remaining"] == remaining

        resp = await ac.get("/health")
        assert resp.status_code == 429
        assert resp.json() == {
            "success": False,
            "message": "Too many requests from this IP, please try again later.",
        }
        assert int(resp.headers["Retry-After"]) >= 1


async def test_rate_limit_forgets_idle_clients():
    now = [0.0]
    limiter = RateLimitMiddleware(
        PlainTextResponse("ok"), max_requests=5, window_s=60, clock=lambda: now[0]
    )

    async def hit(host: str) -> None:
        transport = ASGITransport(app=limiter, client=(host, 4000))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.get("/")
        assert resp.status_code == 200

    await hit("10.0.0.1")
    await hit("10.0.0.2")
    assert set(limiter._hits) == {"10.0.0.1", "10.0.0.2"}

    now[0] = 61.0
    await hit("10.0.0.3")
    assert set(limiter._hits) == {"10.0.0.3"}


async def _boom(settings) -> dict:
    app = create_app(settings)

    @app.get("/boom")
    def boom():
        raise RuntimeError("disk on fire")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.get("/boom")
    assert resp.status_code == 500
    return resp.json()


async def test_unhandled_error_hidden_outside_development(settings):
    body = await _boom(settings)
    assert body == {"success": False, "message": "Internal server error"}


async def test_unhandled_error_exposed_in_development(settings):
    body = await _boom(settings.model_copy(update={"environment": "development"}))
    assert body["error"] == "disk on fire"
