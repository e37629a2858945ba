"""
Bookmarks API — Middleware & Health Tests
==========================================

What:  Request ID propagation, access logging, rate limiting and /health.
How:   The full app through test_client, plus a bare FastAPI app for the
       rate limiter so a small limit can be set without touching settings.
"""

import logging
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from bookmarks_api.database import get_db_session
from bookmarks_api.middleware.logging import RequestLoggingMiddleware, level_for_status
from bookmarks_api.middleware.rate_limit import RateLimitMiddleware
from bookmarks_api.middleware.request_id import REQUEST_ID_HEADER

ACCESS_LOGGER = "bookmarks_api.access"


def limited_app(max_requests: int) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, max_requests=max_requests, window=60)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


class TestRequestID:

    @pytest.mark.asyncio
    async def test_client_id_echoed(self, test_client):
        response = await test_client.get("/api/bookmarks", headers={REQUEST_ID_HEADER: "abc123"})
        assert response.headers[REQUEST_ID_HEADER] == "abc123"

    @pytest.mark.asyncio
    async def test_id_generated_when_absent(self, test_client):
        first = await test_client.get("/api/bookmarks")
        second = await test_client.get("/api/bookmarks")
        assert len(first.headers[REQUEST_ID_HEADER]) == 8
        assert first.headers[REQUEST_ID_HEADER] != second.headers[REQUEST_ID_HEADER]

    @pytest.mark.asyncio
    async def test_error_responses_carry_id(self, test_client):
        response = await test_client.get("/api/bookmarks/123456")
        assert response.status_code == 404
        assert REQUEST_ID_HEADER in response.headers


class TestAccessLog:

    @pytest.mark.parametrize(
        "status, level",
        [(200, logging.INFO), (204, logging.INFO), (404, logging.WARNING), (503, logging.ERROR)],
    )
    def test_level_for_status(self, status, level):
        assert level_for_status(status) == level

    @pytest.mark.asyncio
    async def test_client_error_logged_as_warning(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            await test_client.get("/api/bookmarks/123456", headers={REQUEST_ID_HEADER: "rid-404"})

        records = [r for r in caplog.records if r.name == ACCESS_LOGGER]
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert records[0].getMessage().startswith("GET /api/bookmarks/123456 404 ")
        assert records[0].request_id == "rid-404"

    @pytest.mark.asyncio
    async def test_health_not_logged(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            await test_client.get("/health")
        assert not [r for r in caplog.records if r.name == ACCESS_LOGGER]

    @pytest.mark.asyncio
    async def test_unhandled_error_logged_as_500(self, caplog):
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/boom")
        async def boom():
            raise RuntimeError("boom")

        transport = ASGITransport(app=app)
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                with pytest.raises(RuntimeError):
                    await client.get("/boom")

        records = [r for r in caplog.records if r.name == ACCESS_LOGGER]
        assert [r.levelno for r in records] == [logging.ERROR]
        assert records[0].status == 500


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_rejects_over_limit(self):
        transport = ASGITransport(app=limited_app(max_requests=2))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/ping")).status_code == 200
            assert (await client.get("/ping")).status_code == 200
            response = await client.get("/ping")

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) >= 1
        assert "message" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_health_not_limited(self):
        transport = ASGITransport(app=limited_app(max_requests=2))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            for _ in range(5):
                response = await client.get("/health")
                assert response.status_code == 200


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_unhealthy_when_database_down(self, mock_db_session):
        from bookmarks_api.main import create_app

        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT 1", {}, Exception("connection refused"))
        )
        app = create_app()

        async def broken_session():
            yield mock_db_session

        app.dependency_overrides[get_db_session] = broken_session

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
