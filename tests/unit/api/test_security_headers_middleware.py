"""Unit tests for the security headers middleware."""

import pytest
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from httpx import ASGITransport, AsyncClient

from restcore.api.middleware.security_headers import SecurityHeadersMiddleware


def _app(**options: bool | int) -> FastAPI:
    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware, **options)

    @app.get("/plain")
    async def plain() -> PlainTextResponse:
        return PlainTextResponse("ok")

    @app.get("/cached")
    async def cached() -> PlainTextResponse:
        return PlainTextResponse("ok", headers={"Cache-Control": "max-age=60"})

    return app


@pytest.mark.unit
class TestSecurityHeadersMiddleware:
    """Test the headers added to every response."""

    async def test_default_headers(self) -> None:
        """All security headers are present by default."""
        async with AsyncClient(
            transport=ASGITransport(app=_app()), base_url="http://test"
        ) as client:
            response = await client.get("/plain")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Cache-Control"] == "no-store"
        assert response.headers["Strict-Transport-Security"] == (
            "max-age=31536000; includeSubDomains"
        )

    async def test_existing_cache_control_is_kept(self) -> None:
        """A Cache-Control set by the handler wins."""
        async with AsyncClient(
            transport=ASGITransport(app=_app()), base_url="http://test"
        ) as client:
            response = await client.get("/cached")

        assert response.headers["Cache-Control"] == "max-age=60"

    async def test_hsts_options(self) -> None:
        """HSTS can be tuned or disabled."""
        tuned = _app(hsts_max_age=60, hsts_include_subdomains=False)
        disabled = _app(hsts_enabled=False)

        async with AsyncClient(
            transport=ASGITransport(app=tuned), base_url="http://test"
        ) as client:
            tuned_response = await client.get("/plain")
        async with AsyncClient(
            transport=ASGITransport(app=disabled), base_url="http://test"
        ) as client:
            disabled_response = await client.get("/plain")

        assert tuned_response.headers["Strict-Transport-Security"] == "max-age=60"
        assert "Strict-Transport-Security" not in disabled_response.headers
