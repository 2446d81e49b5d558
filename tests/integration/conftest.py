"""Fixtures for tests that go through the FastAPI application."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from restcore.api.main import create_app
from restcore.core.config import Settings
from restcore.rest.service import RestService


@pytest.fixture
def app(settings: Settings, rest_service: RestService) -> FastAPI:
    """Application serving the test controllers from memory."""
    return create_app(settings, service=rest_service)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to the application."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as async_client:
        yield async_client
