"""Integration tests for application endpoints and the database-backed setup."""

from collections.abc import AsyncGenerator, Callable, Generator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker

from restcore.api.main import create_app
from restcore.core.config import RestConfig, Settings
from restcore.infrastructure.database.session import (
    create_database_engine,
    init_schema,
    session_scope,
)
from restcore.infrastructure.database.users import create_user
from tests.support import TEST_BCRYPT_ROUNDS, TEST_PASSWORD, TEST_USERNAME


@pytest.fixture
def engine() -> Generator[Engine]:
    """In-memory user store holding ``alice``."""
    db_engine = create_database_engine("sqlite:///:memory:")
    init_schema(db_engine)
    with session_scope(sessionmaker(db_engine)) as session:
        create_user(session, TEST_USERNAME, TEST_PASSWORD, rounds=TEST_BCRYPT_ROUNDS)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
async def db_client(engine: Engine) -> AsyncGenerator[AsyncClient]:
    """Client for an application built from settings and the user store."""
    settings = Settings(
        rest=RestConfig(
            controllers={
                "UserProfile": "tests.support:UserProfile",
                "User": "tests.support:User",
            },
            excluded_models=["User"],
            url_prefix="/rest",
        )
    )
    application = create_app(settings, engine=engine)
    async with AsyncClient(
        transport=ASGITransport(app=application), base_url="http://test"
    ) as async_client:
        yield async_client


@pytest.mark.integration
class TestHealthAndInfo:
    """Test the operational endpoints."""

    async def test_health_without_user_store(self, client: AsyncClient) -> None:
        """Without an engine only the service status is reported."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_health_with_user_store(self, db_client: AsyncClient) -> None:
        """The user store connectivity is part of the health report."""
        response = await db_client.get("/health")

        assert response.json() == {"status": "healthy", "database": True}

    async def test_info(self, client: AsyncClient, settings: Settings) -> None:
        """Info describes the application and the REST setup."""
        response = await client.get("/info")

        body = response.json()
        assert body["app_name"] == settings.app_name
        assert body["environment"] == "development"
        assert body["rest"] == {
            "url_prefix": "/api",
            "controllers": ["UserProfile", "User", "Order"],
            "excluded_models": [],
        }


@pytest.mark.integration
class TestDatabaseBackedService:
    """Test the service assembled from settings with the SQLAlchemy user store."""

    async def test_stored_user_is_authenticated(
        self, db_client: AsyncClient, basic_auth: Callable[..., str]
    ) -> None:
        """Credentials are checked against the users table."""
        response = await db_client.get(
            "/rest/user_profile", headers={"Authorization": basic_auth()}
        )

        assert response.status_code == 200
        assert response.json() == [{"username": TEST_USERNAME}]

    async def test_unknown_user_is_challenged(
        self, db_client: AsyncClient, basic_auth: Callable[..., str]
    ) -> None:
        """Usernames without an account are rejected."""
        response = await db_client.get(
            "/rest/user_profile",
            headers={"Authorization": basic_auth("mallory", TEST_PASSWORD)},
        )

        assert response.status_code == 401

    async def test_excluded_model_is_hidden(
        self, db_client: AsyncClient, basic_auth: Callable[..., str]
    ) -> None:
        """Configured exclusions apply to controllers loaded from settings."""
        response = await db_client.get(
            "/rest/user/1", headers={"Authorization": basic_auth()}
        )

        assert response.status_code == 405

    async def test_info_lists_loaded_controllers(self, db_client: AsyncClient) -> None:
        """Controllers imported from settings appear in the info endpoint."""
        response = await db_client.get("/info")

        assert response.json()["rest"] == {
            "url_prefix": "/rest",
            "controllers": ["UserProfile", "User"],
            "excluded_models": ["User"],
        }


@pytest.mark.integration
async def test_unexpected_transport_error_is_structured(app: FastAPI) -> None:
    """Errors raised outside the dispatch pipeline still get an error body."""

    @app.get("/boom")
    async def boom() -> None:
        raise ZeroDivisionError("division by zero")

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        response = await client.get("/boom")

    assert response.status_code == 500
    assert response.json()["error_code"] == "INTERNAL_ERROR"
