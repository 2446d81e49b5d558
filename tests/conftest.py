"""Root conftest.py for the Restcore test suite.

Provides project-wide fixtures: isolated settings and request context, an
in-memory user store and the controllers from ``tests.support``.
"""

import base64
from collections.abc import Callable, Generator
from typing import Any

import pytest
from loguru import logger

from restcore.core.config import Settings, get_settings
from restcore.core.context import RequestContext
from restcore.core.error_context import _get_sensitive_fields
from restcore.rest.auth import InMemoryUserLookup
from restcore.rest.http import RestRequest
from restcore.rest.resolver import ControllerFactory
from restcore.rest.service import RestService
from tests.support import (
    TEST_BCRYPT_ROUNDS,
    TEST_PASSWORD,
    TEST_USERNAME,
    Order,
    User,
    UserProfile,
)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Automatically clear cached settings before and after each test."""
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    yield
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()


@pytest.fixture(autouse=True)
def clean_request_context() -> Generator[None]:
    """Automatically clear RequestContext before and after each test."""
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture
def settings() -> Settings:
    """Settings built from the test environment."""
    return Settings()


@pytest.fixture
def user_lookup() -> InMemoryUserLookup:
    """User store holding a single account, ``alice``."""
    lookup = InMemoryUserLookup()
    lookup.add_user(TEST_USERNAME, TEST_PASSWORD, rounds=TEST_BCRYPT_ROUNDS)
    return lookup


@pytest.fixture
def controllers() -> dict[str, ControllerFactory]:
    """Controller mapping used by the dispatch tests."""
    return {"UserProfile": UserProfile, "User": User, "Order": Order}


@pytest.fixture
def rest_service(
    settings: Settings,
    user_lookup: InMemoryUserLookup,
    controllers: dict[str, ControllerFactory],
) -> RestService:
    """Dispatch pipeline over the test controllers."""
    return RestService(settings, user_lookup, controllers=controllers)


@pytest.fixture
def basic_auth() -> Callable[..., str]:
    """Build ``Authorization: Basic`` header values."""

    def _basic_auth(username: str = TEST_USERNAME, password: str = TEST_PASSWORD) -> str:
        token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
        return f"Basic {token}"

    return _basic_auth


@pytest.fixture
def make_request(basic_auth: Callable[..., str]) -> Callable[..., RestRequest]:
    """Build authenticated ``RestRequest`` objects.

    Pass ``authorization=None`` for an anonymous request.
    """
    default = object()

    def _make_request(
        method: str,
        controller: str,
        resource_id: str | None = None,
        property_name: str | None = None,
        data: dict[str, Any] | None = None,
        authorization: Any = default,  # noqa: ANN401 - sentinel default
    ) -> RestRequest:
        headers = {}
        if authorization is default:
            headers["Authorization"] = basic_auth()
        elif authorization is not None:
            headers["Authorization"] = authorization
        return RestRequest(
            method=method,
            controller=controller,
            id=resource_id,
            property=property_name,
            headers=headers,
            data=data or {},
        )

    return _make_request


@pytest.fixture
def log_records() -> Generator[list[dict[str, Any]]]:
    """Capture loguru records emitted during the test."""
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level=0)
    yield records
    logger.remove(handler_id)
