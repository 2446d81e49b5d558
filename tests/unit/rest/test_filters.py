"""Unit tests for the pre-action filter chain."""

from collections.abc import Callable

import pytest
from pytest_mock import MockerFixture

from restcore.core.context import RequestContext
from restcore.core.exceptions import MethodNotAllowedError
from restcore.rest.auth import BcryptPasswordVerifier, InMemoryUserLookup
from restcore.rest.controllers.base import Controller, NoneController
from restcore.rest.filters import (
    PROCEED,
    AllowedMethodsFilter,
    AuthenticationFilter,
    FilterChain,
    PreActionEvent,
    Proceed,
    ShortCircuit,
)
from restcore.rest.http import RestRequest, RestResponse
from tests.support import TEST_USERNAME, Order, User


@pytest.fixture
def auth_filter(user_lookup: InMemoryUserLookup) -> AuthenticationFilter:
    return AuthenticationFilter(user_lookup, BcryptPasswordVerifier())


@pytest.mark.unit
class TestAuthenticationFilter:
    """Test HTTP Basic authentication."""

    def test_valid_credentials_proceed_and_attach_user(
        self,
        auth_filter: AuthenticationFilter,
        make_request: Callable[..., RestRequest],
    ) -> None:
        """Valid credentials let the request through with the user attached."""
        request = make_request("GET", "user", "42")
        controller = User(request)

        outcome = auth_filter(PreActionEvent(request, controller))

        assert outcome is PROCEED
        assert controller.user is not None
        assert controller.user.username == TEST_USERNAME
        assert RequestContext.get_username() == TEST_USERNAME

    @pytest.mark.parametrize(
        "authorization",
        [None, "Bearer token", "Basic ###"],
        ids=["missing", "other-scheme", "malformed"],
    )
    def test_unusable_header_gets_exact_challenge(
        self,
        auth_filter: AuthenticationFilter,
        make_request: Callable[..., RestRequest],
        authorization: str | None,
    ) -> None:
        """Missing or malformed credentials produce the 401 challenge."""
        request = make_request("GET", "user", "42", authorization=authorization)

        outcome = auth_filter(PreActionEvent(request, User(request)))

        assert isinstance(outcome, ShortCircuit)
        assert outcome.response.status_code == 401
        assert outcome.response.headers == {
            "WWW-Authenticate": 'Basic realm="Provide your credentials."'
        }
        assert outcome.response.body is None

    def test_unknown_user_gets_challenge(
        self,
        auth_filter: AuthenticationFilter,
        make_request: Callable[..., RestRequest],
        basic_auth: Callable[..., str],
    ) -> None:
        """A username without an account is challenged."""
        request = make_request(
            "GET", "user", "42", authorization=basic_auth("mallory", "x")
        )

        outcome = auth_filter(PreActionEvent(request, User(request)))

        assert isinstance(outcome, ShortCircuit)
        assert outcome.response.status_code == 401

    def test_wrong_password_gets_challenge(
        self,
        auth_filter: AuthenticationFilter,
        make_request: Callable[..., RestRequest],
        basic_auth: Callable[..., str],
    ) -> None:
        """A wrong password is challenged and no user is attached."""
        request = make_request(
            "GET", "user", "42", authorization=basic_auth(TEST_USERNAME, "wrong")
        )
        controller = User(request)

        outcome = auth_filter(PreActionEvent(request, controller))

        assert isinstance(outcome, ShortCircuit)
        assert controller.user is None
        assert RequestContext.get_username() is None

    def test_custom_realm(
        self,
        user_lookup: InMemoryUserLookup,
        make_request: Callable[..., RestRequest],
    ) -> None:
        """The challenge announces the configured realm."""
        auth_filter = AuthenticationFilter(
            user_lookup, BcryptPasswordVerifier(), realm="Staff only"
        )
        request = make_request("GET", "user", authorization=None)

        outcome = auth_filter(PreActionEvent(request, User(request)))

        assert isinstance(outcome, ShortCircuit)
        assert outcome.response.headers["WWW-Authenticate"] == 'Basic realm="Staff only"'

    def test_password_not_checked_for_unknown_user(
        self,
        mocker: MockerFixture,
        user_lookup: InMemoryUserLookup,
        make_request: Callable[..., RestRequest],
        basic_auth: Callable[..., str],
    ) -> None:
        """Verification is skipped when the lookup finds nobody."""
        verifier = mocker.Mock(spec=BcryptPasswordVerifier)
        auth_filter = AuthenticationFilter(user_lookup, verifier)
        request = make_request("GET", "user", authorization=basic_auth("bob", "x"))

        auth_filter(PreActionEvent(request, User(request)))

        verifier.verify.assert_not_called()


@pytest.mark.unit
class TestAllowedMethodsFilter:
    """Test the per-controller method allowlist."""

    @pytest.mark.parametrize(
        ("method", "resource_id", "allowed"),
        [
            ("GET", None, True),
            ("GET", "1", True),
            ("PUT", "1", True),
            ("PUT", None, False),
            ("DELETE", "1", False),
            ("POST", None, False),
            ("PATCH", "1", False),
        ],
    )
    def test_method_table_for_get_put_controller(
        self,
        make_request: Callable[..., RestRequest],
        method: str,
        resource_id: str | None,
        allowed: bool,
    ) -> None:
        """Methods outside the controller's set, and non-collection methods
        without an id, are rejected."""
        request = make_request(method, "user", resource_id)
        event = PreActionEvent(request, User(request))

        if allowed:
            assert AllowedMethodsFilter()(event) is PROCEED
        else:
            with pytest.raises(MethodNotAllowedError):
                AllowedMethodsFilter()(event)

    @pytest.mark.parametrize("method", ["PUT", "PATCH", "DELETE"])
    def test_collection_rejects_item_methods_even_when_allowed(
        self, make_request: Callable[..., RestRequest], method: str
    ) -> None:
        """Without an id only GET, HEAD, OPTIONS and POST pass."""
        request = make_request(method, "order")

        with pytest.raises(MethodNotAllowedError) as exc_info:
            AllowedMethodsFilter()(PreActionEvent(request, Order(request)))

        assert exc_info.value.method == method
        assert exc_info.value.status_code == 405

    def test_error_lists_allowed_methods_in_canonical_order(
        self, make_request: Callable[..., RestRequest]
    ) -> None:
        """The raised error carries the controller's allowed methods."""
        request = make_request("DELETE", "user", "1")

        with pytest.raises(MethodNotAllowedError) as exc_info:
            AllowedMethodsFilter()(PreActionEvent(request, User(request)))

        assert exc_info.value.allowed_methods == ["GET", "PUT"]

    def test_none_controller_rejects_everything(
        self, make_request: Callable[..., RestRequest]
    ) -> None:
        """The sentinel accepts no method."""
        request = make_request("GET", "ghost")

        with pytest.raises(MethodNotAllowedError) as exc_info:
            AllowedMethodsFilter()(PreActionEvent(request, NoneController(request)))

        assert exc_info.value.allowed_methods == []


class _Recorder:
    """Filter that records its calls and returns a fixed outcome."""

    def __init__(
        self, priority: int, calls: list[str], outcome: Proceed | ShortCircuit = PROCEED
    ) -> None:
        self.priority = priority
        self.calls = calls
        self.outcome = outcome

    def __call__(self, event: PreActionEvent) -> Proceed | ShortCircuit:
        self.calls.append(f"p{self.priority}")
        return self.outcome


@pytest.mark.unit
class TestFilterChain:
    """Test ordering and short-circuiting of the chain."""

    def test_runs_in_descending_priority(self) -> None:
        """Higher priority filters run first."""
        calls: list[str] = []
        chain = FilterChain(
            [_Recorder(10, calls), _Recorder(100, calls), _Recorder(50, calls)]
        )
        request = RestRequest(controller="order")

        outcome = chain.run(PreActionEvent(request, Controller(request)))

        assert outcome is PROCEED
        assert calls == ["p100", "p50", "p10"]
        assert len(chain) == 3

    def test_short_circuit_stops_the_chain(self) -> None:
        """Filters after a short-circuit do not run."""
        calls: list[str] = []
        response = RestResponse(status_code=401)
        chain = FilterChain(
            [_Recorder(100, calls, ShortCircuit(response)), _Recorder(10, calls)]
        )
        request = RestRequest(controller="order")

        outcome = chain.run(PreActionEvent(request, Controller(request)))

        assert outcome == ShortCircuit(response)
        assert calls == ["p100"]

    def test_authentication_runs_before_method_check(
        self,
        auth_filter: AuthenticationFilter,
        make_request: Callable[..., RestRequest],
    ) -> None:
        """An anonymous disallowed method gets the 401, not the 405."""
        chain = FilterChain([AllowedMethodsFilter(), auth_filter])
        request = make_request("DELETE", "user", authorization=None)

        outcome = chain.run(PreActionEvent(request, User(request)))

        assert isinstance(outcome, ShortCircuit)
        assert outcome.response.status_code == 401
