"""Pre-action filter chain.

Filters run after the controller is resolved and before any action body
executes. Each filter receives a :class:`PreActionEvent` and either lets the
request proceed, short-circuits it with a ready response, or raises.

The chain is assembled once and ordered by descending ``priority``:

- :class:`AuthenticationFilter` (100) answers missing or invalid HTTP
  Basic credentials with a 401 challenge. The challenge is returned as a
  :class:`ShortCircuit`, so it never goes through error translation and
  its headers stay exactly as built here.
- :class:`AllowedMethodsFilter` (10) raises ``MethodNotAllowedError``.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar, Final, Protocol

from loguru import logger

from restcore.core.constants import COLLECTION_METHODS, DEFAULT_AUTH_REALM
from restcore.core.context import RequestContext
from restcore.core.exceptions import MethodNotAllowedError
from restcore.rest.auth import PasswordVerifier, UserLookup, parse_basic_credentials
from restcore.rest.controllers.base import Controller
from restcore.rest.http import RestRequest, RestResponse

AUTHENTICATION_PRIORITY: Final[int] = 100
ALLOWED_METHODS_PRIORITY: Final[int] = 10


@dataclass(frozen=True)
class PreActionEvent:
    """The request and its resolved controller, as seen by filters."""

    request: RestRequest
    controller: Controller


@dataclass(frozen=True)
class Proceed:
    """Let the request continue to the next filter."""


@dataclass(frozen=True)
class ShortCircuit:
    """Stop processing and answer with ``response``."""

    response: RestResponse


type FilterOutcome = Proceed | ShortCircuit

PROCEED: Final[Proceed] = Proceed()


class PreActionFilter(Protocol):
    """A check run before the controller action."""

    priority: int

    def __call__(self, event: PreActionEvent) -> FilterOutcome:
        """Inspect the event and decide whether the request may proceed."""
        ...


class AuthenticationFilter:
    """Requires valid HTTP Basic credentials.

    Args:
        user_lookup: Finds the account named in the credentials.
        password_verifier: Checks the presented password.
        realm: Realm announced in the ``WWW-Authenticate`` challenge.
    """

    priority: ClassVar[int] = AUTHENTICATION_PRIORITY

    def __init__(
        self,
        user_lookup: UserLookup,
        password_verifier: PasswordVerifier,
        realm: str = DEFAULT_AUTH_REALM,
    ) -> None:
        self.user_lookup = user_lookup
        self.password_verifier = password_verifier
        self.realm = realm

    def challenge(self) -> ShortCircuit:
        """Build the 401 response asking the client for credentials."""
        return ShortCircuit(
            RestResponse(
                status_code=401,
                headers={"WWW-Authenticate": f'Basic realm="{self.realm}"'},
            )
        )

    def __call__(self, event: PreActionEvent) -> FilterOutcome:
        credentials = parse_basic_credentials(event.request.header("Authorization"))
        if credentials is None:
            logger.info("Authentication required: missing or malformed credentials")
            return self.challenge()

        user = self.user_lookup.find_by_username(credentials.username)
        if not user.loaded:
            logger.warning("Authentication failed: unknown user")
            return self.challenge()

        if not self.password_verifier.verify(user, credentials.password):
            logger.warning(
                "Authentication failed: wrong password", username=user.username
            )
            return self.challenge()

        event.controller.set_user(user)
        RequestContext.set_username(user.username)
        logger.debug("Authenticated {}", user.username)
        return PROCEED


class AllowedMethodsFilter:
    """Rejects methods the controller does not accept.

    Collection requests (no resource identifier) are further limited to
    GET, HEAD, OPTIONS and POST.
    """

    priority: ClassVar[int] = ALLOWED_METHODS_PRIORITY

    def __call__(self, event: PreActionEvent) -> FilterOutcome:
        method = event.request.method.upper()
        allowed = event.controller.allowed_methods()

        if method not in allowed or (
            not event.request.has_id and method not in COLLECTION_METHODS
        ):
            logger.info(
                "Method {} rejected for {}",
                method,
                event.controller.name,
                allowed_methods=allowed,
            )
            raise MethodNotAllowedError(method, allowed)

        return PROCEED


class FilterChain:
    """Filters ordered by descending priority.

    Filters with equal priority keep the order they were given in.
    """

    def __init__(self, filters: Iterable[PreActionFilter]) -> None:
        self.filters: tuple[PreActionFilter, ...] = tuple(
            sorted(filters, key=lambda f: f.priority, reverse=True)
        )

    def run(self, event: PreActionEvent) -> FilterOutcome:
        """Run every filter until one short-circuits.

        Args:
            event: The request and its resolved controller.

        Returns:
            FilterOutcome: The first ``ShortCircuit``, else ``Proceed``.
        """
        for pre_action_filter in self.filters:
            outcome = pre_action_filter(event)
            if isinstance(outcome, ShortCircuit):
                return outcome
        return PROCEED

    def __len__(self) -> int:
        return len(self.filters)
