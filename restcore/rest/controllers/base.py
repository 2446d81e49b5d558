"""Controller contract shared by resource, sentinel and error controllers.

A controller is created for a single request. The pipeline asks it for
its allowed methods, may attach the authenticated user, and finally runs
one action by name. Actions are methods named ``action_<name>``:

    class UserController(Controller):
        methods = frozenset({"GET", "PUT"})

        def action_get(self) -> dict[str, str]:
            return {"username": self.user.username}

        def action_put(self) -> None:
            self.response.status_code = 204

A non-None return value becomes the response body. Actions read the
request body from :pyattr:`Controller.data`.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from loguru import logger

from restcore.core.constants import SUPPORTED_METHODS
from restcore.core.exceptions import ActionNotFoundError
from restcore.core.types import ActionParams, Payload
from restcore.rest.http import RestRequest, RestResponse

if TYPE_CHECKING:
    from restcore.core.config import Settings
    from restcore.rest.auth import User, UserLookup
    from restcore.rest.registry import ExcludedModels

ACTION_PREFIX = "action_"


class ControllerKind(Enum):
    """Variants of the controller contract."""

    RESOURCE = "resource"
    """A concrete resource controller."""

    NONE = "none"
    """Sentinel for unknown or excluded resources; no action suffixing."""

    ERROR = "error"
    """Renders failures as structured error responses."""


@dataclass(frozen=True)
class ControllerServices:
    """Shared services handed to every controller at construction."""

    settings: "Settings"
    user_lookup: "UserLookup"
    excluded_models: "ExcludedModels"


class Controller:
    """Base class for controllers.

    Subclasses declare the HTTP methods they accept in ``methods``. The
    default accepts read-only methods.
    """

    kind: ClassVar[ControllerKind] = ControllerKind.RESOURCE
    methods: ClassVar[frozenset[str]] = frozenset({"GET", "HEAD", "OPTIONS"})

    def __init__(
        self, request: RestRequest, services: ControllerServices | None = None
    ) -> None:
        self.request = request
        self.services = services
        self.response = RestResponse()
        self.user: User | None = None
        self.params: ActionParams = {}

    @property
    def name(self) -> str:
        """Controller name used in logs and error details."""
        return type(self).__name__

    @property
    def data(self) -> Payload:
        """Request payload passed to the running action."""
        return self.params.get("data", {})

    def allowed_methods(self) -> list[str]:
        """HTTP methods this controller accepts, in canonical order."""
        return [method for method in SUPPORTED_METHODS if method in self.methods]

    def set_user(self, user: "User") -> None:
        """Attach the authenticated user for per-user authorization."""
        self.user = user

    def get_action(self, action: str) -> Callable[[], Any]:
        """Look up the handler for ``action``.

        Raises:
            ActionNotFoundError: If the controller has no such action.
        """
        handler = getattr(self, f"{ACTION_PREFIX}{action}", None)
        if handler is None or not callable(handler):
            raise ActionNotFoundError(self.name, action)
        return handler

    def before(self) -> None:
        """Hook run before every action."""

    def after(self) -> None:
        """Hook run after every successful action."""

    def run(self, action: str, params: ActionParams | None = None) -> RestResponse:
        """Run an action and return the filled-in response.

        Args:
            action: Action name, e.g. ``get_collection``.
            params: Parameter bag, ``{"data": <payload>}``.

        Returns:
            RestResponse: ``self.response`` after the action ran.

        Raises:
            ActionNotFoundError: If the controller has no such action.
        """
        handler = self.get_action(action)
        self.params = dict(params or {})

        logger.debug("Running action {} on {}", action, self.name)
        self.before()
        result = handler()
        if result is not None:
            self.response.body = result
        self.after()

        return self.response


class NoneController(Controller):
    """Sentinel controller for resources that have no controller.

    It accepts no method, so requests addressed to it are rejected by the
    method filter with the same 405 every other disallowed request gets.
    """

    kind = ControllerKind.NONE
    methods = frozenset()
