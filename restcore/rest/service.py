"""The REST dispatch pipeline.

``RestService.handle_request`` runs one request through:

1. controller resolution,
2. the pre-action filter chain (authentication, method allowlist),
3. action derivation and dispatch,

and turns any failure raised along the way into an error response through
the :class:`~restcore.rest.errors.ErrorTranslator`. The service is built once
at startup; afterwards only the excluded-models registry may grow.
"""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from loguru import logger

from restcore.core.observability import trace_operation
from restcore.rest.auth import BcryptPasswordVerifier, PasswordVerifier, UserLookup
from restcore.rest.controllers.base import ControllerServices
from restcore.rest.dispatcher import ActionDispatcher
from restcore.rest.errors import ErrorTranslator
from restcore.rest.filters import (
    AllowedMethodsFilter,
    AuthenticationFilter,
    FilterChain,
    PreActionEvent,
    PreActionFilter,
    ShortCircuit,
)
from restcore.rest.http import RestRequest, RestResponse
from restcore.rest.registry import ExcludedModels
from restcore.rest.resolver import ControllerFactory, ControllerResolver, load_controllers

if TYPE_CHECKING:
    from restcore.core.config import Settings


class RestService:
    """Resolves, filters and dispatches REST requests.

    Args:
        settings: Application settings; ``settings.rest`` seeds the
            excluded models and the authentication realm.
        user_lookup: Finds accounts for HTTP Basic authentication.
        password_verifier: Checks passwords, bcrypt by default.
        controllers: Controller name (PascalCase) to controller factory.
        filters: Pre-action filters replacing the default authentication
            and method filters.
    """

    def __init__(
        self,
        settings: "Settings",
        user_lookup: UserLookup,
        password_verifier: PasswordVerifier | None = None,
        controllers: Mapping[str, ControllerFactory] | None = None,
        filters: Iterable[PreActionFilter] | None = None,
    ) -> None:
        self.settings = settings
        self.registry = ExcludedModels(settings.rest.excluded_models)
        self.services = ControllerServices(
            settings=settings,
            user_lookup=user_lookup,
            excluded_models=self.registry,
        )
        self.resolver = ControllerResolver(
            controllers or {}, self.registry, self.services
        )

        if filters is None:
            filters = (
                AuthenticationFilter(
                    user_lookup,
                    password_verifier or BcryptPasswordVerifier(),
                    realm=settings.rest.auth_realm,
                ),
                AllowedMethodsFilter(),
            )
        self.filter_chain = FilterChain(filters)
        self.dispatcher = ActionDispatcher()
        self.translator = ErrorTranslator(settings)

        logger.info(
            "REST service ready",
            controllers=self.resolver.controller_names,
            excluded_models=self.registry.excluded_models,
            filters=len(self.filter_chain),
        )

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        user_lookup: UserLookup,
        password_verifier: PasswordVerifier | None = None,
    ) -> "RestService":
        """Build a service whose controllers come from ``rest.controllers``.

        Raises:
            ConfigurationError: If a controller cannot be imported.
        """
        return cls(
            settings,
            user_lookup,
            password_verifier=password_verifier,
            controllers=load_controllers(settings.rest.controllers),
        )

    def exclude_model(self, name: str) -> None:
        """Exclude one resource name from REST exposure."""
        self.registry.exclude_model(name)

    def exclude_models(self, names: Iterable[str]) -> None:
        """Exclude several resource names from REST exposure."""
        self.registry.exclude_models(names)

    @property
    def excluded_models(self) -> list[str]:
        """Currently excluded resource names."""
        return self.registry.excluded_models

    def handle_request(self, request: RestRequest) -> RestResponse:
        """Run ``request`` through the pipeline.

        Args:
            request: The routed request.

        Returns:
            RestResponse: The controller's response, the authentication
                challenge, or the rendered error.
        """
        with (
            logger.contextualize(method=request.method, controller=request.controller),
            trace_operation(
                "rest.dispatch",
                **{"http.method": request.method, "rest.controller": request.controller},
            ) as span,
        ):
            try:
                response = self._do_handle_request(request)
            except Exception as e:
                span.record_exception(e)
                response = self.translator.translate(request, e)

            span.set_attribute("http.status_code", response.status_code)
            return response

    def _do_handle_request(self, request: RestRequest) -> RestResponse:
        controller = self.resolver.resolve(request)

        outcome = self.filter_chain.run(PreActionEvent(request, controller))
        if isinstance(outcome, ShortCircuit):
            return outcome.response

        return self.dispatcher.dispatch(controller, request)
