"""Resource name to controller resolution.

Resource names arrive from the URL in underscore_case and are converted to
PascalCase (``user_profile`` -> ``UserProfile``). The controller for a name
comes from an explicit mapping validated when the resolver is built; names
missing from the mapping, and excluded names, resolve to the
``NoneController`` sentinel instead of raising.
"""

import importlib
import re
from collections.abc import Callable, Mapping
from typing import Final

from loguru import logger

from restcore.core.exceptions import ConfigurationError
from restcore.rest.controllers.base import (
    Controller,
    ControllerServices,
    NoneController,
)
from restcore.rest.http import RestRequest
from restcore.rest.registry import ExcludedModels

type ControllerFactory = Callable[[RestRequest, ControllerServices], Controller]

CONTROLLER_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Z][A-Za-z0-9]*$")


def to_controller_name(resource: str) -> str:
    """Convert an underscore_case resource name to a controller name.

    Each underscore-separated word gets its first letter upper-cased; the
    rest of the word is left untouched.

    Examples:
        >>> to_controller_name("user_profile")
        'UserProfile'
        >>> to_controller_name("order")
        'Order'
    """
    return "".join(word[:1].upper() + word[1:] for word in resource.split("_"))


def load_controllers(import_paths: Mapping[str, str]) -> dict[str, ControllerFactory]:
    """Import controller classes named by ``module:Class`` paths.

    Args:
        import_paths: Controller name to import path.

    Returns:
        dict[str, ControllerFactory]: Controller name to controller class.

    Raises:
        ConfigurationError: If a module or attribute cannot be imported.
    """
    controllers: dict[str, ControllerFactory] = {}
    for name, path in import_paths.items():
        module_name, _, attribute = path.partition(":")
        try:
            module = importlib.import_module(module_name)
            controllers[name] = getattr(module, attribute)
        except (ImportError, AttributeError) as e:
            msg = f"Cannot import controller '{name}' from '{path}'"
            raise ConfigurationError(msg, cause=e) from e
    return controllers


class ControllerResolver:
    """Maps resource names to controller instances.

    Args:
        controllers: Controller name (PascalCase) to factory. A factory is
            called with the request and the shared services; controller
            classes qualify.
        excluded_models: Names that resolve to the sentinel even when mapped.
        services: Shared services handed to every controller.

    Raises:
        ConfigurationError: If a name is not PascalCase or a factory is not
            callable.
    """

    def __init__(
        self,
        controllers: Mapping[str, ControllerFactory],
        excluded_models: ExcludedModels,
        services: ControllerServices,
    ) -> None:
        for name, factory in controllers.items():
            if not CONTROLLER_NAME_PATTERN.match(name):
                msg = f"Controller name must be PascalCase: '{name}'"
                raise ConfigurationError(msg)
            if not callable(factory):
                msg = f"Controller factory for '{name}' is not callable"
                raise ConfigurationError(msg)

        self._controllers: dict[str, ControllerFactory] = dict(controllers)
        self.excluded_models = excluded_models
        self.services = services

    @property
    def controller_names(self) -> list[str]:
        """Names of all mapped controllers."""
        return list(self._controllers)

    def resolve(self, request: RestRequest) -> Controller:
        """Return the controller for ``request.controller``.

        Args:
            request: The routed request.

        Returns:
            Controller: The mapped controller bound to ``request``, or a
                ``NoneController`` for unknown and excluded resources.
        """
        name = to_controller_name(request.controller)
        factory = self._controllers.get(name)

        if factory is None or name in self.excluded_models:
            logger.debug("No controller exposed for resource {}", request.controller)
            return NoneController(request, self.services)

        return factory(request, self.services)
