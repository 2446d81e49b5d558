"""REST dispatch core: resolution, pre-action filters, dispatch and error translation."""

from restcore.rest.auth import (
    BcryptPasswordVerifier,
    Credentials,
    InMemoryUserLookup,
    PasswordVerifier,
    User,
    UserLookup,
    hash_password,
    parse_basic_credentials,
)
from restcore.rest.controllers import (
    Controller,
    ControllerKind,
    ControllerServices,
    ErrorController,
    NoneController,
)
from restcore.rest.dispatcher import ActionDispatcher, derive_action_name
from restcore.rest.errors import ErrorTranslator
from restcore.rest.filters import (
    AllowedMethodsFilter,
    AuthenticationFilter,
    FilterChain,
    PreActionEvent,
    Proceed,
    ShortCircuit,
)
from restcore.rest.http import RestRequest, RestResponse
from restcore.rest.registry import ExcludedModels
from restcore.rest.resolver import ControllerResolver, to_controller_name
from restcore.rest.service import RestService

__all__ = [
    "ActionDispatcher",
    "AllowedMethodsFilter",
    "AuthenticationFilter",
    "BcryptPasswordVerifier",
    "Controller",
    "ControllerKind",
    "ControllerResolver",
    "ControllerServices",
    "Credentials",
    "ErrorController",
    "ErrorTranslator",
    "ExcludedModels",
    "FilterChain",
    "InMemoryUserLookup",
    "NoneController",
    "PasswordVerifier",
    "PreActionEvent",
    "Proceed",
    "RestRequest",
    "RestResponse",
    "RestService",
    "ShortCircuit",
    "User",
    "UserLookup",
    "derive_action_name",
    "hash_password",
    "parse_basic_credentials",
    "to_controller_name",
]
