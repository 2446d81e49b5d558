"""Controller contract and the built-in sentinel and error controllers."""

from restcore.rest.controllers.base import (
    Controller,
    ControllerKind,
    ControllerServices,
    NoneController,
)
from restcore.rest.controllers.error import ErrorController, render_error

__all__ = [
    "Controller",
    "ControllerKind",
    "ControllerServices",
    "ErrorController",
    "NoneController",
    "render_error",
]
