"""Error controller: renders failures as structured error responses.

:func:`render_error` maps an exception to a ``RestResponse`` carrying an
``ErrorResponse`` body:

- ``RestError`` subclasses keep their status code, error code and message;
  expected errors are logged as warnings, the rest as errors.
- Anything else is an unexpected failure: HTTP 500, logged with its
  traceback. Outside development the body reveals only a generic message.

405 responses also carry an ``Allow`` header listing the accepted methods.
"""

import traceback
from typing import TYPE_CHECKING, Any

from loguru import logger

from restcore.api.schemas.errors import ErrorResponse, ServiceInfo
from restcore.core.config import get_settings
from restcore.core.context import RequestContext, generate_request_id
from restcore.core.error_context import sanitize_error_context
from restcore.core.exceptions import (
    ErrorCode,
    MethodNotAllowedError,
    RestError,
    Severity,
)
from restcore.rest.controllers.base import Controller, ControllerKind
from restcore.rest.http import RestResponse

if TYPE_CHECKING:
    from restcore.core.config import Settings
    from restcore.rest.http import RestRequest


def render_error(
    error: Exception,
    settings: "Settings",
    *,
    method: str,
    path: str,
) -> RestResponse:
    """Log ``error`` and build the structured error response for it.

    Args:
        error: The failure to render.
        settings: Application settings (environment, service info).
        method: HTTP method of the failed request, for logging.
        path: Resource path or name of the failed request, for logging.

    Returns:
        RestResponse: Response with status, headers and ErrorResponse body.
    """
    correlation_id = RequestContext.get_correlation_id()
    error_context = sanitize_error_context(
        error,
        {
            "request_method": method,
            "request_path": path,
            "username": RequestContext.get_username(),
        },
    )
    is_development = settings.environment == "development"
    headers: dict[str, str] = {}
    debug_info: dict[str, Any] | None = None

    if isinstance(error, RestError):
        log = logger.warning if error.is_expected else logger.error
        log(
            "Handling {exception_type}: {message}",
            exception_type=type(error).__name__,
            message=error.message,
            correlation_id=correlation_id,
            **error_context,
        )

        status_code = error.status_code
        error_code = error.error_code
        message = error.message
        details = error.context or None
        severity = error.severity.value

        if isinstance(error, MethodNotAllowedError):
            headers["Allow"] = ", ".join(error.allowed_methods)

        if is_development:
            debug_info = {
                "exception_type": type(error).__name__,
                "stack_trace": traceback.format_tb(error.__traceback__),
            }
            if error.cause:
                debug_info["cause"] = {
                    "type": type(error.cause).__name__,
                    "message": str(error.cause),
                }
    else:
        logger.opt(exception=error).error(
            "Unhandled exception: {exception_type}",
            exception_type=type(error).__name__,
            correlation_id=correlation_id,
            **error_context,
        )

        status_code = 500
        error_code = ErrorCode.INTERNAL_ERROR.value
        severity = Severity.CRITICAL.value
        if is_development:
            message = f"Internal server error: {type(error).__name__}"
            details = {"error": str(error), "type": type(error).__name__}
            debug_info = {
                "exception_type": type(error).__name__,
                "stack_trace": traceback.format_tb(error.__traceback__),
            }
        else:
            message = "An internal server error occurred"
            details = None

    error_response = ErrorResponse(
        error_code=error_code,
        message=message,
        details=details,
        correlation_id=correlation_id,
        request_id=generate_request_id(),
        severity=severity,
        service_info=ServiceInfo.from_settings(settings),
        debug_info=debug_info,
    )

    return RestResponse(
        status_code=status_code,
        body=error_response.model_dump(mode="json"),
        headers=headers,
    )


class ErrorController(Controller):
    """Controller that turns the failure attached to it into a response."""

    kind = ControllerKind.ERROR
    methods = frozenset()

    def __init__(
        self, request: "RestRequest", settings: "Settings | None" = None
    ) -> None:
        super().__init__(request)
        self.settings = settings or get_settings()
        self.error: Exception | None = None

    def set_error(self, error: Exception) -> None:
        """Attach the failure to render."""
        self.error = error

    def action_show(self) -> None:
        """Render the attached failure into ``self.response``."""
        if self.error is None:
            msg = "ErrorController.show requires an error, call set_error() first"
            raise RuntimeError(msg)

        request = self.request
        path = "/".join(
            part
            for part in (request.controller, request.resource_id, request.property_name)
            if part
        )
        self.response = render_error(
            self.error, self.settings, method=request.method, path=path
        )
