"""Transport-level exception handlers.

Failures inside the dispatch pipeline are translated by the error controller
and never reach these handlers. What does reach them is raised around the
pipeline: malformed request bodies, unmatched routes, and, as a last resort,
a failure while formatting an error response. All of them are rendered with
the same ``ErrorResponse`` body as pipeline errors.
"""

from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from restcore.api.utils.responses import to_http_response
from restcore.core.config import Settings, get_settings
from restcore.core.exceptions import (
    HttpError,
    NotFoundError,
    RestError,
    UnauthorizedError,
)
from restcore.rest.controllers.error import render_error


def _settings_for(request: Request) -> Settings:
    """Settings the application was created with."""
    return getattr(request.app.state, "settings", None) or get_settings()


def _from_http_exception(exc: HTTPException) -> RestError:
    """Map a Starlette HTTPException onto the error hierarchy."""
    detail = str(exc.detail)
    if exc.status_code == HTTPStatus.NOT_FOUND:
        return NotFoundError(detail)
    if exc.status_code == HTTPStatus.UNAUTHORIZED:
        return UnauthorizedError(detail)
    return HttpError(detail, status_code=exc.status_code)


async def rest_error_handler(request: Request, exc: Exception) -> Response:
    """Handle RestError exceptions raised outside the dispatch pipeline.

    Args:
        request: The request that caused the exception.
        exc: The RestError to handle.

    Returns:
        Response: The structured error response.

    Raises:
        TypeError: If exc is not a RestError instance.
    """
    if not isinstance(exc, RestError):
        raise TypeError(f"Expected RestError, got {type(exc).__name__}")

    rest_response = render_error(
        exc, _settings_for(request), method=request.method, path=request.url.path
    )
    return to_http_response(rest_response)


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException, e.g. unmatched routes.

    Headers attached to the exception are kept on the response.

    Args:
        request: The request that caused the exception.
        exc: The HTTPException to handle.

    Returns:
        Response: The structured error response.

    Raises:
        TypeError: If exc is not an HTTPException instance.
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    rest_response = render_error(
        _from_http_exception(exc),
        _settings_for(request),
        method=request.method,
        path=request.url.path,
    )
    if exc.headers:
        rest_response.headers.update(exc.headers)
    return to_http_response(rest_response)


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle any other exception with a 500 response.

    Outside development the response hides the exception details.

    Args:
        request: The request that caused the exception.
        exc: The unhandled exception.

    Returns:
        Response: The structured error response.
    """
    rest_response = render_error(
        exc, _settings_for(request), method=request.method, path=request.url.path
    )
    return to_http_response(rest_response)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(RestError, rest_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
