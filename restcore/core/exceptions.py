"""Structured exception hierarchy for consistent error handling.

Every error raised on purpose inside the dispatch pipeline derives from
``RestError``. Each carries:

- **error_code**: Standardized identifier for programmatic handling
- **status_code**: The HTTP status the error controller responds with
- **severity**: Classification for monitoring and log levels
- **context**: Structured data included in the error response details
- **cause**: The original exception, chained as ``__cause__``

Failures that are not ``RestError`` instances are treated as unexpected and
rendered as generic internal errors.
"""

from enum import Enum
from http import HTTPStatus
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for the REST service."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred in the system."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed due to invalid or malformed data."""

    NOT_FOUND = "NOT_FOUND"
    """The requested resource could not be found."""

    ACTION_NOT_FOUND = "ACTION_NOT_FOUND"
    """The resolved controller has no handler for the derived action."""

    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    """The HTTP method is not permitted for the resource."""

    UNAUTHORIZED = "UNAUTHORIZED"
    """Authentication failed or user is not authorized for this action."""

    HTTP_ERROR = "HTTP_ERROR"
    """A controller explicitly answered with an HTTP error status."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """The service was assembled with an invalid configuration."""


class Severity(Enum):
    """Severity levels for errors."""

    LOW = "LOW"
    """Client mistakes that are part of normal operation."""

    MEDIUM = "MEDIUM"
    """Errors that may affect some features but not critical operations."""

    HIGH = "HIGH"
    """Errors impacting critical functionality or security."""

    CRITICAL = "CRITICAL"
    """Errors requiring immediate attention."""


class RestError(Exception):
    """Base exception class for all application exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        status_code: HTTP status code the error maps to
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.status_code = int(status_code)
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    @property
    def is_expected(self) -> bool:
        """Determine if this is an expected error based on severity.

        Returns:
            bool: True if the error is expected (LOW or MEDIUM severity)
        """
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    def __str__(self) -> str:
        """Return a string representation of the exception.

        Returns:
            str: A formatted string containing the error code and message
        """
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return a detailed representation of the exception.

        Returns:
            str: A string showing the class name, error code, message, status
                and severity
        """
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', status_code={self.status_code}, "
            f"severity={self.severity.value}{context_str})"
        )


class ValidationError(RestError):
    """Exception raised when input validation fails."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.VALIDATION_ERROR,
            message,
            HTTPStatus.BAD_REQUEST,
            Severity.LOW,
            context,
            cause,
        )


class UnauthorizedError(RestError):
    """Exception raised when an authenticated user may not perform an action.

    Missing or invalid credentials never raise this: the authentication
    filter answers those with a challenge response instead. Controllers
    raise it for per-user authorization decisions.
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.UNAUTHORIZED,
            message,
            HTTPStatus.UNAUTHORIZED,
            Severity.HIGH,
            context,
            cause,
        )


class NotFoundError(RestError):
    """Exception raised when a requested resource cannot be found."""

    def __init__(
        self,
        message: str = "Not Found",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.NOT_FOUND,
            message,
            HTTPStatus.NOT_FOUND,
            Severity.LOW,
            context,
            cause,
        )


class ActionNotFoundError(RestError):
    """Exception raised when a controller has no handler for an action.

    Args:
        controller: Name of the controller that was asked to run the action
        action: The derived action name
    """

    def __init__(self, controller: str, action: str) -> None:
        super().__init__(
            ErrorCode.ACTION_NOT_FOUND,
            "Not Found",
            HTTPStatus.NOT_FOUND,
            Severity.LOW,
            {"controller": controller, "action": action},
        )
        self.controller = controller
        self.action = action


class MethodNotAllowedError(RestError):
    """Exception raised when the HTTP method is not permitted.

    Args:
        method: The rejected HTTP method
        allowed_methods: Methods the resource does accept, announced in the
            ``Allow`` response header
    """

    def __init__(self, method: str, allowed_methods: list[str] | None = None) -> None:
        self.method = method
        self.allowed_methods = list(allowed_methods or [])
        super().__init__(
            ErrorCode.METHOD_NOT_ALLOWED,
            "Method Not Allowed",
            HTTPStatus.METHOD_NOT_ALLOWED,
            Severity.LOW,
            {"method": method, "allowed_methods": self.allowed_methods},
        )


class HttpError(RestError):
    """An HTTP error raised by a controller with an explicit status code.

    Args:
        message: Human-readable error message
        status_code: HTTP status code to answer with
        context: Additional context information about the error
    """

    def __init__(
        self,
        message: str,
        status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR,
        context: dict[str, Any] | None = None,
    ) -> None:
        severity = (
            Severity.LOW
            if status_code < HTTPStatus.INTERNAL_SERVER_ERROR
            else Severity.HIGH
        )
        super().__init__(ErrorCode.HTTP_ERROR, message, status_code, severity, context)


class ConfigurationError(RestError):
    """Exception raised when the service is assembled with invalid settings.

    Raised at startup so that a broken controller mapping fails fast
    instead of surfacing per request.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(
            ErrorCode.CONFIGURATION_ERROR,
            message,
            HTTPStatus.INTERNAL_SERVER_ERROR,
            Severity.CRITICAL,
            None,
            cause,
        )
