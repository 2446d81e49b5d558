"""Request context management for correlation IDs and the authenticated user."""

import uuid
from contextvars import ContextVar

# Context variables survive the hop from the event loop into the thread pool
_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_username_var: ContextVar[str | None] = ContextVar("username", default=None)


class RequestContext:
    """Manages request context using contextvars for async-safe storage.

    The correlation ID is set by the transport middleware; the username is
    set by the authentication filter once credentials have been verified.
    """

    @staticmethod
    def set_correlation_id(correlation_id: str) -> None:
        """Set the correlation ID for the current context.

        Args:
            correlation_id: The correlation ID to store in the context.
        """
        _correlation_id_var.set(correlation_id)

    @staticmethod
    def get_correlation_id() -> str | None:
        """Get the correlation ID from the current context.

        Returns:
            str | None: The correlation ID if set, None otherwise.
        """
        return _correlation_id_var.get()

    @staticmethod
    def set_username(username: str) -> None:
        """Record the authenticated username for the current request."""
        _username_var.set(username)

    @staticmethod
    def get_username() -> str | None:
        """Get the authenticated username, None for anonymous requests."""
        return _username_var.get()

    @staticmethod
    def clear() -> None:
        """Clear all context variables."""
        _correlation_id_var.set(None)
        _username_var.set(None)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracking.

    Returns:
        str: A string representation of a UUID4.
    """
    return str(uuid.uuid4())


def generate_request_id() -> str:
    """Generate a unique request ID for individual request tracking.

    Returns:
        str: A prefixed UUID4 string in format 'req-<uuid4>'.

    Examples:
        >>> request_id = generate_request_id()
        >>> request_id.startswith('req-')
        True
    """
    return f"req-{uuid.uuid4()}"
