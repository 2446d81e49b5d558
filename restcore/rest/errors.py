"""Translation of pipeline failures into error responses."""

from typing import TYPE_CHECKING

from loguru import logger

from restcore.core.config import get_settings
from restcore.rest.controllers.error import ErrorController
from restcore.rest.http import RestRequest, RestResponse

if TYPE_CHECKING:
    from restcore.core.config import Settings


class ErrorTranslator:
    """Routes an exception raised while handling a request to the error controller.

    The original request is handed to a fresh :class:`ErrorController` which
    runs its ``show`` action. A failure while rendering the error is logged
    and propagated; it is never translated a second time.
    """

    def __init__(self, settings: "Settings | None" = None) -> None:
        self.settings = settings or get_settings()

    def translate(self, request: RestRequest, error: Exception) -> RestResponse:
        """Build the error response for ``error``.

        Args:
            request: The request whose handling failed.
            error: The exception raised by the pipeline.

        Returns:
            RestResponse: The rendered error response.
        """
        controller = ErrorController(request, self.settings)
        controller.set_error(error)
        try:
            return controller.run("show")
        except Exception:
            logger.critical(
                "Error rendering failed for {} while handling {}",
                type(error).__name__,
                request.controller,
            )
            raise
