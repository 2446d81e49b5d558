"""orjson-backed responses and conversion of core responses for Starlette.

``ORJSONResponse`` is the default response class of the application.
:func:`to_http_response` turns the ``RestResponse`` produced by the dispatch
core into the matching Starlette response:

- no body: an empty response with the status and headers only
- ``str``/``bytes`` body: sent verbatim with the response's media type
- anything else: serialized with orjson
"""

from typing import Any

import orjson
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from restcore.rest.http import RestResponse


class ORJSONResponse(JSONResponse):
    """FastAPI Response class using orjson for JSON serialization.

    Handles datetime objects, UUIDs, and Pydantic models natively.

    Attributes:
        media_type: The media type for the response.
    """

    media_type = "application/json"

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - accepts any JSON-serializable content
        """Render the content as JSON using orjson.

        Args:
            content: The content to serialize to JSON.

        Returns:
            bytes: The JSON-encoded bytes.
        """
        if isinstance(content, BaseModel):
            content = content.model_dump()

        return orjson.dumps(content, option=orjson.OPT_SORT_KEYS)


def to_http_response(rest_response: RestResponse) -> Response:
    """Convert a core response into a Starlette response.

    Args:
        rest_response: Response produced by the dispatch pipeline.

    Returns:
        Response: The response to send to the client.
    """
    body = rest_response.body
    status_code = rest_response.status_code
    headers = dict(rest_response.headers)

    if body is None:
        return Response(status_code=status_code, headers=headers)

    if isinstance(body, str | bytes):
        return Response(
            content=body,
            status_code=status_code,
            headers=headers,
            media_type=rest_response.media_type,
        )

    return ORJSONResponse(content=body, status_code=status_code, headers=headers)
