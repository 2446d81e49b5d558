"""Catch-all REST routes feeding the dispatch core.

Three paths are routed for every supported method:

- ``{prefix}/{controller}``
- ``{prefix}/{controller}/{id}``
- ``{prefix}/{controller}/{id}/{property}``

The handler materializes the request body, builds a ``RestRequest`` and runs
``RestService.handle_request`` in the thread pool. A body that cannot be
parsed does not fail the call here: the error travels on the request and is
raised once the filter chain has passed.
"""

from http import HTTPStatus

import orjson
from fastapi import APIRouter, Request, Response
from loguru import logger
from starlette.concurrency import run_in_threadpool

from restcore.api.constants import FORM_CONTENT_TYPES, JSON_CONTENT_TYPES
from restcore.api.utils.responses import to_http_response
from restcore.core.constants import BODY_METHODS, SUPPORTED_METHODS
from restcore.core.exceptions import HttpError, RestError, ValidationError
from restcore.core.types import Payload
from restcore.rest.http import RestRequest
from restcore.rest.service import RestService

REST_PATHS = (
    "/{controller}",
    "/{controller}/{id}",
    "/{controller}/{id}/{property}",
)


async def read_payload(request: Request) -> Payload:
    """Parse the request body into a mapping.

    Only POST, PUT and PATCH bodies are read. JSON bodies must be objects;
    form bodies keep their text fields.

    Args:
        request: The incoming request.

    Returns:
        Payload: The parsed body, empty when there is none.

    Raises:
        ValidationError: If a JSON body is malformed or not an object.
        HttpError: If the body has an unsupported content type.
    """
    if request.method not in BODY_METHODS:
        return {}

    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()

    if media_type in FORM_CONTENT_TYPES:
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    body = await request.body()
    if not body:
        return {}

    if media_type in JSON_CONTENT_TYPES or not media_type:
        try:
            data = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise ValidationError("Malformed JSON body", cause=e) from e
        if not isinstance(data, dict):
            raise ValidationError(
                "Request body must be a JSON object",
                context={"received_type": type(data).__name__},
            )
        return data

    raise HttpError(
        "Unsupported Media Type",
        status_code=HTTPStatus.UNSUPPORTED_MEDIA_TYPE,
        context={"content_type": media_type},
    )


def create_rest_router(service: RestService, prefix: str = "") -> APIRouter:
    """Build the router that hands REST requests to ``service``.

    Args:
        service: The dispatch pipeline.
        prefix: URL prefix for all REST routes, e.g. ``/api``.

    Returns:
        APIRouter: Router with the three REST paths for every method.
    """
    router = APIRouter(prefix=prefix)

    async def handle_rest_request(request: Request) -> Response:
        path_params = request.path_params
        body_error: RestError | None = None
        try:
            data = await read_payload(request)
        except RestError as e:
            logger.debug("Deferring body error until after authentication: {}", e)
            data, body_error = {}, e

        rest_request = RestRequest(
            method=request.method,
            controller=path_params["controller"],
            id=path_params.get("id"),
            property=path_params.get("property"),
            headers=dict(request.headers),
            data=data,
            body_error=body_error,
        )

        rest_response = await run_in_threadpool(service.handle_request, rest_request)
        return to_http_response(rest_response)

    for path in REST_PATHS:
        router.add_api_route(
            path,
            handle_rest_request,
            methods=list(SUPPORTED_METHODS),
            include_in_schema=False,
        )

    logger.debug("REST routes registered under '{}'", prefix or "/")
    return router
