"""Unit tests for converting core responses to Starlette responses."""

import orjson
import pytest
from fastapi.responses import Response

from restcore.api.utils.responses import ORJSONResponse, to_http_response
from restcore.rest.http import RestResponse


@pytest.mark.unit
class TestToHttpResponse:
    """Test body and header handling."""

    def test_empty_body(self) -> None:
        """A None body sends status and headers only."""
        response = to_http_response(
            RestResponse(status_code=401, headers={"WWW-Authenticate": "Basic"})
        )

        assert type(response) is Response
        assert response.status_code == 401
        assert response.body == b""
        assert response.headers["WWW-Authenticate"] == "Basic"

    def test_json_body(self) -> None:
        """Structured bodies are serialized with sorted keys."""
        response = to_http_response(
            RestResponse(status_code=201, body={"b": 1, "a": [1, 2]})
        )

        assert isinstance(response, ORJSONResponse)
        assert response.status_code == 201
        assert response.body == b'{"a":[1,2],"b":1}'
        assert response.headers["content-type"] == "application/json"

    def test_text_body_is_verbatim(self) -> None:
        """String bodies keep the response media type."""
        response = to_http_response(
            RestResponse(body="hello", media_type="text/plain")
        )

        assert response.body == b"hello"
        assert response.headers["content-type"].startswith("text/plain")

    def test_headers_are_copied(self) -> None:
        """Response headers are passed through."""
        response = to_http_response(
            RestResponse(status_code=405, body={"x": 1}, headers={"Allow": "GET, PUT"})
        )

        assert response.headers["Allow"] == "GET, PUT"


@pytest.mark.unit
def test_orjson_response_renders_models() -> None:
    """Pydantic models are dumped before serialization."""
    response = ORJSONResponse(content=RestResponse(status_code=204))

    assert orjson.loads(response.body)["status_code"] == 204
