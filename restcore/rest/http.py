"""Request and response models exchanged between the transport and the core.

``RestRequest`` is the read-only view of one routed HTTP call: the method,
the routing parameters (``controller``, ``id``, ``property``), the headers
and the body already materialized as a mapping. ``RestResponse`` is what a
controller fills in and what the pipeline hands back to the transport.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from restcore.core.constants import BODY_METHODS
from restcore.core.exceptions import RestError
from restcore.core.types import Payload

# Identifiers that address the collection rather than an instance
NO_RESOURCE_IDS = frozenset({None, "0"})


class RestRequest(BaseModel):
    """Immutable per-call view of a routed request.

    ``id`` and ``property`` are accepted under their routing names and
    exposed as ``resource_id`` and ``property_name``. Header names are
    lower-cased so lookups are case-insensitive.

    A body the transport could not parse is kept as ``body_error`` instead
    of failing the call early, so unauthenticated requests still get the
    authentication challenge first.
    """

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, arbitrary_types_allowed=True
    )

    method: str = Field(default="GET", description="HTTP verb, upper-cased")
    controller: str = Field(..., description="Resource name in underscore_case")
    resource_id: str | None = Field(default=None, alias="id")
    property_name: str | None = Field(default=None, alias="property")
    headers: dict[str, str] = Field(default_factory=dict)
    data: Payload = Field(default_factory=dict, description="Parsed request body")
    body_error: RestError | None = Field(
        default=None,
        exclude=True,
        description="Why the body could not be parsed; raised on dispatch",
    )

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        """Upper-case the HTTP method."""
        return str(v).strip().upper()

    @field_validator("resource_id", "property_name", mode="before")
    @classmethod
    def empty_to_none(cls, v: object) -> object:
        """Treat empty routing segments as absent."""
        if v == "":
            return None
        return v

    @field_validator("headers", mode="after")
    @classmethod
    def lower_header_names(cls, v: dict[str, str]) -> dict[str, str]:
        """Lower-case header names."""
        return {name.lower(): value for name, value in v.items()}

    @property
    def has_id(self) -> bool:
        """Whether the request addresses a single resource instance.

        An id of ``"0"`` counts as absent, like an empty one: ``order/0``
        addresses the collection.
        """
        return self.resource_id not in NO_RESOURCE_IDS

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return a header value by case-insensitive name."""
        return self.headers.get(name.lower(), default)

    def param(self, name: str) -> str | None:
        """Return a routing parameter by its routing name.

        Args:
            name: One of ``controller``, ``id`` or ``property``.

        Returns:
            str | None: The parameter value, None if absent or unknown.
        """
        return {
            "controller": self.controller,
            "id": self.resource_id,
            "property": self.property_name,
        }.get(name)

    def post(self) -> Payload:
        """Body of a POST request, empty for any other method."""
        return dict(self.data) if self.method == "POST" else {}

    def put(self) -> Payload:
        """Body of a PUT or PATCH request, empty for any other method."""
        if self.method in BODY_METHODS and self.method != "POST":
            return dict(self.data)
        return {}


class RestResponse(BaseModel):
    """Response filled in by a controller.

    A ``body`` of None produces an empty response; strings and bytes are
    sent verbatim with ``media_type``; anything else is serialized as JSON.
    """

    status_code: int = 200
    body: Any = None
    headers: dict[str, str] = Field(default_factory=dict)
    media_type: str = "application/json"
