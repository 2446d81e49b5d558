"""Action name derivation and action dispatch.

The action run on a controller depends only on the HTTP method, on whether
the request carries a resource identifier and a sub-property, and on
whether the controller is the sentinel:

=======  ======  ==========  ===================
method   id      property    action
=======  ======  ==========  ===================
GET      no      -           ``get_collection``
GET      yes     no          ``get``
GET      yes     ``email``   ``get_email``
POST     no      -           ``post``
PUT      yes     no          ``put``
DELETE   yes     no          ``delete``
=======  ======  ==========  ===================

For the sentinel controller the action is always the bare method. An id of
``"0"`` addresses the collection.
"""

from loguru import logger
from opentelemetry import trace

from restcore.core.constants import BODY_METHODS
from restcore.core.context import RequestContext
from restcore.core.types import ActionParams
from restcore.rest.controllers.base import Controller, ControllerKind
from restcore.rest.http import RestRequest, RestResponse

COLLECTION_SUFFIX = "_collection"


def derive_action_name(
    method: str,
    *,
    has_id: bool,
    property_name: str | None = None,
    is_none_controller: bool = False,
) -> str:
    """Derive the action name for a request.

    Args:
        method: HTTP method, any case.
        has_id: Whether the request carries a resource identifier.
        property_name: Sub-property named in the URL, if any.
        is_none_controller: Whether the sentinel controller was resolved.

    Returns:
        str: The action name, e.g. ``get_collection`` or ``get_email``.
    """
    action = method.lower()
    if is_none_controller:
        return action

    if not has_id and method.upper() == "GET":
        action += COLLECTION_SUFFIX

    if has_id and property_name:
        action += f"_{property_name}"

    return action


def build_action_params(request: RestRequest) -> ActionParams:
    """Build the parameter bag handed to the action.

    The request body is passed under ``data`` for POST, PUT and PATCH; other
    methods get an empty mapping.

    Raises:
        RestError: The body error the transport recorded on the request.
    """
    if request.body_error is not None:
        raise request.body_error
    if request.method == "POST":
        data = request.post()
    elif request.method in BODY_METHODS:
        data = request.put()
    else:
        data = {}
    return {"data": data}


class ActionDispatcher:
    """Runs the derived action on a resolved controller."""

    def action_for(self, controller: Controller, request: RestRequest) -> str:
        """Action name ``request`` maps to on ``controller``."""
        return derive_action_name(
            request.method,
            has_id=request.has_id,
            property_name=request.property_name,
            is_none_controller=controller.kind is ControllerKind.NONE,
        )

    def dispatch(self, controller: Controller, request: RestRequest) -> RestResponse:
        """Run the action and return the controller's response.

        Raises:
            ActionNotFoundError: If the controller has no such action.
        """
        action = self.action_for(controller, request)
        trace.get_current_span().set_attribute("rest.action", action)
        with logger.contextualize(
            action=action, username=RequestContext.get_username()
        ):
            logger.info("Dispatching {}.{}", controller.name, action)
            controller.run(action, build_action_params(request))
        return controller.response
