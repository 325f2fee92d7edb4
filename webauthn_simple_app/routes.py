"""Flask endpoints that exchange WebAuthn messages with the browser.

The blueprint only moves and shape-checks messages: each endpoint parses the
request body into the matching message, validates it, hands it to an
application supplied handler and validates whatever the handler returns.
Verifying attestations and assertions is the handler's job.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Type, Union

from flask import Blueprint, current_app, jsonify, request

from .config import LOG_MESSAGES_KEY, load_routes
from .errors import MessageError
from .messages import (
    CreateOptions,
    CreateOptionsRequest,
    CredentialAssertion,
    CredentialAttestation,
    GetOptions,
    GetOptionsRequest,
    Message,
    ServerResponse,
)

__all__ = ["WebAuthnHandlers", "create_blueprint", "failure_response"]

Reply = Union[Message, Mapping[str, Any]]


@dataclass
class WebAuthnHandlers:
    """Application callbacks invoked with validated messages.

    A handler may return a message instance or a mapping, which is converted
    with the expected message class.
    """

    attestation_options: Callable[[CreateOptionsRequest], Reply]
    attestation_result: Callable[[CredentialAttestation], Reply]
    assertion_options: Callable[[GetOptionsRequest], Reply]
    assertion_result: Callable[[CredentialAssertion], Reply]


# route name, handler attribute, inbound message, reply message
_ENDPOINTS: Tuple[Tuple[str, str, Type[Message], Type[Message]], ...] = (
    ("attestationOptions", "attestation_options", CreateOptionsRequest, CreateOptions),
    ("attestationResult", "attestation_result", CredentialAttestation, ServerResponse),
    ("assertionOptions", "assertion_options", GetOptionsRequest, GetOptions),
    ("assertionResult", "assertion_result", CredentialAssertion, ServerResponse),
)


def failure_response(error_message: str) -> ServerResponse:
    return ServerResponse(status="failed", errorMessage=error_message)


def _reply(msg: Message, status_code: int):
    return jsonify(msg.to_object()), status_code


def _log_message(direction: str, msg: Message) -> None:
    if not current_app.config.get(LOG_MESSAGES_KEY):
        return

    try:
        rendered = msg.to_human_string()
    except MessageError as exc:
        current_app.logger.warning(
            "Could not render %s %s: %s", direction.lower(), type(msg).__name__, exc
        )
        return
    current_app.logger.info("%s message:\n%s", direction, rendered)


def _make_view(
    route_name: str,
    handler: Callable[[Any], Reply],
    request_cls: Type[Message],
    reply_cls: Type[Message],
):
    def view():
        if not request.is_json:
            return _reply(failure_response("Expected JSON payload."), 400)

        try:
            msg = request_cls.from_json(request.get_data(as_text=True))
            msg.validate()
        except MessageError as exc:
            current_app.logger.warning("Rejected %s: %s", request_cls.__name__, exc)
            return _reply(failure_response(str(exc)), 400)

        _log_message("Received", msg)

        try:
            reply = handler(msg)
            if not isinstance(reply, reply_cls):
                reply = reply_cls.from_json(reply)
            reply.validate()
        except MessageError as exc:
            current_app.logger.exception("Invalid reply for %s: %s", route_name, exc)
            return _reply(failure_response(str(exc)), 500)

        _log_message("Sending", reply)
        return _reply(reply, 200)

    view.__name__ = route_name
    return view


def create_blueprint(
    handlers: WebAuthnHandlers,
    routes: Optional[Mapping[str, object]] = None,
    name: str = "webauthn",
) -> Blueprint:
    """Build a blueprint serving the four ceremony endpoints.

    ``routes`` is a configuration mapping such as ``app.config`` (see
    :func:`webauthn_simple_app.config.load_routes`); paths fall back to the
    environment and then to the defaults.
    """

    blueprint = Blueprint(name, __name__)
    paths = load_routes(routes)

    for route_name, attribute, request_cls, reply_cls in _ENDPOINTS:
        blueprint.add_url_rule(
            paths[route_name],
            endpoint=route_name,
            view_func=_make_view(route_name, getattr(handlers, attribute), request_cls, reply_cls),
            methods=["POST"],
        )

    return blueprint
