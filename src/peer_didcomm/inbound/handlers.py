"""Message-type handlers for inbound DIDComm plaintext.

A handler receives the unpacked message and a :class:`HandlerContext` and
returns a response message to send back to the sender, or ``None``.
Handlers are looked up by message type in a :class:`HandlerRegistry`;
most routes match on a type fragment (``/trust-ping``), a few on the
exact type URI.
"""
from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

from peer_didcomm.did.peer4 import shorten_for_log

logger = logging.getLogger(__name__)

Message = dict[str, Any]

LOGIN_AUTHENTICATED_TYPE = "https://didcomm.org/login/1.0/session-authenticated"
MEDIATE_DENY_TYPE = "https://didcomm.org/coordinate-mediation/3.0/mediate-deny"
PING_RESPONSE_TYPE = "https://didcomm.org/trust-ping/2.0/ping-response"
REQUEST_PROFILE_TYPE = "https://didcomm.org/user-profile/1.0/request-profile"
PROFILE_TYPE = "https://didcomm.org/user-profile/1.0/profile"

DEFAULT_DISPLAY_NAME = "Example Website"
MEDIATION_DENIED_REASON = "This server does not provide mediation services"


@dataclass(frozen=True)
class HandlerContext:
    """What a handler knows about the local agent."""

    local_did: str
    display_name: str = DEFAULT_DISPLAY_NAME


Handler = Callable[[Message, HandlerContext], Optional[Message]]


def build_reply(message: Message, context: HandlerContext, type_: str, body: dict[str, Any]) -> Message:
    """Build a response threaded to *message* and addressed to its sender."""
    return {
        "type": type_,
        "id": str(uuid.uuid4()),
        "thid": message.get("id"),
        "from": context.local_did,
        "to": [message.get("from")],
        "created_time": int(time.time()),
        "body": body,
    }


def _body(message: Message) -> dict[str, Any]:
    body = message.get("body")
    return body if isinstance(body, dict) else {}


def handle_login(message: Message, context: HandlerContext) -> Optional[Message]:
    if message.get("type") == LOGIN_AUTHENTICATED_TYPE:
        return None
    session_token = _body(message).get("session_token")
    if not session_token:
        logger.warning("Login message %s has no session_token", message.get("id"))
        return None
    logger.info("Login from %s for session", shorten_for_log(message.get("from")))
    return build_reply(
        message,
        context,
        LOGIN_AUTHENTICATED_TYPE,
        {"session_token": session_token, "authenticated": True},
    )


def handle_mediation_request(message: Message, context: HandlerContext) -> Optional[Message]:
    return build_reply(message, context, MEDIATE_DENY_TYPE, {"reason": MEDIATION_DENIED_REASON})


def handle_trust_ping(message: Message, context: HandlerContext) -> Optional[Message]:
    # Never answer a ping-response.
    if not str(message.get("type", "")).endswith("/ping"):
        return None
    if _body(message).get("response_requested") is False:
        return None
    return build_reply(message, context, PING_RESPONSE_TYPE, {})


def handle_profile_request(message: Message, context: HandlerContext) -> Optional[Message]:
    return build_reply(
        message, context, PROFILE_TYPE, {"profile": {"displayName": context.display_name}}
    )


def handle_basic_message(message: Message, context: HandlerContext) -> Optional[Message]:
    logger.info("Basic message: %s", _body(message).get("content"))
    return None


def handle_out_of_band(message: Message, context: HandlerContext) -> Optional[Message]:
    logger.info("Out-of-band invitation %s", message.get("id"))
    return None


@dataclass(frozen=True)
class _Route:
    pattern: str
    handler: Handler
    exact: bool

    def matches(self, message_type: str) -> bool:
        if self.exact:
            return message_type == self.pattern
        return self.pattern in message_type


class HandlerRegistry:
    """Ordered mapping of message-type patterns to handlers.

    Routes are tried in registration order; the first match wins.
    """

    def __init__(self) -> None:
        self._routes: list[_Route] = []

    def register(self, pattern: str, handler: Handler, exact: bool = False) -> None:
        """Route messages whose type contains *pattern* (or equals it if *exact*)."""
        self._routes.append(_Route(pattern, handler, exact))

    def find(self, message_type: str) -> Optional[Handler]:
        for route in self._routes:
            if route.matches(message_type):
                return route.handler
        return None

    def dispatch(self, message: Message, context: HandlerContext) -> Optional[Message]:
        """Run the handler for *message* and return its response, if any."""
        message_type = str(message.get("type", ""))
        handler = self.find(message_type)
        if handler is None:
            logger.info("Unknown message type %s, stored for later processing", message_type)
            return None
        return handler(message, context)

    def __len__(self) -> int:
        return len(self._routes)


def default_registry() -> HandlerRegistry:
    """Return a registry with the built-in protocol handlers."""
    registry = HandlerRegistry()
    registry.register("/login/", handle_login)
    registry.register("/mediate-request", handle_mediation_request)
    registry.register("/trust-ping", handle_trust_ping)
    registry.register(REQUEST_PROFILE_TYPE, handle_profile_request, exact=True)
    registry.register("/basic-message", handle_basic_message)
    registry.register("/basicmessage/", handle_basic_message)
    registry.register("/out-of-band/", handle_out_of_band)
    return registry


__all__ = [
    "Handler",
    "HandlerContext",
    "HandlerRegistry",
    "LOGIN_AUTHENTICATED_TYPE",
    "MEDIATE_DENY_TYPE",
    "PING_RESPONSE_TYPE",
    "PROFILE_TYPE",
    "REQUEST_PROFILE_TYPE",
    "build_reply",
    "default_registry",
]
