"""Route handler functions for the peer-didcomm HTTP server.

Each function accepts parsed request data and returns a tuple of
(status_code, response_dict). The HTTP handler in app.py calls these
functions and serializes the results to JSON.
"""
from __future__ import annotations

import asyncio
import datetime
import logging
from typing import Optional

from peer_didcomm import __version__
from peer_didcomm.agent import Agent
from peer_didcomm.errors import FormatError, IntegrityError
from peer_didcomm.inbound.processor import InvalidMessageError
from peer_didcomm.server.models import (
    AcknowledgementResponse,
    DIDResponse,
    ErrorResponse,
    HealthResponse,
    MessagesResponse,
)

logger = logging.getLogger(__name__)

# Module-level shared state
_agent: Optional[Agent] = None
_endpoint: str = ""


def configure(agent: Agent, endpoint: str = "") -> None:
    """Install the agent served by the route handlers.

    Parameters
    ----------
    agent:
        The agent whose identity and processor back every route.
    endpoint:
        Public DIDComm endpoint advertised by GET /api/did.
    """
    global _agent, _endpoint
    _agent = agent
    _endpoint = endpoint


def reset_state() -> None:
    """Clear the configured agent; used in tests and for clean restarts."""
    global _agent, _endpoint
    _agent = None
    _endpoint = ""


def _not_configured() -> tuple[int, dict[str, object]]:
    return 503, ErrorResponse(
        error="Service unavailable", detail="No agent identity is configured."
    ).model_dump()


def handle_didcomm(packed: str) -> tuple[int, dict[str, object]]:
    """Handle POST /didcomm.

    Parameters
    ----------
    packed:
        The raw request body (a packed DIDComm message).

    Returns
    -------
    tuple[int, dict[str, object]]
        HTTP status code and response dictionary.
    """
    if _agent is None:
        return _not_configured()
    if not packed.strip():
        return 400, ErrorResponse(error="Invalid DIDComm message", detail="Empty body.").model_dump()

    try:
        ack = asyncio.run(_agent.processor.receive(packed))
    except InvalidMessageError as exc:
        return 400, ErrorResponse(error="Invalid DIDComm message", detail=str(exc)).model_dump()
    except (FormatError, IntegrityError) as exc:
        logger.error("Failed to unpack message: %s", exc)
        return 400, ErrorResponse(
            error="Failed to unpack DIDComm message", detail=str(exc)
        ).model_dump()

    return 200, AcknowledgementResponse(message_id=str(ack["message_id"])).model_dump()


def handle_get_did() -> tuple[int, dict[str, object]]:
    """Handle GET /api/did."""
    if _agent is None:
        return _not_configured()
    endpoints = {"didcomm": _endpoint} if _endpoint else {}
    response = DIDResponse(
        did=_agent.did,
        short_did=_agent.identity.short_did,
        did_document=_agent.document,
        endpoints=endpoints,
    )
    return 200, response.model_dump(by_alias=True)


def handle_list_messages() -> tuple[int, dict[str, object]]:
    """Handle GET /api/messages."""
    if _agent is None:
        return _not_configured()
    records = _agent.processor.store.all()
    return 200, MessagesResponse(
        count=len(records), messages=[record.to_dict() for record in records]
    ).model_dump()


def handle_session_messages(session_token: str) -> tuple[int, dict[str, object]]:
    """Handle GET /api/messages/{session_token}."""
    if _agent is None:
        return _not_configured()
    records = _agent.processor.store.for_session(session_token)
    return 200, MessagesResponse(
        count=len(records), messages=[record.to_dict() for record in records]
    ).model_dump()


def handle_health() -> tuple[int, dict[str, object]]:
    """Handle GET /health."""
    message_count = len(_agent.processor.store) if _agent is not None else 0
    return 200, HealthResponse(
        version=__version__,
        timestamp=datetime.datetime.now(datetime.timezone.utc).isoformat(),
        message_count=message_count,
    ).model_dump()


__all__ = [
    "configure",
    "handle_didcomm",
    "handle_get_did",
    "handle_health",
    "handle_list_messages",
    "handle_session_messages",
    "reset_state",
]
