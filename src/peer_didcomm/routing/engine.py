"""Router — resolve the delivery path of a DIDComm message and send it.

Delivery algorithm
------------------
1. Resolve the recipient DID (:class:`UnresolvableRecipientError`).
2. Pick its ``DIDCommMessaging`` service (:class:`NoServiceEndpointError`).
3. If the service URI is itself a DID, that DID is a mediator: resolve it,
   take its own endpoint URI, and, when the recipient lists no routing
   keys, use the mediator's key-agreement keys
   (:class:`UnresolvableMediatorError`).
4. Pack the message for the recipient.
5. With a mediator, wrap the ciphertext in a forward envelope and pack
   that for the mediator.
6. POST the outer payload to the endpoint and interpret the response.

Each attempt moves through :class:`DeliveryState` values. No retries are
made; a caller that cancels ``deliver`` after the POST went out cannot
take it back.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from peer_didcomm.did.document import DIDDocument
from peer_didcomm.did.peer4 import shorten_for_log
from peer_didcomm.errors import (
    NoServiceEndpointError,
    ProblemReportError,
    TransportError,
    UnresolvableMediatorError,
    UnresolvableRecipientError,
)
from peer_didcomm.routing.forward import build_forward_message
from peer_didcomm.routing.packing import DIDCOMM_ENCRYPTED_MEDIA_TYPE, Packer
from peer_didcomm.routing.transport import HttpTransport, Transport, TransportResponse
from peer_didcomm.store.resolver import DIDResolver

logger = logging.getLogger(__name__)


class DeliveryState(str, Enum):
    """Stages of a single delivery attempt."""

    RESOLVING = "resolving"
    RELAYING = "relaying"
    PACKING = "packing"
    SENDING = "sending"
    DELIVERED = "delivered"
    FAILED = "failed"


StateObserver = Callable[[DeliveryState, str], None]


@dataclass(frozen=True)
class DeliveryPlan:
    """Where and how a message for a recipient is sent.

    Parameters
    ----------
    recipient_did:
        The final recipient.
    endpoint:
        The HTTP(S) URI the outer payload is POSTed to.
    mediator_did:
        The mediator the message is relayed through, or ``None``.
    routing_keys:
        Routing keys from the recipient's service, or the mediator's
        key-agreement keys when the service listed none.
    """

    recipient_did: str
    endpoint: str
    mediator_did: Optional[str] = None
    routing_keys: list[str] = field(default_factory=list)

    @property
    def relayed(self) -> bool:
        return self.mediator_did is not None


class Router:
    """Deliver DIDComm messages directly or through a mediator.

    Parameters
    ----------
    resolver:
        Resolves recipient and mediator DIDs.
    packer:
        The pack/unpack collaborator.
    transport:
        Sends the outer payload. Defaults to :class:`HttpTransport`.
    sender_did:
        DID passed to the packer as the sender; ``None`` for anoncrypt.
    observer:
        Optional callback receiving ``(state, recipient_did)`` on each
        state transition.
    """

    def __init__(
        self,
        resolver: DIDResolver,
        packer: Packer,
        transport: Optional[Transport] = None,
        sender_did: Optional[str] = None,
        observer: Optional[StateObserver] = None,
    ) -> None:
        self._resolver = resolver
        self._packer = packer
        self._transport: Transport = transport or HttpTransport()
        self.sender_did = sender_did
        self._observer = observer

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    async def plan_route(self, recipient_did: str) -> DeliveryPlan:
        """Resolve the endpoint, mediator, and routing keys for *recipient_did*."""
        recipient_doc = await self._resolver.resolve_document(recipient_did)
        if recipient_doc is None:
            raise UnresolvableRecipientError(recipient_did)

        service = recipient_doc.didcomm_service()
        if service is None:
            raise NoServiceEndpointError(recipient_did)

        endpoint = service.endpoint.uri
        routing_keys = list(service.endpoint.routing_keys)
        if not service.endpoint.is_did:
            return DeliveryPlan(recipient_did, endpoint, routing_keys=routing_keys)

        mediator_did = endpoint
        self._notify(DeliveryState.RELAYING, recipient_did)
        mediator_doc = await self._resolver.resolve_document(mediator_did)
        if mediator_doc is None:
            raise UnresolvableMediatorError(mediator_did, "DID could not be resolved")
        mediator_service = mediator_doc.didcomm_service()
        if mediator_service is None:
            raise UnresolvableMediatorError(mediator_did, "no DIDCommMessaging service")

        if not routing_keys:
            routing_keys = mediator_doc.key_agreement_ids()
        return DeliveryPlan(
            recipient_did,
            mediator_service.endpoint.uri,
            mediator_did=mediator_did,
            routing_keys=routing_keys,
        )

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    async def deliver(self, message: dict[str, Any], recipient_did: str) -> dict[str, Any]:
        """Pack *message* for *recipient_did*, send it, and return the JSON reply.

        Raises
        ------
        UnresolvableRecipientError, NoServiceEndpointError, UnresolvableMediatorError
            When no delivery path can be found.
        ProblemReportError
            When the endpoint answers non-2xx with a DIDComm problem report.
        TransportError
            On any other non-2xx answer or a network failure.

        Errors raised by the packer or transport propagate unchanged; every
        failure is reported to the observer as ``FAILED`` first.
        """
        self._notify(DeliveryState.RESOLVING, recipient_did)
        try:
            plan = await self.plan_route(recipient_did)
            logger.info(
                "Delivering %s to %s via %s",
                message.get("type"),
                shorten_for_log(recipient_did),
                plan.endpoint,
            )
            if plan.relayed:
                logger.info(
                    "Via mediator %s, routing keys %s",
                    shorten_for_log(plan.mediator_did),
                    plan.routing_keys,
                )

            self._notify(DeliveryState.PACKING, recipient_did)
            payload = await self._packer.pack(message, recipient_did, self.sender_did)
            if plan.mediator_did is not None:
                forward = build_forward_message(payload, recipient_did, plan.mediator_did)
                payload = await self._packer.pack(forward, plan.mediator_did, self.sender_did)

            self._notify(DeliveryState.SENDING, recipient_did)
            response = await self._transport.send(
                plan.endpoint, payload.encode("utf-8"), DIDCOMM_ENCRYPTED_MEDIA_TYPE
            )
            result = self._interpret(response)
        except Exception:
            self._notify(DeliveryState.FAILED, recipient_did)
            raise

        self._notify(DeliveryState.DELIVERED, recipient_did)
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _interpret(self, response: TransportResponse) -> dict[str, Any]:
        if not response.ok:
            report = _parse_json(response.body)
            report_type = report.get("type") if isinstance(report, dict) else None
            if isinstance(report_type, str) and "problem-report" in report_type:
                body = report.get("body")
                if not isinstance(body, dict):
                    body = {}
                logger.error(
                    "DIDComm problem report %s: %s (%s)",
                    report.get("id"),
                    body.get("comment"),
                    body.get("code"),
                )
                raise ProblemReportError(
                    code=body.get("code"),
                    comment=body.get("comment"),
                    args=body.get("args"),
                    report=report,
                )
            logger.error("HTTP error response %d: %s", response.status, response.text)
            raise TransportError(response.status, response.text)

        if not response.body.strip():
            return {}
        result = _parse_json(response.body)
        if not isinstance(result, dict):
            raise TransportError(response.status, "acknowledgement is not a JSON object")
        return result

    def _notify(self, state: DeliveryState, recipient_did: str) -> None:
        logger.debug("Delivery to %s: %s", shorten_for_log(recipient_did), state.value)
        if self._observer is not None:
            self._observer(state, recipient_did)


def _parse_json(body: bytes) -> Any:
    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None


__all__ = ["DeliveryPlan", "DeliveryState", "Router", "StateObserver"]
