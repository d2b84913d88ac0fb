"""InboundProcessor — receive, record, and answer DIDComm messages.

Processing steps for one packed message:

1. Unpack it with the configured :class:`~peer_didcomm.routing.Packer`.
2. Require ``type`` and ``id`` (:class:`InvalidMessageError`).
3. Record it in the :class:`MessageStore`, queued under
   ``body.session_token`` when one is present.
4. Dispatch to the handler for its type.
5. Deliver any response to the sender through the
   :class:`~peer_didcomm.routing.Router`. A failed delivery is logged and
   recorded on the message; the inbound message is still acknowledged.
"""
from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from peer_didcomm.did.peer4 import shorten_for_log
from peer_didcomm.errors import FormatError, PeerDIDCommError
from peer_didcomm.inbound.handlers import HandlerContext, HandlerRegistry, default_registry
from peer_didcomm.routing.engine import Router
from peer_didcomm.routing.packing import Packer

logger = logging.getLogger(__name__)


class InvalidMessageError(FormatError):
    """Raised when an unpacked message lacks required DIDComm fields."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Invalid DIDComm message: missing required fields: {', '.join(missing)}")


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass
class MessageRecord:
    """A received message and what happened to it."""

    id: str
    type: str
    from_did: Optional[str] = None
    to: Any = None
    body: Any = None
    thid: Optional[str] = None
    pthid: Optional[str] = None
    received_at: datetime.datetime = field(default_factory=_utcnow)
    processed: bool = False
    processed_at: Optional[datetime.datetime] = None
    response_id: Optional[str] = None
    delivery_error: Optional[str] = None

    @classmethod
    def from_message(cls, message: dict[str, Any]) -> "MessageRecord":
        return cls(
            id=str(message["id"]),
            type=str(message["type"]),
            from_did=message.get("from"),
            to=message.get("to"),
            body=message.get("body"),
            thid=message.get("thid"),
            pthid=message.get("pthid"),
        )

    @property
    def session_token(self) -> Optional[str]:
        if isinstance(self.body, dict):
            token = self.body.get("session_token")
            if isinstance(token, str) and token:
                return token
        return None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "type": self.type,
            "from": self.from_did,
            "to": self.to,
            "body": self.body,
            "thid": self.thid,
            "pthid": self.pthid,
            "receivedAt": self.received_at.isoformat(),
            "processed": self.processed,
            "processedAt": self.processed_at.isoformat() if self.processed_at else None,
            "responseId": self.response_id,
            "deliveryError": self.delivery_error,
        }


class MessageStore:
    """In-memory store of received messages, indexed by id and session token."""

    def __init__(self) -> None:
        self._messages: dict[str, MessageRecord] = {}
        self._sessions: dict[str, list[MessageRecord]] = {}

    def add(self, record: MessageRecord) -> None:
        """Store *record*; a record with a session token is also queued for it."""
        self._messages[record.id] = record
        token = record.session_token
        if token is not None:
            self._sessions.setdefault(token, []).append(record)

    def get(self, message_id: str) -> Optional[MessageRecord]:
        return self._messages.get(message_id)

    def all(self) -> list[MessageRecord]:
        return list(self._messages.values())

    def for_session(self, session_token: str) -> list[MessageRecord]:
        """Return messages queued for *session_token* in arrival order."""
        return list(self._sessions.get(session_token, []))

    def __len__(self) -> int:
        return len(self._messages)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._messages


class InboundProcessor:
    """Unpack, record, dispatch, and answer inbound DIDComm messages.

    Parameters
    ----------
    packer:
        Unpacks inbound payloads.
    router:
        Delivers handler responses back to senders.
    local_did:
        The DID responses are sent from.
    registry:
        Message handlers. Defaults to :func:`default_registry`.
    store:
        Where messages are recorded. A new :class:`MessageStore` by default.
    display_name:
        Name returned in user-profile responses.
    """

    def __init__(
        self,
        packer: Packer,
        router: Router,
        local_did: str,
        registry: Optional[HandlerRegistry] = None,
        store: Optional[MessageStore] = None,
        display_name: Optional[str] = None,
    ) -> None:
        self._packer = packer
        self._router = router
        self._registry = registry or default_registry()
        self.store = store if store is not None else MessageStore()
        self._context = (
            HandlerContext(local_did, display_name)
            if display_name is not None
            else HandlerContext(local_did)
        )

    @property
    def local_did(self) -> str:
        return self._context.local_did

    async def receive(self, packed: str) -> dict[str, object]:
        """Process one packed message and return the acknowledgement.

        Raises
        ------
        FormatError
            If the payload cannot be unpacked.
        InvalidMessageError
            If the message lacks ``type`` or ``id``.
        """
        message, metadata = await self._packer.unpack(packed)
        missing = [name for name in ("type", "id") if not message.get(name)]
        if missing:
            raise InvalidMessageError(missing)

        logger.info(
            "Received %s (%s) from %s, encrypted=%s authenticated=%s",
            message["type"],
            message["id"],
            shorten_for_log(message.get("from")),
            metadata.get("encrypted"),
            metadata.get("authenticated"),
        )

        record = MessageRecord.from_message(message)
        self.store.add(record)

        response = self._registry.dispatch(message, self._context)
        record.processed = True
        record.processed_at = _utcnow()

        if response is not None:
            record.response_id = response.get("id")
            sender = message.get("from")
            if not sender:
                record.delivery_error = "message has no sender to reply to"
                logger.warning("Cannot answer %s: no 'from' field", record.id)
            else:
                await self._send_response(record, response, sender)

        return {"status": "received", "message_id": record.id}

    async def _send_response(
        self, record: MessageRecord, response: dict[str, Any], recipient: str
    ) -> None:
        try:
            await self._router.deliver(response, recipient)
        except PeerDIDCommError as exc:
            record.delivery_error = str(exc)
            logger.error(
                "Failed to send %s to %s: %s",
                response.get("type"),
                shorten_for_log(recipient),
                exc,
            )
        else:
            logger.info("Sent %s to %s", response.get("type"), shorten_for_log(recipient))


__all__ = ["InboundProcessor", "InvalidMessageError", "MessageRecord", "MessageStore"]
