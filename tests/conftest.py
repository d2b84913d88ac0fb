"""Shared fixtures: recording pack/transport collaborators and sample identities."""
from __future__ import annotations

import json
from typing import Any, Optional

import pytest

from peer_didcomm.identity import LocalIdentity
from peer_didcomm.routing.packing import PlaintextPacker
from peer_didcomm.routing.transport import TransportResponse
from peer_didcomm.store.resolver import DIDResolver

RECIPIENT_ENDPOINT = "https://recipient.example/didcomm"
MEDIATOR_ENDPOINT = "https://mediator.example/didcomm"
SENDER_ENDPOINT = "https://sender.example/didcomm"


class RecordingPacker(PlaintextPacker):
    """PlaintextPacker that records every pack call."""

    def __init__(self) -> None:
        self.calls: list[tuple[dict[str, Any], str, Optional[str]]] = []
        self.outputs: list[str] = []

    async def pack(
        self,
        message: dict[str, Any],
        to: str,
        frm: Optional[str] = None,
    ) -> str:
        self.calls.append((message, to, frm))
        packed = await super().pack(message, to, frm)
        self.outputs.append(packed)
        return packed


class RecordingTransport:
    """Transport that records sends and answers with a fixed response."""

    def __init__(self, status: int = 200, body: bytes = b'{"status": "received"}') -> None:
        self.status = status
        self.body = body
        self.sent: list[tuple[str, bytes, str]] = []

    async def send(self, uri: str, body: bytes, content_type: str) -> TransportResponse:
        self.sent.append((uri, body, content_type))
        return TransportResponse(status=self.status, body=self.body)

    def sent_messages(self) -> list[dict[str, Any]]:
        return [json.loads(body) for _, body, _ in self.sent]


@pytest.fixture()
def packer() -> RecordingPacker:
    return RecordingPacker()


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def resolver() -> DIDResolver:
    return DIDResolver()


@pytest.fixture()
def recipient() -> LocalIdentity:
    """An identity reachable directly over HTTPS."""
    return LocalIdentity.generate(RECIPIENT_ENDPOINT)


@pytest.fixture()
def mediator() -> LocalIdentity:
    return LocalIdentity.generate(MEDIATOR_ENDPOINT)


@pytest.fixture()
def relayed_recipient(mediator: LocalIdentity) -> LocalIdentity:
    """An identity whose service endpoint is the mediator's DID."""
    return LocalIdentity.generate(mediator.did)


@pytest.fixture()
def sender() -> LocalIdentity:
    return LocalIdentity.generate(SENDER_ENDPOINT)
