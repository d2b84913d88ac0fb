"""Pack / unpack collaborator interface.

Encryption is not implemented here. The router and the inbound processor
call an object satisfying :class:`Packer`, which is expected to look up
recipient documents through a :class:`~peer_didcomm.store.DIDResolver` and
private keys through a :class:`~peer_didcomm.store.SecretsStore`.

:class:`PlaintextPacker` passes DIDComm plaintext through unchanged; it is
useful for local development and tests.
"""
from __future__ import annotations

import json
from typing import Any, Optional, Protocol, runtime_checkable

from peer_didcomm.errors import FormatError

DIDCOMM_ENCRYPTED_MEDIA_TYPE: str = "application/didcomm-encrypted+json"
DIDCOMM_PLAIN_MEDIA_TYPE: str = "application/didcomm-plain+json"


@runtime_checkable
class Packer(Protocol):
    """The external encryption collaborator."""

    async def pack(
        self,
        message: dict[str, Any],
        to: str,
        frm: Optional[str] = None,
    ) -> str:
        """Return the packed form of *message* addressed to *to*."""
        ...

    async def unpack(self, packed: str) -> tuple[dict[str, Any], dict[str, Any]]:
        """Return ``(message, metadata)`` for a packed message."""
        ...


class PlaintextPacker:
    """A :class:`Packer` that serializes messages without encrypting them."""

    media_type: str = DIDCOMM_PLAIN_MEDIA_TYPE

    async def pack(
        self,
        message: dict[str, Any],
        to: str,
        frm: Optional[str] = None,
    ) -> str:
        return json.dumps(message, separators=(",", ":"))

    async def unpack(self, packed: str) -> tuple[dict[str, Any], dict[str, Any]]:
        try:
            message = json.loads(packed)
        except json.JSONDecodeError as exc:
            raise FormatError(f"Packed message is not valid JSON: {exc}") from exc
        if not isinstance(message, dict):
            raise FormatError("Packed message must be a JSON object")
        metadata = {"encrypted": False, "authenticated": False, "anonymous_sender": False}
        return message, metadata


__all__ = [
    "DIDCOMM_ENCRYPTED_MEDIA_TYPE",
    "DIDCOMM_PLAIN_MEDIA_TYPE",
    "Packer",
    "PlaintextPacker",
]
