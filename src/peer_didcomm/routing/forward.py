"""DIDComm routing 2.0 forward envelopes.

A mediator receives a ``forward`` message addressed to itself, reads
``body.next`` and re-delivers the single attachment to that DID.
"""
from __future__ import annotations

import base64
import uuid
from typing import Any

from peer_didcomm.routing.packing import DIDCOMM_ENCRYPTED_MEDIA_TYPE

FORWARD_TYPE: str = "https://didcomm.org/routing/2.0/forward"


def build_forward_message(packed: str, next_did: str, mediator_did: str) -> dict[str, Any]:
    """Wrap *packed* in a forward message for *mediator_did*.

    Parameters
    ----------
    packed:
        The ciphertext already packed for the final recipient.
    next_did:
        The final recipient; the mediator forwards to this DID.
    mediator_did:
        The mediator the envelope is addressed to.
    """
    return {
        "type": FORWARD_TYPE,
        "id": str(uuid.uuid4()),
        "to": [mediator_did],
        "body": {"next": next_did},
        "attachments": [
            {
                "id": str(uuid.uuid4()),
                "media_type": DIDCOMM_ENCRYPTED_MEDIA_TYPE,
                "data": {"base64": base64.b64encode(packed.encode("utf-8")).decode("ascii")},
            }
        ],
    }


def unwrap_forward_message(message: dict[str, Any]) -> tuple[str, str]:
    """Return ``(next_did, packed)`` from a forward message.

    Raises
    ------
    KeyError
        If the message lacks ``body.next`` or a base64 attachment.
    """
    next_did = message["body"]["next"]
    data = message["attachments"][0]["data"]["base64"]
    return next_did, base64.b64decode(data).decode("utf-8")


__all__ = ["FORWARD_TYPE", "build_forward_message", "unwrap_forward_message"]
