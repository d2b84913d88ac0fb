"""peer-didcomm — did:peer:4 identities and DIDComm v2 message routing.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import peer_didcomm
>>> peer_didcomm.__version__
'0.1.0'

Quick start
-----------
::

    import asyncio
    from peer_didcomm import Agent, LocalIdentity

    identity = LocalIdentity.generate("https://agent.example.org/didcomm")
    agent = Agent.create(identity)
    ack = asyncio.run(agent.router.deliver(message, recipient_did))
"""
from __future__ import annotations

__version__: str = "0.1.0"

from peer_didcomm.agent import Agent
from peer_didcomm.config import Settings
from peer_didcomm.did import (
    DIDDocument,
    DIDMethod,
    KeyManager,
    classify_did,
    contextualize,
    peer4,
)
from peer_didcomm.errors import (
    FormatError,
    IntegrityError,
    NoServiceEndpointError,
    PeerDIDCommError,
    ProblemReportError,
    TransportError,
    UnresolvableMediatorError,
    UnresolvableRecipientError,
)
from peer_didcomm.identity import KeyIdAnchor, LocalIdentity
from peer_didcomm.inbound import InboundProcessor, MessageStore
from peer_didcomm.routing import (
    DeliveryState,
    HttpTransport,
    Packer,
    PlaintextPacker,
    Router,
)
from peer_didcomm.store import DIDResolver, SecretsStore

__all__ = [
    "__version__",
    "Agent",
    "DIDDocument",
    "DIDMethod",
    "DIDResolver",
    "DeliveryState",
    "FormatError",
    "HttpTransport",
    "InboundProcessor",
    "IntegrityError",
    "KeyIdAnchor",
    "KeyManager",
    "LocalIdentity",
    "MessageStore",
    "NoServiceEndpointError",
    "Packer",
    "PeerDIDCommError",
    "PlaintextPacker",
    "ProblemReportError",
    "Router",
    "SecretsStore",
    "Settings",
    "TransportError",
    "UnresolvableMediatorError",
    "UnresolvableRecipientError",
    "classify_did",
    "contextualize",
    "peer4",
]
