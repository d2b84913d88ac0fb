"""peer_didcomm.routing — DIDComm message delivery.

Submodules
----------
engine
    Router, DeliveryPlan, DeliveryState: direct and mediated delivery.
forward
    Routing 2.0 forward envelope construction.
packing
    Packer protocol (external encryption) and PlaintextPacker.
transport
    Transport protocol and the httpx-backed HttpTransport.
"""
from __future__ import annotations

from peer_didcomm.routing.engine import DeliveryPlan, DeliveryState, Router
from peer_didcomm.routing.forward import FORWARD_TYPE, build_forward_message
from peer_didcomm.routing.packing import (
    DIDCOMM_ENCRYPTED_MEDIA_TYPE,
    Packer,
    PlaintextPacker,
)
from peer_didcomm.routing.transport import HttpTransport, Transport, TransportResponse

__all__ = [
    "DIDCOMM_ENCRYPTED_MEDIA_TYPE",
    "DeliveryPlan",
    "DeliveryState",
    "FORWARD_TYPE",
    "HttpTransport",
    "Packer",
    "PlaintextPacker",
    "Router",
    "Transport",
    "TransportResponse",
    "build_forward_message",
]
