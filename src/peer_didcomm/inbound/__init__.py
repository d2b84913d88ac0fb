"""Inbound DIDComm message processing."""
from __future__ import annotations

from peer_didcomm.inbound.handlers import (
    HandlerContext,
    HandlerRegistry,
    build_reply,
    default_registry,
)
from peer_didcomm.inbound.processor import (
    InboundProcessor,
    InvalidMessageError,
    MessageRecord,
    MessageStore,
)

__all__ = [
    "HandlerContext",
    "HandlerRegistry",
    "InboundProcessor",
    "InvalidMessageError",
    "MessageRecord",
    "MessageStore",
    "build_reply",
    "default_registry",
]
