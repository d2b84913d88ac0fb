"""HTTP server exposing the DIDComm endpoint and agent introspection routes."""
from __future__ import annotations

from peer_didcomm.server.app import DIDCommHandler, create_server, run_server

__all__ = ["DIDCommHandler", "create_server", "run_server"]
