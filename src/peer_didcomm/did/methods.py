"""DID method classification.

Every place that needs to branch on the DID method calls
:func:`classify_did` once and dispatches on the resulting
:class:`DIDMethod` instead of testing string prefixes ad hoc.
"""
from __future__ import annotations

from enum import Enum


class DIDMethod(str, Enum):
    """The DID methods this package knows how to resolve."""

    KEY = "did:key"
    PEER2 = "did:peer:2"
    PEER4 = "did:peer:4"
    UNKNOWN = "unknown"


_PREFIXES: tuple[tuple[str, DIDMethod], ...] = (
    ("did:key:", DIDMethod.KEY),
    ("did:peer:2", DIDMethod.PEER2),
    ("did:peer:4", DIDMethod.PEER4),
)


def classify_did(did: str) -> DIDMethod:
    """Return the :class:`DIDMethod` for *did* (``UNKNOWN`` if unsupported)."""
    for prefix, method in _PREFIXES:
        if did.startswith(prefix):
            return method
    return DIDMethod.UNKNOWN


__all__ = ["DIDMethod", "classify_did"]
