"""peer_didcomm.did — DID methods, documents, and key material.

Submodules
----------
peer4
    did:peer:4 encode / decode / resolve with hash verification.
contextualize
    Binds a bare document to a DID (ids, controllers, Multikey suites).
document
    Typed DIDDocument, VerificationMethod, Service, ServiceEndpoint views.
methods
    DIDMethod variant and classify_did().
did_key, peer2
    Resolvers for did:key and did:peer:2.
key_manager
    Ed25519 / X25519 key generation and Multikey encoders.

Quick start
-----------
::

    from peer_didcomm.did import peer4

    did = peer4.encode(
        {
            "verificationMethod": [
                {"id": "#key-1", "type": "Multikey", "publicKeyMultibase": "z6Mk..."}
            ],
            "authentication": ["#key-1"],
        }
    )
    doc = peer4.resolve(did)
    print(doc["id"])  # did:peer:4zQm...
"""
from __future__ import annotations

from peer_didcomm.did import peer4
from peer_didcomm.did.contextualize import contextualize
from peer_didcomm.did.document import (
    DIDCOMM_MESSAGING,
    DIDDocument,
    Service,
    ServiceEndpoint,
    VerificationMethod,
    VerificationSuite,
    suite_for_multikey,
)
from peer_didcomm.did.key_manager import KeyManager
from peer_didcomm.did.methods import DIDMethod, classify_did

__all__ = [
    "DIDCOMM_MESSAGING",
    "DIDDocument",
    "DIDMethod",
    "KeyManager",
    "Service",
    "ServiceEndpoint",
    "VerificationMethod",
    "VerificationSuite",
    "classify_did",
    "contextualize",
    "peer4",
    "suite_for_multikey",
]
