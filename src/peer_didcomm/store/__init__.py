"""peer_didcomm.store — in-memory DID document and private key stores.

Submodules
----------
resolver
    DIDResolver: DID (and alias) to document cache with peer-4 verification.
secrets
    SecretsStore and SecretRecord: fully qualified key id to private key.
"""
from __future__ import annotations

from peer_didcomm.store.resolver import DEFAULT_LOOKUPS, DIDResolver
from peer_didcomm.store.secrets import (
    SecretRecord,
    SecretsStore,
    ed25519_secret,
    x25519_secret,
)

__all__ = [
    "DEFAULT_LOOKUPS",
    "DIDResolver",
    "SecretRecord",
    "SecretsStore",
    "ed25519_secret",
    "x25519_secret",
]
