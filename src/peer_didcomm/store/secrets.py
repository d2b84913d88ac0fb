"""Secret records and the in-memory secrets store.

:class:`SecretsStore` maps fully qualified key ids to
:class:`SecretRecord` objects. The encryption layer asks for secrets by the
key id it finds in a resolved document, so the id under which a secret is
stored must be byte-identical to that key id:

* a document contextualized with its short-form DID yields
  ``did:peer:4zQm...#key-2``;
* the same document contextualized with its long-form DID yields
  ``did:peer:4zQm...:z...#key-2``.

Storing under one form and looking up under the other returns ``None``,
and the caller fails to decrypt. :meth:`LocalIdentity.install
<peer_didcomm.identity.LocalIdentity.install>` keeps the two in step.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from peer_didcomm.did.document import VerificationSuite
from peer_didcomm.did.key_manager import (
    to_multikey_ed25519_private,
    to_multikey_x25519_private,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SecretRecord:
    """A private key as handed to the pack/unpack collaborator.

    Parameters
    ----------
    id:
        The fully qualified key id (``<did>#<fragment>``).
    type:
        The verification suite of the matching public key.
    private_key_multibase:
        Multicodec-tagged, multibase-encoded private key.
    """

    id: str
    type: str
    private_key_multibase: str

    def to_dict(self) -> dict[str, str]:
        """Serialize to the camelCase form used by DIDComm libraries."""
        return {
            "id": self.id,
            "type": self.type,
            "privateKeyMultibase": self.private_key_multibase,
        }


def ed25519_secret(key_id: str, private_key: bytes, public_key: bytes) -> SecretRecord:
    """Build the secret record for an Ed25519 signing key."""
    return SecretRecord(
        id=key_id,
        type=VerificationSuite.ED25519_2020.value,
        private_key_multibase=to_multikey_ed25519_private(private_key, public_key),
    )


def x25519_secret(key_id: str, private_key: bytes) -> SecretRecord:
    """Build the secret record for an X25519 key-agreement key."""
    return SecretRecord(
        id=key_id,
        type=VerificationSuite.X25519_2020.value,
        private_key_multibase=to_multikey_x25519_private(private_key),
    )


class SecretsStore:
    """In-memory store of :class:`SecretRecord` objects keyed by key id.

    Records are inserted at startup and only read afterwards.
    """

    def __init__(self) -> None:
        self._secrets: dict[str, SecretRecord] = {}

    def add_secret(self, key_id: str, record: SecretRecord) -> None:
        """Store *record* under *key_id*, replacing any previous record."""
        self._secrets[key_id] = record
        logger.debug("Stored secret for key %s", key_id)

    def get_secret(self, key_id: str) -> Optional[SecretRecord]:
        """Return the record for *key_id*, or ``None`` if it is not held here."""
        record = self._secrets.get(key_id)
        if record is None:
            logger.debug("Secret not found for key %s", key_id)
        return record

    def find_known_secret_ids(self, candidate_ids: Iterable[str]) -> list[str]:
        """Return the subset of *candidate_ids* held in this store, in order."""
        return [key_id for key_id in candidate_ids if key_id in self._secrets]

    def key_ids(self) -> list[str]:
        """Return all stored key ids in insertion order."""
        return list(self._secrets)

    def __len__(self) -> int:
        return len(self._secrets)

    def __contains__(self, key_id: object) -> bool:
        return key_id in self._secrets


__all__ = ["SecretRecord", "SecretsStore", "ed25519_secret", "x25519_secret"]
