"""LocalIdentity — this process's own did:peer:4 and its private keys.

A local identity holds an Ed25519 authentication key (``#key-1``), an
X25519 key-agreement key (``#key-2``), and a ``DIDCommMessaging`` service.
The identity is persisted as a JSON file so it survives restarts.

Key-id anchoring
----------------
Which DID form (long or short) prefixes the key ids is fixed by
:class:`KeyIdAnchor`. :meth:`LocalIdentity.install` resolves the document
and stores the secrets under the *same* anchor, so every key id in the
cached document has a matching secret. Mixing anchors makes secret lookup
(and therefore decryption) fail.
"""
from __future__ import annotations

import datetime
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from peer_didcomm.did import peer4
from peer_didcomm.did.document import DIDCOMM_MESSAGING, DIDCOMM_V2_ACCEPT
from peer_didcomm.did.key_manager import (
    KeyManager,
    to_multikey_ed25519,
    to_multikey_x25519,
)
from peer_didcomm.errors import FormatError, IntegrityError
from peer_didcomm.store.resolver import DIDResolver
from peer_didcomm.store.secrets import (
    SecretRecord,
    SecretsStore,
    ed25519_secret,
    x25519_secret,
)

logger = logging.getLogger(__name__)

AUTHENTICATION_FRAGMENT: str = "#key-1"
KEY_AGREEMENT_FRAGMENT: str = "#key-2"
SERVICE_FRAGMENT: str = "#service"


class KeyIdAnchor(str, Enum):
    """The DID form key ids are anchored to."""

    LONG = "long"
    SHORT = "short"


def build_document(
    auth_public_key: bytes,
    agreement_public_key: bytes,
    service_endpoint: str,
) -> dict[str, Any]:
    """Build the bare (id-less) document for a local identity."""
    return {
        "verificationMethod": [
            {
                "id": AUTHENTICATION_FRAGMENT,
                "type": "Multikey",
                "publicKeyMultibase": to_multikey_ed25519(auth_public_key),
            },
            {
                "id": KEY_AGREEMENT_FRAGMENT,
                "type": "Multikey",
                "publicKeyMultibase": to_multikey_x25519(agreement_public_key),
            },
        ],
        "authentication": [AUTHENTICATION_FRAGMENT],
        "keyAgreement": [KEY_AGREEMENT_FRAGMENT],
        "service": [
            {
                "id": SERVICE_FRAGMENT,
                "type": DIDCOMM_MESSAGING,
                "serviceEndpoint": {
                    "uri": service_endpoint,
                    "accept": list(DIDCOMM_V2_ACCEPT),
                    "routingKeys": [],
                },
            }
        ],
    }


@dataclass
class LocalIdentity:
    """A did:peer:4 identity with its private key material.

    Parameters
    ----------
    did:
        The long-form DID.
    document:
        The bare document the DID was encoded from.
    auth_private_key, auth_public_key:
        Raw Ed25519 keypair for ``#key-1``.
    agreement_private_key, agreement_public_key:
        Raw X25519 keypair for ``#key-2``.
    created_at:
        UTC creation time.
    """

    did: str
    document: dict[str, Any]
    auth_private_key: bytes
    auth_public_key: bytes
    agreement_private_key: bytes
    agreement_public_key: bytes
    created_at: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    @classmethod
    def generate(
        cls,
        service_endpoint: str,
        key_manager: Optional[KeyManager] = None,
    ) -> "LocalIdentity":
        """Create a fresh identity whose messaging service is *service_endpoint*."""
        manager = key_manager or KeyManager()
        auth_private, auth_public = manager.generate_ed25519()
        agreement_private, agreement_public = manager.generate_x25519()
        document = build_document(auth_public, agreement_public, service_endpoint)
        did = peer4.encode(document)
        logger.info("Generated local identity %s", peer4.shorten_for_log(did))
        return cls(
            did=did,
            document=document,
            auth_private_key=auth_private,
            auth_public_key=auth_public,
            agreement_private_key=agreement_private,
            agreement_public_key=agreement_public,
        )

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def short_did(self) -> str:
        """The short-form DID."""
        return peer4.long_to_short(self.did)

    def anchored_did(self, anchor: KeyIdAnchor) -> str:
        """Return the DID form used as the key-id prefix for *anchor*."""
        return self.did if anchor is KeyIdAnchor.LONG else self.short_did

    def resolved_document(self, anchor: KeyIdAnchor = KeyIdAnchor.LONG) -> dict[str, Any]:
        """Resolve this identity's DID with the form selected by *anchor*."""
        return peer4.resolve(self.did, preserve_long_form=anchor is KeyIdAnchor.LONG)

    def secret_records(self, anchor: KeyIdAnchor = KeyIdAnchor.LONG) -> list[SecretRecord]:
        """Return the secret records for both keys, anchored to *anchor*."""
        prefix = self.anchored_did(anchor)
        return [
            ed25519_secret(
                f"{prefix}{AUTHENTICATION_FRAGMENT}",
                self.auth_private_key,
                self.auth_public_key,
            ),
            x25519_secret(f"{prefix}{KEY_AGREEMENT_FRAGMENT}", self.agreement_private_key),
        ]

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def install(
        self,
        resolver: DIDResolver,
        secrets: SecretsStore,
        anchor: KeyIdAnchor = KeyIdAnchor.LONG,
    ) -> dict[str, Any]:
        """Cache this identity's document and load its secrets.

        The document is cached under the long form and every alias, and
        the secrets are keyed with the same anchor as the document's key ids.

        Returns
        -------
        dict[str, Any]
            The resolved document that was cached.
        """
        document = self.resolved_document(anchor)
        resolver.add_document(self.did, document)
        for record in self.secret_records(anchor):
            secrets.add_secret(record.id, record)
        logger.info(
            "Installed local identity %s (%s-form key ids)",
            peer4.shorten_for_log(self.did),
            anchor.value,
        )
        return document

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, object]:
        """Serialize to a JSON-compatible dictionary (includes private keys)."""
        return {
            "did": self.did,
            "document": self.document,
            "privateKeys": {
                "key-1": {
                    "id": AUTHENTICATION_FRAGMENT,
                    "privateKeyHex": self.auth_private_key.hex(),
                    "publicKeyHex": self.auth_public_key.hex(),
                },
                "key-2": {
                    "id": KEY_AGREEMENT_FRAGMENT,
                    "privateKeyHex": self.agreement_private_key.hex(),
                    "publicKeyHex": self.agreement_public_key.hex(),
                },
            },
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LocalIdentity":
        """Rebuild an identity from :meth:`to_dict` output.

        Raises
        ------
        FormatError
            If a required field is missing or malformed.
        IntegrityError
            If ``did`` is not the encoding of ``document``.
        """
        try:
            did = data["did"]
            document = data["document"]
            if not isinstance(document, dict):
                raise TypeError("document must be a JSON object")
            keys = data["privateKeys"]
            auth = keys["key-1"]
            agreement = keys["key-2"]
            identity = cls(
                did=did,
                document=document,
                auth_private_key=bytes.fromhex(auth["privateKeyHex"]),
                auth_public_key=bytes.fromhex(auth["publicKeyHex"]),
                agreement_private_key=bytes.fromhex(agreement["privateKeyHex"]),
                agreement_public_key=bytes.fromhex(agreement["publicKeyHex"]),
                created_at=datetime.datetime.fromisoformat(data["createdAt"]),
            )
        except KeyError as exc:
            raise FormatError(f"Identity data is missing field {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise FormatError(f"Identity data is malformed: {exc}") from exc

        if peer4.encode(identity.document) != identity.did:
            raise IntegrityError(identity.did)
        return identity

    def save(self, path: Path) -> None:
        """Write the identity as JSON to *path*, creating parent directories."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> "LocalIdentity":
        """Read an identity saved with :meth:`save`.

        Raises
        ------
        FileNotFoundError
            If *path* does not exist.
        FormatError
            If the file is not valid identity JSON.
        """
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise FormatError(f"Invalid JSON in identity file {path}: {exc}") from exc
        return cls.from_dict(data)

    @classmethod
    def load_or_generate(cls, path: Path, service_endpoint: str) -> "LocalIdentity":
        """Load the identity at *path*, or generate and save a new one."""
        if path.exists():
            identity = cls.load(path)
            logger.info("Loaded existing identity %s", peer4.shorten_for_log(identity.did))
            return identity
        identity = cls.generate(service_endpoint)
        identity.save(path)
        return identity


__all__ = [
    "AUTHENTICATION_FRAGMENT",
    "KEY_AGREEMENT_FRAGMENT",
    "KeyIdAnchor",
    "LocalIdentity",
    "build_document",
]
