"""did:key resolution.

Implements the ``did:key`` DID method as specified in:
https://w3c-ccg.github.io/did-method-key/

did:key encoding
----------------
1. Take the raw public key (32 bytes for Ed25519 and X25519).
2. Prepend the multicodec prefix: ``0xed 0x01`` (Ed25519) or
   ``0xec 0x01`` (X25519).
3. Encode with base58btc and prefix ``z`` (multibase).
4. Assemble: ``did:key:z<base58btc-encoded>``.

Ed25519 keys therefore always read ``did:key:z6Mk...`` and X25519 keys
``did:key:z6LS...``. The document is derived from the DID string alone.
"""
from __future__ import annotations

from typing import Any

from peer_didcomm.did.document import VerificationSuite
from peer_didcomm.errors import FormatError
from peer_didcomm.multiformats import Codec, decode_multikey, encode_multikey

PREFIX: str = "did:key:"

_DID_V1_CONTEXT = "https://www.w3.org/ns/did/v1"
_ED25519_CONTEXT = "https://w3id.org/security/suites/ed25519-2020/v1"
_X25519_CONTEXT = "https://w3id.org/security/suites/x25519-2020/v1"


def public_key_to_did(codec: int, public_key_bytes: bytes) -> str:
    """Encode a raw public key as a ``did:key`` DID.

    Parameters
    ----------
    codec:
        :attr:`Codec.ED25519_PUB` or :attr:`Codec.X25519_PUB`.
    public_key_bytes:
        The raw public key.
    """
    return f"{PREFIX}{encode_multikey(codec, public_key_bytes)}"


def validate_did_key_format(did: str) -> str:
    """Return the Multikey part of *did*, raising on a malformed DID.

    Raises
    ------
    FormatError
        If *did* does not start with ``did:key:z`` or the key part is empty.
    """
    if not did.startswith(f"{PREFIX}z"):
        raise FormatError(
            f"Invalid did:key format: {did!r}. "
            "Expected format: did:key:z<base58btc-encoded-public-key>"
        )
    multikey = did[len(PREFIX):]
    if len(multikey) < 2:
        raise FormatError(f"Invalid did:key format: {did!r}. The encoded key portion is empty.")
    return multikey


def resolve_did_key(did: str) -> dict[str, Any]:
    """Derive the DID document for a ``did:key``.

    An Ed25519 key is usable for authentication, assertion, and capability
    relationships; an X25519 key only for key agreement.

    Raises
    ------
    FormatError
        If the DID is malformed or its multicodec is neither Ed25519 nor X25519.
    """
    multikey = validate_did_key_format(did)
    codec, _ = decode_multikey(multikey)
    key_id = f"{did}#{multikey}"

    if codec == Codec.ED25519_PUB:
        return {
            "@context": [_DID_V1_CONTEXT, _ED25519_CONTEXT],
            "id": did,
            "verificationMethod": [
                {
                    "id": key_id,
                    "type": VerificationSuite.ED25519_2020.value,
                    "controller": did,
                    "publicKeyMultibase": multikey,
                }
            ],
            "authentication": [key_id],
            "assertionMethod": [key_id],
            "capabilityDelegation": [key_id],
            "capabilityInvocation": [key_id],
            "service": [],
        }
    if codec == Codec.X25519_PUB:
        return {
            "@context": [_DID_V1_CONTEXT, _X25519_CONTEXT],
            "id": did,
            "verificationMethod": [
                {
                    "id": key_id,
                    "type": VerificationSuite.X25519_2020.value,
                    "controller": did,
                    "publicKeyMultibase": multikey,
                }
            ],
            "keyAgreement": [key_id],
            "service": [],
        }
    raise FormatError(
        f"Unsupported multicodec prefix 0x{codec:x} in DID {did!r}. "
        "Only Ed25519 (0xed) and X25519 (0xec) keys are supported."
    )


__all__ = ["PREFIX", "public_key_to_did", "resolve_did_key", "validate_did_key_format"]
