"""KeyManager — Ed25519 / X25519 key generation and Multikey encoding.

A thin wrapper around the ``cryptography`` package's Ed25519 and X25519
primitives. All key material is handled as raw 32-byte strings so callers
can store or transmit keys without depending on this module's types.

Multikey encodings
------------------
============  ===========  ==========================================
Key           Codec        Payload
============  ===========  ==========================================
Ed25519 pub   0xed         32-byte public key
X25519 pub    0xec         32-byte public key
Ed25519 priv  0x1300       32-byte private seed || 32-byte public key
X25519 priv   0x1302       32-byte private scalar
============  ===========  ==========================================
"""
from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from peer_didcomm.multiformats import Codec, encode_multikey


def to_multikey_ed25519(public_key: bytes) -> str:
    """Encode an Ed25519 public key as a Multikey string (``z6Mk...``)."""
    return encode_multikey(Codec.ED25519_PUB, public_key)


def to_multikey_x25519(public_key: bytes) -> str:
    """Encode an X25519 public key as a Multikey string (``z6LS...``)."""
    return encode_multikey(Codec.X25519_PUB, public_key)


def to_multikey_ed25519_private(private_key: bytes, public_key: bytes) -> str:
    """Encode an Ed25519 private key; the payload is ``private || public``."""
    return encode_multikey(Codec.ED25519_PRIV, private_key + public_key)


def to_multikey_x25519_private(private_key: bytes) -> str:
    """Encode an X25519 private key."""
    return encode_multikey(Codec.X25519_PRIV, private_key)


class KeyManager:
    """Generate Ed25519 / X25519 keypairs and sign or verify with Ed25519.

    Example
    -------
    ::

        manager = KeyManager()
        private_bytes, public_bytes = manager.generate_ed25519()
        signature = manager.sign(private_bytes, b"hello world")
        assert manager.verify(public_bytes, signature, b"hello world")
    """

    def generate_ed25519(self) -> tuple[bytes, bytes]:
        """Generate a new Ed25519 keypair as ``(private, public)`` raw bytes."""
        private_key = Ed25519PrivateKey.generate()
        private_bytes = private_key.private_bytes(
            Encoding.Raw, PrivateFormat.Raw, NoEncryption()
        )
        public_bytes = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        return private_bytes, public_bytes

    def generate_x25519(self) -> tuple[bytes, bytes]:
        """Generate a new X25519 keypair as ``(private, public)`` raw bytes."""
        private_key = X25519PrivateKey.generate()
        private_bytes = private_key.private_bytes(
            Encoding.Raw, PrivateFormat.Raw, NoEncryption()
        )
        public_bytes = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        return private_bytes, public_bytes

    def ed25519_public_from_private(self, private_key_bytes: bytes) -> bytes:
        """Derive the raw Ed25519 public key for a raw private seed."""
        private_key = Ed25519PrivateKey.from_private_bytes(private_key_bytes)
        return private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)

    def x25519_public_from_private(self, private_key_bytes: bytes) -> bytes:
        """Derive the raw X25519 public key for a raw private scalar."""
        private_key = X25519PrivateKey.from_private_bytes(private_key_bytes)
        return private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)

    def sign(self, private_key_bytes: bytes, data: bytes) -> bytes:
        """Sign *data* with a raw Ed25519 private key; returns 64 bytes."""
        private_key = Ed25519PrivateKey.from_private_bytes(private_key_bytes)
        return private_key.sign(data)

    def verify(self, public_key_bytes: bytes, signature: bytes, data: bytes) -> bool:
        """Return ``True`` if *signature* over *data* verifies."""
        public_key = Ed25519PublicKey.from_public_bytes(public_key_bytes)
        try:
            public_key.verify(signature, data)
            return True
        except InvalidSignature:
            return False


__all__ = [
    "KeyManager",
    "to_multikey_ed25519",
    "to_multikey_ed25519_private",
    "to_multikey_x25519",
    "to_multikey_x25519_private",
]
