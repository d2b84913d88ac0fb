"""Multiformat primitives — varint, multicodec, multibase, and multihash.

Only the subset needed by ``did:peer:4`` and Multikey records is provided:

* multibase: base58btc only (marker ``z``)
* multicodec: ``json`` (0x0200) and the Ed25519 / X25519 key codecs
* multihash: sha2-256 with a fixed 32-byte digest

Wire layout
-----------
A multicodec value is ``varint(codec) || payload``. A multihash is
``varint(0x12) || varint(32) || sha256(data)``. A multibase string is the
marker character followed by the encoded bytes.
"""
from __future__ import annotations

import hashlib
import json
from enum import IntEnum

from peer_didcomm.errors import FormatError

# ---------------------------------------------------------------------------
# Codec tables
# ---------------------------------------------------------------------------

BASE58BTC_MARKER: str = "z"

SHA2_256: int = 0x12
SHA2_256_LENGTH: int = 0x20


class Codec(IntEnum):
    """Multicodec identifiers used by this package."""

    JSON = 0x0200
    ED25519_PUB = 0xED
    X25519_PUB = 0xEC
    ED25519_PRIV = 0x1300
    X25519_PRIV = 0x1302

    @property
    def codec_name(self) -> str:
        """Return the multicodec table name, e.g. ``"ed25519-pub"``."""
        return self.name.lower().replace("_", "-")


# ---------------------------------------------------------------------------
# Varint (unsigned LEB128)
# ---------------------------------------------------------------------------


def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer as an unsigned varint."""
    if value < 0:
        raise FormatError(f"varint value must be non-negative, got {value}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def decode_varint(data: bytes) -> tuple[int, int]:
    """Decode a varint from the start of *data*.

    Returns
    -------
    tuple[int, int]
        ``(value, bytes_consumed)``.

    Raises
    ------
    FormatError
        If *data* ends before the varint terminates, or the varint is
        longer than 9 bytes.
    """
    value = 0
    shift = 0
    for index, byte in enumerate(data):
        if index >= 9:
            break
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, index + 1
        shift += 7
    raise FormatError("Truncated or oversized varint")


# ---------------------------------------------------------------------------
# Base58btc
# ---------------------------------------------------------------------------

BASE58_ALPHABET: str = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_INDEX: dict[str, int] = {char: i for i, char in enumerate(BASE58_ALPHABET)}


def base58_encode(data: bytes) -> str:
    """Encode *data* as base58btc (no multibase marker)."""
    n = int.from_bytes(data, "big")
    chars: list[str] = []
    while n > 0:
        n, remainder = divmod(n, 58)
        chars.append(BASE58_ALPHABET[remainder])
    # Leading zero bytes map to '1'
    for byte in data:
        if byte != 0:
            break
        chars.append("1")
    return "".join(reversed(chars))


def base58_decode(encoded: str) -> bytes:
    """Decode a base58btc string (no multibase marker).

    Raises
    ------
    FormatError
        If *encoded* contains a character outside the base58btc alphabet.
    """
    n = 0
    for char in encoded:
        digit = _BASE58_INDEX.get(char)
        if digit is None:
            raise FormatError(
                f"Invalid base58btc character {char!r} in encoded string {encoded!r}"
            )
        n = n * 58 + digit
    body = n.to_bytes((n.bit_length() + 7) // 8, "big") if n > 0 else b""
    pad_size = len(encoded) - len(encoded.lstrip("1"))
    return b"\x00" * pad_size + body


# ---------------------------------------------------------------------------
# Multibase
# ---------------------------------------------------------------------------


def encode_multibase_base58(data: bytes) -> str:
    """Return ``"z" + base58btc(data)``."""
    return f"{BASE58BTC_MARKER}{base58_encode(data)}"


def decode_multibase_base58(text: str) -> bytes:
    """Decode a ``z``-prefixed multibase string.

    Raises
    ------
    FormatError
        If the marker is missing or the remainder is not valid base58btc.
    """
    if not text.startswith(BASE58BTC_MARKER):
        raise FormatError(
            f"Only base58btc multibase (z prefix) is supported, got {text[:1]!r}"
        )
    return base58_decode(text[1:])


# ---------------------------------------------------------------------------
# Multicodec
# ---------------------------------------------------------------------------


def encode_multicodec(codec: int, payload: bytes) -> bytes:
    """Prefix *payload* with the varint form of *codec*."""
    return encode_varint(int(codec)) + payload


def decode_multicodec(data: bytes) -> tuple[int, bytes]:
    """Split *data* into ``(codec, payload)``."""
    codec, consumed = decode_varint(data)
    return codec, data[consumed:]


def encode_multicodec_json(document: dict[str, object]) -> bytes:
    """Serialize *document* to compact UTF-8 JSON tagged with the json codec.

    Key order is preserved as given; no canonicalization is applied, so
    the output (and therefore any hash over it) depends on the literal
    insertion order of *document*.
    """
    text = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
    return encode_multicodec(Codec.JSON, text.encode("utf-8"))


def decode_multicodec_json(data: bytes) -> dict[str, object]:
    """Parse a json-codec multicodec value back into a document.

    Raises
    ------
    FormatError
        On a non-json codec tag, invalid UTF-8, invalid JSON, or a JSON
        value that is not an object.
    """
    codec, payload = decode_multicodec(data)
    if codec != Codec.JSON:
        raise FormatError(f"Expected json multicodec 0x0200, got 0x{codec:x}")
    try:
        document = json.loads(payload.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise FormatError(f"Document is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise FormatError(f"Document is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise FormatError("Document JSON must be an object")
    return document


def encode_multicodec_key(codec: int, key_bytes: bytes) -> bytes:
    """Tag raw key bytes with a key codec (public or private)."""
    return encode_multicodec(codec, key_bytes)


def decode_multicodec_key(data: bytes) -> tuple[int, bytes]:
    """Return ``(codec, key_bytes)`` for a tagged key value."""
    return decode_multicodec(data)


def encode_multikey(codec: int, key_bytes: bytes) -> str:
    """Encode raw key bytes as a Multikey string (``z`` + base58btc)."""
    return encode_multibase_base58(encode_multicodec_key(codec, key_bytes))


def decode_multikey(multikey: str) -> tuple[int, bytes]:
    """Decode a Multikey string into ``(codec, key_bytes)``."""
    return decode_multicodec_key(decode_multibase_base58(multikey))


# ---------------------------------------------------------------------------
# Multihash
# ---------------------------------------------------------------------------


def multihash_sha256(data: bytes) -> bytes:
    """Return the sha2-256 multihash of *data* (34 bytes)."""
    digest = hashlib.sha256(data).digest()
    return encode_varint(SHA2_256) + encode_varint(SHA2_256_LENGTH) + digest


__all__ = [
    "BASE58BTC_MARKER",
    "BASE58_ALPHABET",
    "Codec",
    "base58_decode",
    "base58_encode",
    "decode_multibase_base58",
    "decode_multicodec",
    "decode_multicodec_json",
    "decode_multicodec_key",
    "decode_multikey",
    "decode_varint",
    "encode_multibase_base58",
    "encode_multicodec",
    "encode_multicodec_json",
    "encode_multicodec_key",
    "encode_multikey",
    "encode_varint",
    "multihash_sha256",
]
