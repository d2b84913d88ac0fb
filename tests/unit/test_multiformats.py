"""Tests for peer_didcomm.multiformats — varint, base58btc, multicodec, multihash."""
from __future__ import annotations

import hashlib

import pytest

from peer_didcomm.errors import FormatError
from peer_didcomm.multiformats import (
    Codec,
    base58_decode,
    base58_encode,
    decode_multibase_base58,
    decode_multicodec_json,
    decode_multicodec_key,
    decode_multikey,
    decode_varint,
    encode_multibase_base58,
    encode_multicodec_json,
    encode_multicodec_key,
    encode_multikey,
    encode_varint,
    multihash_sha256,
)


# ---------------------------------------------------------------------------
# Varint
# ---------------------------------------------------------------------------


class TestVarint:
    @pytest.mark.parametrize(
        "value, encoded",
        [
            (0, b"\x00"),
            (0x7F, b"\x7f"),
            (0x80, b"\x80\x01"),
            (Codec.ED25519_PUB, b"\xed\x01"),
            (Codec.X25519_PUB, b"\xec\x01"),
            (Codec.JSON, b"\x80\x04"),
            (Codec.ED25519_PRIV, b"\x80\x26"),
            (Codec.X25519_PRIV, b"\x82\x26"),
        ],
    )
    def test_known_encodings(self, value: int, encoded: bytes) -> None:
        assert encode_varint(value) == encoded
        assert decode_varint(encoded) == (value, len(encoded))

    def test_decode_reports_bytes_consumed(self) -> None:
        assert decode_varint(b"\x80\x04{}") == (0x0200, 2)

    def test_truncated_varint_raises(self) -> None:
        with pytest.raises(FormatError, match="varint"):
            decode_varint(b"\x80")

    def test_empty_input_raises(self) -> None:
        with pytest.raises(FormatError):
            decode_varint(b"")

    def test_negative_value_raises(self) -> None:
        with pytest.raises(FormatError):
            encode_varint(-1)

    def test_codec_names(self) -> None:
        assert Codec.ED25519_PUB.codec_name == "ed25519-pub"
        assert Codec.X25519_PRIV.codec_name == "x25519-priv"


# ---------------------------------------------------------------------------
# Base58btc / multibase
# ---------------------------------------------------------------------------


class TestBase58:
    def test_empty_bytes(self) -> None:
        assert base58_encode(b"") == ""
        assert base58_decode("") == b""

    def test_single_zero_byte(self) -> None:
        assert base58_encode(b"\x00") == "1"
        assert base58_decode("1") == b"\x00"

    def test_leading_zeros_preserved(self) -> None:
        assert base58_encode(b"\x00\x00\x01") == "112"
        assert base58_decode("112") == b"\x00\x00\x01"

    def test_known_vector_hello_world(self) -> None:
        assert base58_encode(b"hello world") == "StV1DL6CwTryKyV"
        assert base58_decode("StV1DL6CwTryKyV") == b"hello world"

    def test_single_ff_byte(self) -> None:
        assert base58_encode(b"\xff") == "5Q"

    @pytest.mark.parametrize("bad", ["0", "O", "I", "l", "abc+"])
    def test_invalid_character_raises(self, bad: str) -> None:
        with pytest.raises(FormatError, match="Invalid base58btc character"):
            base58_decode(bad)


class TestMultibase:
    def test_encode_prefixes_z(self) -> None:
        assert encode_multibase_base58(b"hello world") == "zStV1DL6CwTryKyV"

    def test_decode_strips_marker(self) -> None:
        assert decode_multibase_base58("zStV1DL6CwTryKyV") == b"hello world"

    def test_missing_marker_raises(self) -> None:
        with pytest.raises(FormatError, match="base58btc"):
            decode_multibase_base58("StV1DL6CwTryKyV")

    def test_invalid_body_raises(self) -> None:
        with pytest.raises(FormatError):
            decode_multibase_base58("z0OIl")


# ---------------------------------------------------------------------------
# Multicodec JSON
# ---------------------------------------------------------------------------


class TestMulticodecJSON:
    def test_encode_is_tagged_compact_json(self) -> None:
        encoded = encode_multicodec_json({"a": 1, "b": "é"})
        assert encoded[:2] == b"\x80\x04"
        assert encoded[2:] == '{"a":1,"b":"é"}'.encode("utf-8")

    def test_decode_restores_document(self) -> None:
        document = {"service": [{"id": "#service"}], "authentication": ["#key-1"]}
        assert decode_multicodec_json(encode_multicodec_json(document)) == document

    def test_key_order_is_preserved(self) -> None:
        first = encode_multicodec_json({"a": 1, "b": 2})
        second = encode_multicodec_json({"b": 2, "a": 1})
        assert first != second

    def test_wrong_codec_raises(self) -> None:
        with pytest.raises(FormatError, match="json multicodec"):
            decode_multicodec_json(b"\xed\x01{}")

    def test_invalid_utf8_raises(self) -> None:
        with pytest.raises(FormatError, match="UTF-8"):
            decode_multicodec_json(b"\x80\x04\xff\xfe")

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(FormatError, match="JSON"):
            decode_multicodec_json(b"\x80\x04{not json")

    def test_non_object_raises(self) -> None:
        with pytest.raises(FormatError, match="object"):
            decode_multicodec_json(b"\x80\x04[1, 2]")


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


class TestMulticodecKeys:
    def test_ed25519_multikey_prefix(self) -> None:
        assert encode_multikey(Codec.ED25519_PUB, bytes(range(32))).startswith("z6Mk")

    def test_x25519_multikey_prefix(self) -> None:
        assert encode_multikey(Codec.X25519_PUB, bytes(range(32))).startswith("z6LS")

    def test_decode_multikey(self) -> None:
        key = bytes(range(32))
        codec, payload = decode_multikey(encode_multikey(Codec.X25519_PUB, key))
        assert codec == Codec.X25519_PUB
        assert payload == key

    def test_private_ed25519_payload_is_private_then_public(self) -> None:
        private, public = b"\x01" * 32, b"\x02" * 32
        tagged = encode_multicodec_key(Codec.ED25519_PRIV, private + public)
        codec, payload = decode_multicodec_key(tagged)
        assert codec == Codec.ED25519_PRIV
        assert payload[:32] == private
        assert payload[32:] == public


# ---------------------------------------------------------------------------
# Multihash
# ---------------------------------------------------------------------------


class TestMultihash:
    def test_layout(self) -> None:
        digest = multihash_sha256(b"abc")
        assert len(digest) == 34
        assert digest[:2] == b"\x12\x20"
        assert digest[2:] == hashlib.sha256(b"abc").digest()

    def test_base58_form_reads_qm(self) -> None:
        encoded = encode_multibase_base58(multihash_sha256(b"anything"))
        assert encoded.startswith("zQm")
        assert len(encoded) == 47
