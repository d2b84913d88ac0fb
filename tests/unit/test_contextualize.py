"""Tests for peer_didcomm.did.contextualize."""
from __future__ import annotations

import copy

import pytest

from peer_didcomm.did.contextualize import contextualize, expand_reference
from peer_didcomm.did.key_manager import KeyManager, to_multikey_ed25519, to_multikey_x25519
from peer_didcomm.multiformats import encode_multikey

DID = "did:peer:4zQmExample"


@pytest.fixture()
def ed25519_multikey() -> str:
    _, public = KeyManager().generate_ed25519()
    return to_multikey_ed25519(public)


@pytest.fixture()
def x25519_multikey() -> str:
    _, public = KeyManager().generate_x25519()
    return to_multikey_x25519(public)


class TestExpandReference:
    def test_fragment_is_prefixed(self) -> None:
        assert expand_reference(DID, "#key-1") == f"{DID}#key-1"

    def test_absolute_reference_untouched(self) -> None:
        absolute = "did:key:z6Mkabc#z6Mkabc"
        assert expand_reference(DID, absolute) == absolute


class TestContextualize:
    def test_id_is_set_first(self) -> None:
        result = contextualize(DID, {"service": []})
        assert list(result)[0] == "id"
        assert result["id"] == DID

    def test_existing_id_is_replaced(self) -> None:
        result = contextualize(DID, {"id": "did:example:old", "service": []})
        assert result["id"] == DID

    def test_input_not_mutated(self, ed25519_multikey: str) -> None:
        document = {
            "verificationMethod": [
                {"id": "#key-1", "type": "Multikey", "publicKeyMultibase": ed25519_multikey}
            ],
            "authentication": ["#key-1"],
        }
        snapshot = copy.deepcopy(document)
        contextualize(DID, document)
        assert document == snapshot

    def test_verification_methods_are_bound(
        self, ed25519_multikey: str, x25519_multikey: str
    ) -> None:
        document = {
            "verificationMethod": [
                {"id": "#key-1", "type": "Multikey", "publicKeyMultibase": ed25519_multikey},
                {"id": "#key-2", "type": "Multikey", "publicKeyMultibase": x25519_multikey},
            ]
        }
        methods = contextualize(DID, document)["verificationMethod"]
        assert [m["id"] for m in methods] == [f"{DID}#key-1", f"{DID}#key-2"]
        assert all(m["controller"] == DID for m in methods)
        assert methods[0]["type"] == "Ed25519VerificationKey2020"
        assert methods[1]["type"] == "X25519KeyAgreementKey2020"

    def test_controller_overwritten(self, ed25519_multikey: str) -> None:
        document = {
            "verificationMethod": [
                {
                    "id": "#key-1",
                    "type": "Multikey",
                    "controller": "did:example:someone-else",
                    "publicKeyMultibase": ed25519_multikey,
                }
            ]
        }
        method = contextualize(DID, document)["verificationMethod"][0]
        assert method["controller"] == DID

    def test_unknown_codec_stays_multikey(self) -> None:
        secp256k1 = encode_multikey(0xE7, b"\x02" * 33)
        document = {
            "verificationMethod": [
                {"id": "#key-1", "type": "Multikey", "publicKeyMultibase": secp256k1}
            ]
        }
        assert contextualize(DID, document)["verificationMethod"][0]["type"] == "Multikey"

    def test_undecodable_multikey_stays_multikey(self) -> None:
        document = {
            "verificationMethod": [
                {"id": "#key-1", "type": "Multikey", "publicKeyMultibase": "not-multibase"}
            ]
        }
        assert contextualize(DID, document)["verificationMethod"][0]["type"] == "Multikey"

    def test_concrete_suite_untouched(self, x25519_multikey: str) -> None:
        document = {
            "verificationMethod": [
                {
                    "id": "#key-1",
                    "type": "JsonWebKey2020",
                    "publicKeyMultibase": x25519_multikey,
                }
            ]
        }
        assert contextualize(DID, document)["verificationMethod"][0]["type"] == "JsonWebKey2020"

    def test_relationship_lists_expanded(self) -> None:
        document = {
            "authentication": ["#key-1", "did:key:z6Mkabc#z6Mkabc"],
            "assertionMethod": ["#key-1"],
            "keyAgreement": ["#key-2"],
            "capabilityDelegation": ["#key-1"],
            "capabilityInvocation": ["#key-1"],
        }
        result = contextualize(DID, document)
        assert result["authentication"] == [f"{DID}#key-1", "did:key:z6Mkabc#z6Mkabc"]
        assert result["assertionMethod"] == [f"{DID}#key-1"]
        assert result["keyAgreement"] == [f"{DID}#key-2"]
        assert result["capabilityDelegation"] == [f"{DID}#key-1"]
        assert result["capabilityInvocation"] == [f"{DID}#key-1"]

    def test_embedded_methods_untouched(self) -> None:
        embedded = {"id": "#embedded", "type": "Multikey", "publicKeyMultibase": "z6Mk"}
        result = contextualize(DID, {"authentication": [embedded]})
        assert result["authentication"] == [embedded]

    def test_service_ids_untouched(self) -> None:
        service = {"id": "#service", "type": "DIDCommMessaging", "serviceEndpoint": "https://x"}
        result = contextualize(DID, {"service": [service]})
        assert result["service"] == [service]
