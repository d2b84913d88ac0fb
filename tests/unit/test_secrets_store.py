"""Tests for peer_didcomm.store.secrets — secret records and key-id anchoring."""
from __future__ import annotations

import pytest

from peer_didcomm.did import peer4
from peer_didcomm.did.key_manager import KeyManager
from peer_didcomm.identity import LocalIdentity
from peer_didcomm.multiformats import Codec, decode_multikey
from peer_didcomm.store.secrets import SecretRecord, SecretsStore, ed25519_secret, x25519_secret


@pytest.fixture()
def store() -> SecretsStore:
    return SecretsStore()


class TestSecretRecords:
    def test_ed25519_secret(self) -> None:
        private, public = KeyManager().generate_ed25519()
        record = ed25519_secret("did:ex:1#key-1", private, public)
        assert record.id == "did:ex:1#key-1"
        assert record.type == "Ed25519VerificationKey2020"
        codec, payload = decode_multikey(record.private_key_multibase)
        assert codec == Codec.ED25519_PRIV
        assert payload == private + public

    def test_x25519_secret(self) -> None:
        private, _ = KeyManager().generate_x25519()
        record = x25519_secret("did:ex:1#key-2", private)
        assert record.type == "X25519KeyAgreementKey2020"
        assert decode_multikey(record.private_key_multibase) == (Codec.X25519_PRIV, private)

    def test_to_dict_is_camel_case(self) -> None:
        record = SecretRecord(id="did:ex:1#key-2", type="X25519KeyAgreementKey2020", private_key_multibase="z")
        assert record.to_dict() == {
            "id": "did:ex:1#key-2",
            "type": "X25519KeyAgreementKey2020",
            "privateKeyMultibase": "z",
        }


class TestSecretsStore:
    def test_get_missing_returns_none(self, store: SecretsStore) -> None:
        assert store.get_secret("did:ex:1#key-1") is None

    def test_add_and_get(self, store: SecretsStore) -> None:
        record = SecretRecord(id="did:ex:1#key-1", type="t", private_key_multibase="z1")
        store.add_secret(record.id, record)
        assert store.get_secret("did:ex:1#key-1") is record
        assert "did:ex:1#key-1" in store
        assert len(store) == 1

    def test_add_overwrites(self, store: SecretsStore) -> None:
        store.add_secret("k", SecretRecord(id="k", type="t", private_key_multibase="z1"))
        store.add_secret("k", SecretRecord(id="k", type="t", private_key_multibase="z2"))
        record = store.get_secret("k")
        assert record is not None
        assert record.private_key_multibase == "z2"

    def test_find_known_secret_ids_preserves_order(self, store: SecretsStore) -> None:
        for key_id in ("a", "b", "c"):
            store.add_secret(key_id, SecretRecord(id=key_id, type="t", private_key_multibase="z"))
        assert store.find_known_secret_ids(["c", "x", "a"]) == ["c", "a"]
        assert store.key_ids() == ["a", "b", "c"]


class TestKeyIdAnchoring:
    """Long-form and short-form key ids are distinct lookup keys."""

    @pytest.fixture()
    def identity(self) -> LocalIdentity:
        return LocalIdentity.generate("https://example.org/didcomm")

    def test_long_anchored_secret_not_found_by_short_id(
        self, store: SecretsStore, identity: LocalIdentity
    ) -> None:
        long_doc = peer4.resolve(identity.did, preserve_long_form=True)
        long_key_id = long_doc["keyAgreement"][0]
        store.add_secret(long_key_id, x25519_secret(long_key_id, identity.agreement_private_key))

        short_doc = peer4.resolve(identity.did, preserve_long_form=False)
        short_key_id = short_doc["keyAgreement"][0]
        assert short_key_id != long_key_id
        assert store.get_secret(short_key_id) is None
        assert store.get_secret(long_key_id) is not None

    def test_short_anchored_secret_not_found_by_long_id(
        self, store: SecretsStore, identity: LocalIdentity
    ) -> None:
        short_key_id = f"{identity.short_did}#key-2"
        store.add_secret(short_key_id, x25519_secret(short_key_id, identity.agreement_private_key))

        long_key_id = f"{identity.did}#key-2"
        assert store.get_secret(long_key_id) is None
        assert store.find_known_secret_ids([long_key_id]) == []
