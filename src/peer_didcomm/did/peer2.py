"""did:peer:2 resolution (inline keys and services).

DID format
----------
::

    did:peer:2.V<multikey>.E<multikey>.S<base64url-json>

``V`` elements are authentication keys, ``E`` elements are key-agreement
keys, and ``S`` elements are abbreviated service blocks. Keys are numbered
``#key-1``, ``#key-2``, ... in the order they appear. Some resolvers instead
use the first eight characters of the encoded key as the fragment, so key
ids from this module are not interchangeable with theirs.
"""
from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from peer_didcomm.did.document import (
    DIDCOMM_MESSAGING,
    DIDCOMM_V2_ACCEPT,
    suite_for_multikey,
)
from peer_didcomm.errors import FormatError

PREFIX: str = "did:peer:2"

_PURPOSES: dict[str, str] = {"V": "authentication", "E": "keyAgreement"}
_SERVICE_TYPES: dict[str, str] = {"dm": DIDCOMM_MESSAGING, "did-communication": DIDCOMM_MESSAGING}


def _b64url_decode(value: str) -> bytes:
    padded = value + "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(padded)


def _expand_service(abbreviated: dict[str, Any], service_id: str) -> dict[str, Any]:
    raw_type = abbreviated.get("t", "service")
    endpoint = abbreviated.get("s")
    if isinstance(endpoint, dict):
        uri = endpoint.get("uri")
        accept = endpoint.get("a") or abbreviated.get("a") or list(DIDCOMM_V2_ACCEPT)
        routing_keys = endpoint.get("r") or abbreviated.get("r") or []
    else:
        uri = endpoint
        accept = abbreviated.get("a") or list(DIDCOMM_V2_ACCEPT)
        routing_keys = abbreviated.get("r") or []
    if not isinstance(uri, str) or not uri:
        raise FormatError("did:peer:2 service element has no endpoint")
    return {
        "id": service_id,
        "type": _SERVICE_TYPES.get(raw_type, raw_type),
        "serviceEndpoint": {"uri": uri, "accept": accept, "routingKeys": routing_keys},
    }


def resolve_peer2(did: str) -> dict[str, Any]:
    """Resolve a ``did:peer:2`` to its document.

    Raises
    ------
    FormatError
        If the DID is not ``did:peer:2``, has no elements, or an element
        cannot be decoded.
    """
    if not did.startswith(PREFIX):
        raise FormatError(f"Not a did:peer:2: {did!r}")
    elements = did.split(".")[1:]
    if not elements:
        raise FormatError(f"Invalid did:peer:2 format: {did!r}")

    document: dict[str, Any] = {
        "@context": [
            "https://www.w3.org/ns/did/v1",
            "https://w3id.org/security/multikey/v1",
        ],
        "id": did,
        "verificationMethod": [],
        "authentication": [],
        "keyAgreement": [],
        "service": [],
    }

    for element in elements:
        purpose, value = element[:1], element[1:]
        if purpose in _PURPOSES:
            key_id = f"{did}#key-{len(document['verificationMethod']) + 1}"
            document["verificationMethod"].append(
                {
                    "id": key_id,
                    "type": suite_for_multikey(value).value,
                    "controller": did,
                    "publicKeyMultibase": value,
                }
            )
            document[_PURPOSES[purpose]].append(key_id)
        elif purpose == "S":
            try:
                abbreviated = json.loads(_b64url_decode(value).decode("utf-8"))
            except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as exc:
                raise FormatError(f"Invalid did:peer:2 service element: {exc}") from exc
            if not isinstance(abbreviated, dict):
                raise FormatError("did:peer:2 service element must be a JSON object")
            index = len(document["service"])
            suffix = "service" if index == 0 else f"service-{index}"
            document["service"].append(_expand_service(abbreviated, f"{did}#{suffix}"))

    return document


__all__ = ["PREFIX", "resolve_peer2"]
