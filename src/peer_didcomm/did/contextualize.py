"""Document contextualization.

A peer DID document is stored without its own ``id`` and with key
references relative to it (``#key-1``). Contextualizing binds the document
to a concrete DID string:

1. ``id`` is set to the DID.
2. Every verification method gets ``controller = did`` and a fully
   qualified ``id``.
3. ``Multikey`` methods are rewritten to their concrete suite, derived from
   the multicodec prefix of ``publicKeyMultibase``.
4. String entries of the verification relationship lists are expanded the
   same way; embedded method objects are left as they are.

The DID passed in decides whether key ids are long-form or short-form
anchored, and that choice must match the ids under which private keys are
stored (see :mod:`peer_didcomm.store.secrets`).
"""
from __future__ import annotations

import copy
from typing import Any

from peer_didcomm.did.document import VerificationSuite, suite_for_multikey

RELATIONSHIPS: tuple[str, ...] = (
    "authentication",
    "assertionMethod",
    "keyAgreement",
    "capabilityDelegation",
    "capabilityInvocation",
)


def expand_reference(did: str, reference: str) -> str:
    """Return ``did + reference`` for a ``#fragment``, otherwise *reference*."""
    if reference.startswith("#"):
        return f"{did}{reference}"
    return reference


def _contextualize_method(did: str, method: dict[str, Any]) -> dict[str, Any]:
    method["controller"] = did
    method_id = method.get("id")
    if isinstance(method_id, str):
        method["id"] = expand_reference(did, method_id)
    multikey = method.get("publicKeyMultibase")
    if method.get("type") == VerificationSuite.MULTIKEY.value and isinstance(multikey, str):
        method["type"] = suite_for_multikey(multikey).value
    return method


def contextualize(did: str, document: dict[str, Any]) -> dict[str, Any]:
    """Bind *document* to *did* and return the contextualized copy.

    Parameters
    ----------
    did:
        The DID (long or short form) the document is resolved under.
    document:
        A decoded document. It is not modified.

    Returns
    -------
    dict[str, Any]
        A new document with ``id`` first, followed by the original fields.
    """
    body = copy.deepcopy(document)
    body.pop("id", None)
    contextualized: dict[str, Any] = {"id": did, **body}

    methods = contextualized.get("verificationMethod")
    if isinstance(methods, list):
        contextualized["verificationMethod"] = [
            _contextualize_method(did, vm) if isinstance(vm, dict) else vm
            for vm in methods
        ]

    for relationship in RELATIONSHIPS:
        refs = contextualized.get(relationship)
        if isinstance(refs, list):
            contextualized[relationship] = [
                expand_reference(did, ref) if isinstance(ref, str) else ref
                for ref in refs
            ]

    return contextualized


__all__ = ["RELATIONSHIPS", "contextualize", "expand_reference"]
