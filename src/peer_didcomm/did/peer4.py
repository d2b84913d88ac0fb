"""did:peer:4 — self-certifying DIDs that embed their own document.

Identifier forms
----------------
::

    long:   did:peer:4{hash}:{encoded-document}
    short:  did:peer:4{hash}

``encoded-document`` is ``multibase(multicodec-json(document))`` with the
document's ``id`` removed, and ``hash`` is
``multibase(multihash-sha256(utf8(encoded-document)))``.

The hash is the method's only trust anchor: :func:`decode` recomputes it
and raises :class:`~peer_didcomm.errors.IntegrityError` before the embedded
JSON is parsed. A short-form DID cannot be resolved on its own; it needs
the document from a side channel (:func:`resolve_short_from_doc`).

Method specification: https://identity.foundation/peer-did-method-spec/
"""
from __future__ import annotations

import copy
import re
from typing import Any

from peer_didcomm.did.contextualize import contextualize
from peer_didcomm.errors import FormatError, IntegrityError
from peer_didcomm.multiformats import (
    BASE58_ALPHABET,
    decode_multibase_base58,
    decode_multicodec_json,
    encode_multibase_base58,
    encode_multicodec_json,
    multihash_sha256,
)

PREFIX: str = "did:peer:4"

# A sha2-256 multihash is 34 bytes; in base58btc it always reads "Qm" + 44 chars.
# Patterns are unanchored; always apply them with fullmatch().
_B58 = re.escape(BASE58_ALPHABET)
LONG_RE = re.compile(
    rf"did:peer:4(?P<hash>zQm[{_B58}]{{44}}):(?P<document>z[{_B58}]{{6,}})"
)
SHORT_RE = re.compile(rf"did:peer:4(?P<hash>zQm[{_B58}]{{44}})")


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_long_form(did: str) -> bool:
    """Return ``True`` if *did* matches the long-form grammar."""
    return LONG_RE.fullmatch(did) is not None


def is_short_form(did: str) -> bool:
    """Return ``True`` if *did* matches the short-form grammar."""
    return SHORT_RE.fullmatch(did) is not None


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def _encode_document(document: dict[str, Any]) -> str:
    body = copy.deepcopy(document)
    body.pop("id", None)
    return encode_multibase_base58(encode_multicodec_json(body))


def _hash_document(encoded_document: str) -> str:
    return encode_multibase_base58(multihash_sha256(encoded_document.encode("utf-8")))


def encode(document: dict[str, Any]) -> str:
    """Encode *document* into a long-form ``did:peer:4``.

    Any ``id`` on the input is dropped; the identifier is derived, never
    stored. The caller's document is not modified.
    """
    encoded_document = _encode_document(document)
    return f"{PREFIX}{_hash_document(encoded_document)}:{encoded_document}"


def encode_short(document: dict[str, Any]) -> str:
    """Encode *document* into a short-form ``did:peer:4`` (hash only)."""
    return f"{PREFIX}{_hash_document(_encode_document(document))}"


def long_to_short(did: str) -> str:
    """Truncate a long-form DID to its short form.

    Raises
    ------
    FormatError
        If *did* is not a long-form ``did:peer:4``.
    """
    if not is_long_form(did):
        raise FormatError(f"DID is not a long form did:peer:4: {did!r}")
    return did[: did.rindex(":")]


def shorten_for_log(did: object) -> object:
    """Return the short form of a long-form peer-4 DID; anything else unchanged."""
    if isinstance(did, str) and is_long_form(did):
        return long_to_short(did)
    return did


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def decode(did: str) -> dict[str, Any]:
    """Verify and extract the raw document (no ``id``) from a long-form DID.

    Raises
    ------
    FormatError
        If *did* is not a long-form ``did:peer:4`` or the embedded document
        cannot be decoded.
    IntegrityError
        If the hash segment does not match the document segment.
    """
    if not did.startswith(PREFIX):
        raise FormatError(f"Invalid did:peer:4: {did!r}")
    if is_short_form(did):
        raise FormatError("Cannot decode document from short form did:peer:4")
    match = LONG_RE.fullmatch(did)
    if match is None:
        raise FormatError(f"Invalid did:peer:4: {did!r}")

    encoded_document = match.group("document")
    if match.group("hash") != _hash_document(encoded_document):
        raise IntegrityError(did)

    return decode_multicodec_json(decode_multibase_base58(encoded_document))


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve(did: str, preserve_long_form: bool = False) -> dict[str, Any]:
    """Resolve a long-form DID to a contextualized document.

    Parameters
    ----------
    did:
        A long-form ``did:peer:4``.
    preserve_long_form:
        When ``False`` (default) the document ``id`` and key ids are anchored
        to the short form and the long form is listed in ``alsoKnownAs``.
        When ``True`` the roles are swapped.

    Raises
    ------
    FormatError, IntegrityError
        As for :func:`decode`.
    """
    document = decode(did)
    short_form = long_to_short(did)
    if preserve_long_form:
        anchor, alias = did, short_form
    else:
        anchor, alias = short_form, did

    resolved = contextualize(anchor, document)
    also_known_as = resolved.get("alsoKnownAs")
    aliases = list(also_known_as) if isinstance(also_known_as, list) else []
    aliases.append(alias)
    resolved["alsoKnownAs"] = aliases
    return resolved


def resolve_short_from_doc(document: dict[str, Any], did: str | None = None) -> dict[str, Any]:
    """Resolve a short-form DID from a counterparty-supplied document.

    The document is re-encoded and, when *did* is given, its derived short
    form must equal *did*.

    Raises
    ------
    IntegrityError
        If *did* does not match the short form derived from *document*.
    """
    long_form = encode(document)
    if did is not None and did != long_to_short(long_form):
        raise IntegrityError(did)
    return resolve(long_form, preserve_long_form=False)


__all__ = [
    "LONG_RE",
    "PREFIX",
    "SHORT_RE",
    "decode",
    "encode",
    "encode_short",
    "is_long_form",
    "is_short_form",
    "long_to_short",
    "resolve",
    "resolve_short_from_doc",
    "shorten_for_log",
]
