"""DIDResolver — cached DID resolution for the routing and packing layers.

The resolver keeps an unbounded in-memory cache from DID strings (and each
document's ``alsoKnownAs`` aliases) to resolved documents. Entries live for
the lifetime of the process; a long-running deployment would put an
eviction policy in front of this.

Resolution order
----------------
1. Cache hit: return the cached document.
2. Long-form ``did:peer:4``: decode, verify, contextualize, cache under the
   DID and its aliases, return.
3. Short-form ``did:peer:4`` not in the cache: ``None``. The hash alone
   cannot be turned back into a document.
4. Any other method: the lookup registered for its :class:`DIDMethod`
   (``did:key`` and ``did:peer:2`` by default). No lookup: ``None``.

There is no locking. Two tasks resolving the same DID concurrently each
decode it and insert identical documents.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Optional

from peer_didcomm.did import peer4
from peer_didcomm.did.did_key import resolve_did_key
from peer_didcomm.did.document import DIDDocument
from peer_didcomm.did.methods import DIDMethod, classify_did
from peer_didcomm.did.peer2 import resolve_peer2
from peer_didcomm.errors import FormatError

logger = logging.getLogger(__name__)

Document = dict[str, Any]
Lookup = Callable[[str], Optional[Document]]

DEFAULT_LOOKUPS: Mapping[DIDMethod, Lookup] = {
    DIDMethod.KEY: resolve_did_key,
    DIDMethod.PEER2: resolve_peer2,
}


class DIDResolver:
    """Resolve DIDs to documents, caching peer-4 results.

    Parameters
    ----------
    lookups:
        Extra or replacement resolvers for non-peer-4 methods, keyed by
        :class:`DIDMethod`. Merged over :data:`DEFAULT_LOOKUPS`.
    preserve_long_form:
        Passed to :func:`peer4.resolve` for lazily resolved long-form DIDs.
        ``False`` anchors key ids to the short form.

    Example
    -------
    ::

        resolver = DIDResolver()
        doc = await resolver.resolve_did(long_form_did)
        assert await resolver.resolve_did(doc["id"]) == doc
    """

    def __init__(
        self,
        lookups: Mapping[DIDMethod, Lookup] | None = None,
        preserve_long_form: bool = False,
    ) -> None:
        self._documents: dict[str, Document] = {}
        self._lookups: dict[DIDMethod, Lookup] = dict(DEFAULT_LOOKUPS)
        if lookups:
            self._lookups.update(lookups)
        self.preserve_long_form = preserve_long_form

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def add_document(self, did: str, document: Document) -> None:
        """Cache *document* under *did*, its own ``id``, and every ``alsoKnownAs`` entry."""
        self._documents[did] = document
        document_id = document.get("id")
        if isinstance(document_id, str):
            self._documents[document_id] = document
        aliases = document.get("alsoKnownAs")
        if isinstance(aliases, list):
            for alias in aliases:
                if isinstance(alias, str):
                    self._documents[alias] = document

    def cached(self, did: str) -> Optional[Document]:
        """Return the cached document for *did* without resolving."""
        return self._documents.get(did)

    def known_dids(self) -> list[str]:
        """Return every cached DID and alias, sorted."""
        return sorted(self._documents)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def resolve_did(self, did: str) -> Optional[Document]:
        """Resolve *did* to its document, or ``None`` if it cannot be resolved.

        Raises
        ------
        IntegrityError
            If a long-form ``did:peer:4`` fails hash verification.
        FormatError
            If *did* is a malformed ``did:peer:4``, or a registered lookup
            rejects it.
        """
        cached = self._documents.get(did)
        if cached is not None:
            return cached

        method = classify_did(did)
        if method is DIDMethod.PEER4:
            return self._resolve_peer4(did)

        lookup = self._lookups.get(method)
        if lookup is None:
            logger.warning("Unable to resolve DID %s: no resolver for %s", did, method.value)
            return None
        return lookup(did)

    async def resolve_document(self, did: str) -> Optional[DIDDocument]:
        """Resolve *did* and return the typed :class:`DIDDocument` view."""
        document = await self.resolve_did(did)
        if document is None:
            return None
        return DIDDocument.from_dict(document)

    def _resolve_peer4(self, did: str) -> Optional[Document]:
        if peer4.is_short_form(did):
            logger.warning(
                "Cannot resolve short-form did:peer:4 %s without its document", did
            )
            return None
        if not peer4.is_long_form(did):
            raise FormatError(f"Invalid did:peer:4: {did!r}")

        document = peer4.resolve(did, preserve_long_form=self.preserve_long_form)
        self.add_document(did, document)
        logger.debug("Resolved and cached %s", peer4.shorten_for_log(did))
        return document

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        """Return the number of cache keys (DIDs plus aliases)."""
        return len(self._documents)

    def __contains__(self, did: object) -> bool:
        return did in self._documents


__all__ = ["DEFAULT_LOOKUPS", "DIDResolver", "Document", "Lookup"]
