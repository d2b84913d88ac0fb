"""Agent — wires a local identity to the resolver, secrets, router and processor."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from peer_didcomm.config import Settings
from peer_didcomm.identity import KeyIdAnchor, LocalIdentity
from peer_didcomm.inbound.processor import InboundProcessor
from peer_didcomm.routing.engine import Router, StateObserver
from peer_didcomm.routing.packing import Packer, PlaintextPacker
from peer_didcomm.routing.transport import HttpTransport, Transport
from peer_didcomm.store.resolver import DIDResolver
from peer_didcomm.store.secrets import SecretsStore

logger = logging.getLogger(__name__)


@dataclass
class Agent:
    """A running DIDComm agent: identity plus the collaborators that use it."""

    identity: LocalIdentity
    anchor: KeyIdAnchor
    resolver: DIDResolver
    secrets: SecretsStore
    router: Router
    processor: InboundProcessor
    document: dict[str, Any]

    @property
    def did(self) -> str:
        return self.identity.did

    @classmethod
    def create(
        cls,
        identity: LocalIdentity,
        anchor: KeyIdAnchor = KeyIdAnchor.LONG,
        packer: Optional[Packer] = None,
        transport: Optional[Transport] = None,
        observer: Optional[StateObserver] = None,
        display_name: Optional[str] = None,
    ) -> "Agent":
        """Install *identity* and build the router and inbound processor.

        The resolver anchors peer-4 documents to the same form as the
        identity's secrets so local key ids always have a secret.
        """
        resolver = DIDResolver(preserve_long_form=anchor is KeyIdAnchor.LONG)
        secrets = SecretsStore()
        document = identity.install(resolver, secrets, anchor)

        packer = packer or PlaintextPacker()
        router = Router(
            resolver,
            packer,
            transport=transport,
            sender_did=identity.did,
            observer=observer,
        )
        processor = InboundProcessor(packer, router, identity.did, display_name=display_name)
        return cls(
            identity=identity,
            anchor=anchor,
            resolver=resolver,
            secrets=secrets,
            router=router,
            processor=processor,
            document=document,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        packer: Optional[Packer] = None,
        transport: Optional[Transport] = None,
    ) -> "Agent":
        """Load (or generate) the identity named by *settings* and build an agent."""
        identity = LocalIdentity.load_or_generate(
            settings.identity_file, settings.service_endpoint
        )
        transport = transport or HttpTransport(timeout=settings.http_timeout)
        return cls.create(identity, settings.key_id_anchor, packer=packer, transport=transport)


__all__ = ["Agent"]
