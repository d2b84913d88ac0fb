#!/usr/bin/env python3
"""Example: Quickstart

Creates a did:peer:4 identity, then resolves its long and short forms the
way a counterparty would.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install peer-didcomm
"""
from __future__ import annotations

import asyncio

import peer_didcomm
from peer_didcomm import DIDResolver, LocalIdentity
from peer_didcomm.did import peer4


async def main() -> None:
    print(f"peer-didcomm version: {peer_didcomm.__version__}")

    # Step 1: Create an identity with a DIDComm endpoint
    identity = LocalIdentity.generate("https://agent.example/didcomm")
    print(f"Long-form DID:  {identity.did[:60]}...")
    print(f"Short-form DID: {identity.short_did}")

    # Step 2: Resolve the long form (anchored to the short form by default)
    resolver = DIDResolver()
    document = await resolver.resolve_did(identity.did)
    print(f"Resolved id:    {document['id']}")
    print(f"alsoKnownAs:    {[alias[:40] + '...' for alias in document['alsoKnownAs']]}")

    # Step 3: The short form is now cached
    cached = await resolver.resolve_did(identity.short_did)
    print(f"Short form cached: {cached is document}")

    # Step 4: Tampering is detected
    tampered = identity.did[:-1] + ("2" if identity.did[-1] != "2" else "3")
    try:
        peer4.decode(tampered)
    except peer_didcomm.IntegrityError as exc:
        print(f"Tampered DID rejected: {type(exc).__name__}")

    print("\nQuickstart complete.")


if __name__ == "__main__":
    asyncio.run(main())
