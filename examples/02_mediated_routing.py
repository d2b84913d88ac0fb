#!/usr/bin/env python3
"""Example: Mediated routing

Plans and delivers a message to a recipient whose service endpoint is a
mediator DID. A printing transport stands in for the network.

Usage:
    python examples/02_mediated_routing.py

Requirements:
    pip install peer-didcomm
"""
from __future__ import annotations

import asyncio
import json

from peer_didcomm import Agent, LocalIdentity
from peer_didcomm.routing.transport import TransportResponse


class PrintingTransport:
    async def send(self, uri: str, body: bytes, content_type: str) -> TransportResponse:
        message = json.loads(body)
        print(f"POST {uri} ({content_type}): type={message['type']}")
        return TransportResponse(status=202, body=b"")


async def main() -> None:
    mediator = LocalIdentity.generate("https://mediator.example/didcomm")
    recipient = LocalIdentity.generate(mediator.did)
    sender = Agent.create(
        LocalIdentity.generate("https://sender.example/didcomm"),
        transport=PrintingTransport(),
    )

    # Step 1: Inspect the route
    plan = await sender.router.plan_route(recipient.did)
    print(f"Endpoint: {plan.endpoint}")
    print(f"Relayed through mediator: {plan.relayed}")
    print(f"Routing keys: {len(plan.routing_keys)}")

    # Step 2: Deliver; the mediator receives a forward envelope
    result = await sender.router.deliver(
        {
            "type": "https://didcomm.org/basicmessage/2.0/message",
            "id": "hello-1",
            "from": sender.did,
            "to": [recipient.did],
            "body": {"content": "hello"},
        },
        recipient.did,
    )
    print(f"Delivery result: {result}")


if __name__ == "__main__":
    asyncio.run(main())
