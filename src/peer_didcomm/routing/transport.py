"""HTTP transport for packed DIDComm messages.

The router depends only on the :class:`Transport` protocol: "POST these
bytes to this URI and give me the status and body". :class:`HttpTransport`
implements it with :mod:`httpx`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

from peer_didcomm.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: float = 15.0


@dataclass(frozen=True)
class TransportResponse:
    """Status code and raw body of an HTTP exchange."""

    status: int
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class Transport(Protocol):
    """Send bytes to an HTTP endpoint and return the response."""

    async def send(self, uri: str, body: bytes, content_type: str) -> TransportResponse:
        ...


class HttpTransport:
    """:class:`Transport` backed by :class:`httpx.AsyncClient`.

    Parameters
    ----------
    client:
        A shared client. When omitted, a short-lived client is opened per
        request so the transport can be used from any event loop.
    timeout:
        Request timeout in seconds for per-request clients.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = client
        self._timeout = timeout

    async def send(self, uri: str, body: bytes, content_type: str) -> TransportResponse:
        """POST *body* to *uri*.

        Raises
        ------
        TransportError
            With ``status=None`` when no response was received.
        """
        headers = {"Content-Type": content_type}
        logger.debug("POST %s (%d bytes, %s)", uri, len(body), content_type)
        try:
            if self._client is not None:
                response = await self._client.post(uri, content=body, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(uri, content=body, headers=headers)
        except httpx.RequestError as exc:
            raise TransportError(None, f"{type(exc).__name__}: {exc}") from exc
        logger.debug("HTTP response status from %s: %d", uri, response.status_code)
        return TransportResponse(status=response.status_code, body=response.content)


__all__ = ["DEFAULT_TIMEOUT", "HttpTransport", "Transport", "TransportResponse"]
