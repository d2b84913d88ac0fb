"""Exception hierarchy for peer-didcomm.

Every error raised by the codec, resolver, and routing layers derives from
:class:`PeerDIDCommError` so callers can catch the whole family in one place
and still branch on the concrete class to decide between retry and abort.

Taxonomy
--------
FormatError
    Malformed multibase, multicodec, JSON, or DID syntax. Local, never retried.
IntegrityError
    A peer-4 hash did not match its embedded document. Security relevant;
    always surfaced to the caller.
UnresolvableRecipientError / UnresolvableMediatorError
    No usable document for the recipient or its mediator.
NoServiceEndpointError
    The document resolved but has no ``DIDCommMessaging`` service.
TransportError
    HTTP or network failure. Retrying is the caller's decision.
ProblemReportError
    The counterparty explicitly rejected the message with a DIDComm
    problem report.
"""
from __future__ import annotations


class PeerDIDCommError(Exception):
    """Base exception for all peer-didcomm errors."""


class FormatError(PeerDIDCommError, ValueError):
    """Raised when an identifier, multiformat value, or document is malformed."""


class IntegrityError(PeerDIDCommError):
    """Raised when a peer-4 DID's hash does not match its encoded document."""

    def __init__(self, did: str) -> None:
        self.did = did
        super().__init__(f"Hash is invalid for did {did!r}; the document was altered.")


class UnresolvableRecipientError(PeerDIDCommError):
    """Raised when the recipient DID cannot be resolved to a document."""

    def __init__(self, did: str) -> None:
        self.did = did
        super().__init__(f"Cannot resolve recipient DID {did!r}.")


class UnresolvableMediatorError(PeerDIDCommError):
    """Raised when a mediator DID is unresolvable or has no messaging service."""

    def __init__(self, did: str, reason: str) -> None:
        self.did = did
        self.reason = reason
        super().__init__(f"Cannot route through mediator {did!r}: {reason}")


class NoServiceEndpointError(PeerDIDCommError):
    """Raised when a resolved document has no ``DIDCommMessaging`` service."""

    def __init__(self, did: str) -> None:
        self.did = did
        super().__init__(f"DID {did!r} has no DIDCommMessaging service endpoint.")


class TransportError(PeerDIDCommError):
    """Raised on HTTP-level or network-level delivery failure.

    Parameters
    ----------
    status:
        The HTTP status code, or ``None`` when no response was received.
    detail:
        Response text or the underlying client error message.
    """

    def __init__(self, status: int | None, detail: str = "") -> None:
        self.status = status
        self.detail = detail
        label = f"HTTP {status}" if status is not None else "Network error"
        message = f"{label}: {detail}" if detail else label
        super().__init__(message)


class ProblemReportError(PeerDIDCommError):
    """Raised when the counterparty answers with a DIDComm problem report.

    Parameters
    ----------
    code:
        The ``body.code`` of the report, or ``None`` if missing.
    comment:
        The ``body.comment`` of the report, or ``None`` if missing.
    args:
        The ``body.args`` list, if the report carried one.
    report:
        The full decoded problem-report message.
    """

    def __init__(
        self,
        code: str | None,
        comment: str | None,
        args: list[object] | None = None,
        report: dict[str, object] | None = None,
    ) -> None:
        self.code = code
        self.comment = comment
        self.report_args = list(args or [])
        self.report = dict(report or {})
        super().__init__(
            f"DIDComm problem: {comment or 'Unknown error'} ({code or 'no code'})"
        )


__all__ = [
    "FormatError",
    "IntegrityError",
    "NoServiceEndpointError",
    "PeerDIDCommError",
    "ProblemReportError",
    "TransportError",
    "UnresolvableMediatorError",
    "UnresolvableRecipientError",
]
