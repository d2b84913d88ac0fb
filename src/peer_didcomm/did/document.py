"""Typed DID document model.

The wire form of a DID document is a plain JSON object and the codec and
contextualizer operate on that form so the bytes that get hashed are never
reshaped. This module provides a typed *view* of the same data, used where
code needs to reason about verification methods and services.

Specification reference
-----------------------
W3C DID Core data model: https://www.w3.org/TR/did-core/#data-model
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from peer_didcomm.errors import FormatError
from peer_didcomm.multiformats import Codec, decode_multikey

DIDCOMM_MESSAGING: str = "DIDCommMessaging"
DIDCOMM_V2_ACCEPT: list[str] = ["didcomm/v2"]


# ------------------------------------------------------------------
# Verification suites
# ------------------------------------------------------------------


class VerificationSuite(str, Enum):
    """Closed set of verification method types understood by this package."""

    MULTIKEY = "Multikey"
    ED25519_2020 = "Ed25519VerificationKey2020"
    X25519_2020 = "X25519KeyAgreementKey2020"


_SUITE_BY_CODEC: dict[int, VerificationSuite] = {
    Codec.ED25519_PUB: VerificationSuite.ED25519_2020,
    Codec.X25519_PUB: VerificationSuite.X25519_2020,
}


def suite_for_multikey(public_key_multibase: str) -> VerificationSuite:
    """Map a Multikey's multicodec prefix to its concrete verification suite.

    Parameters
    ----------
    public_key_multibase:
        A ``z``-prefixed Multikey string.

    Returns
    -------
    VerificationSuite
        ``ED25519_2020`` for ``ed25519-pub``, ``X25519_2020`` for
        ``x25519-pub``, and ``MULTIKEY`` for any other codec or for a value
        that cannot be decoded.
    """
    try:
        codec, _ = decode_multikey(public_key_multibase)
    except FormatError:
        return VerificationSuite.MULTIKEY
    return _SUITE_BY_CODEC.get(codec, VerificationSuite.MULTIKEY)


# ------------------------------------------------------------------
# Verification method
# ------------------------------------------------------------------


class VerificationMethod(BaseModel):
    """A verification method entry of a DID document."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    type: str
    controller: str | None = None
    public_key_multibase: str | None = Field(default=None, alias="publicKeyMultibase")

    @property
    def suite(self) -> VerificationSuite | None:
        """Return the typed suite, or ``None`` for a type outside the closed set."""
        try:
            return VerificationSuite(self.type)
        except ValueError:
            return None

    @property
    def fragment(self) -> str:
        """Return the ``#fragment`` part of :attr:`id` (empty if absent)."""
        _, sep, frag = self.id.partition("#")
        return f"#{frag}" if sep else ""


# ------------------------------------------------------------------
# Services
# ------------------------------------------------------------------


class ServiceEndpoint(BaseModel):
    """The object form of a DIDComm v2 ``serviceEndpoint``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    uri: str
    accept: list[str] = Field(default_factory=list)
    routing_keys: list[str] = Field(default_factory=list, alias="routingKeys")

    @property
    def is_did(self) -> bool:
        """``True`` when :attr:`uri` names another DID (a mediator)."""
        return self.uri.startswith("did:")


class Service(BaseModel):
    """A service entry of a DID document.

    Only ``DIDCommMessaging`` endpoints are parsed into
    :class:`ServiceEndpoint`; a bare string is normalized to the object form
    with ``accept=["didcomm/v2"]`` and no routing keys. Endpoints of other
    service types are kept exactly as they appear on the wire.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    type: str
    service_endpoint: Union[ServiceEndpoint, str, list[Any], dict[str, Any]] = Field(
        alias="serviceEndpoint"
    )

    @field_validator("service_endpoint", mode="before")
    @classmethod
    def normalize_endpoint(cls, value: Any, info: ValidationInfo) -> Any:
        """Parse DIDComm endpoints, accepting the legacy string form."""
        if info.data.get("type") != DIDCOMM_MESSAGING:
            return value
        if isinstance(value, str):
            value = {"uri": value, "accept": list(DIDCOMM_V2_ACCEPT), "routingKeys": []}
        if isinstance(value, ServiceEndpoint):
            return value
        if not isinstance(value, dict):
            raise ValueError("DIDCommMessaging serviceEndpoint must be a string or an object")
        return ServiceEndpoint.model_validate(value)

    @property
    def endpoint(self) -> ServiceEndpoint:
        """The parsed DIDComm endpoint.

        Raises
        ------
        FormatError
            If this is not a ``DIDCommMessaging`` service.
        """
        if not isinstance(self.service_endpoint, ServiceEndpoint):
            raise FormatError(f"Service {self.id} has no DIDComm endpoint")
        return self.service_endpoint


# ------------------------------------------------------------------
# DID Document
# ------------------------------------------------------------------

Reference = Union[str, VerificationMethod]


class DIDDocument(BaseModel):
    """A typed view over a (contextualized) DID document.

    Reference lists may hold either DID URL strings or embedded
    verification methods, as permitted by DID Core.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | None = None
    verification_method: list[VerificationMethod] = Field(
        default_factory=list, alias="verificationMethod"
    )
    authentication: list[Reference] = Field(default_factory=list)
    assertion_method: list[Reference] = Field(default_factory=list, alias="assertionMethod")
    key_agreement: list[Reference] = Field(default_factory=list, alias="keyAgreement")
    capability_delegation: list[Reference] = Field(
        default_factory=list, alias="capabilityDelegation"
    )
    capability_invocation: list[Reference] = Field(
        default_factory=list, alias="capabilityInvocation"
    )
    service: list[Service] = Field(default_factory=list)
    also_known_as: list[str] = Field(default_factory=list, alias="alsoKnownAs")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DIDDocument":
        """Build the typed view from a wire-form document.

        Raises
        ------
        FormatError
            If the document does not fit the DID document shape.
        """
        try:
            return cls.model_validate(data)
        except ValueError as exc:
            raise FormatError(f"Malformed DID document: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the camelCase wire form."""
        return self.model_dump(by_alias=True, exclude_none=True)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_service(self, service_type: str = DIDCOMM_MESSAGING) -> Service | None:
        """Return the first service of *service_type*, or ``None``."""
        for entry in self.service:
            if entry.type == service_type:
                return entry
        return None

    def didcomm_service(self) -> Service | None:
        """Return the ``DIDCommMessaging`` service, or ``None``."""
        return self.find_service(DIDCOMM_MESSAGING)

    def key_agreement_ids(self) -> list[str]:
        """Return the ids of all key-agreement references, embedded or not."""
        return [ref if isinstance(ref, str) else ref.id for ref in self.key_agreement]

    def resolve_verification_method(self, method_id: str) -> VerificationMethod | None:
        """Return the verification method with *method_id*, or ``None``."""
        for method in self.verification_method:
            if method.id == method_id:
                return method
        return None


__all__ = [
    "DIDCOMM_MESSAGING",
    "DIDCOMM_V2_ACCEPT",
    "DIDDocument",
    "Reference",
    "Service",
    "ServiceEndpoint",
    "VerificationMethod",
    "VerificationSuite",
    "suite_for_multikey",
]
