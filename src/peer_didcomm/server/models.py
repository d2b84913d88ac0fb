"""Pydantic response models for the peer-didcomm HTTP server."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class AcknowledgementResponse(BaseModel):
    """Response body for POST /didcomm."""

    status: str = "received"
    message_id: str


class DIDResponse(BaseModel):
    """Response body for GET /api/did."""

    did: str
    short_did: str
    did_document: dict[str, Any] = Field(serialization_alias="didDocument")
    endpoints: dict[str, str] = Field(default_factory=dict)


class MessagesResponse(BaseModel):
    """Response body for GET /api/messages and GET /api/messages/{token}."""

    success: bool = True
    count: int
    messages: list[dict[str, Any]] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: str = "ok"
    service: str = "peer-didcomm"
    version: str = "0.1.0"
    timestamp: str
    message_count: int = 0


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str = ""


__all__ = [
    "AcknowledgementResponse",
    "DIDResponse",
    "ErrorResponse",
    "HealthResponse",
    "MessagesResponse",
]
