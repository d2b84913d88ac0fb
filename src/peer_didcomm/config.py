"""Runtime settings for the peer-didcomm agent.

Values are read from ``PEER_DIDCOMM_*`` environment variables and an
optional ``.env`` file. Example::

    PEER_DIDCOMM_SERVICE_ENDPOINT=https://agent.example.org/didcomm
    PEER_DIDCOMM_KEY_ID_ANCHOR=short
"""
from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from peer_didcomm.identity import KeyIdAnchor


class Settings(BaseSettings):
    # Identity
    identity_file: Path = Path("peer-didcomm-identity.json")
    service_endpoint: str = "http://localhost:8080/didcomm"
    key_id_anchor: KeyIdAnchor = KeyIdAnchor.LONG

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=0, le=65535)
    log_level: str = "INFO"

    # Outbound HTTP
    http_timeout: float = Field(default=15.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="PEER_DIDCOMM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def preserve_long_form(self) -> bool:
        """Whether the resolver anchors peer-4 documents to the long form."""
        return self.key_id_anchor is KeyIdAnchor.LONG


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()


__all__ = ["Settings", "get_settings"]
