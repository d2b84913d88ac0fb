"""Tests for peer_didcomm.inbound.handlers."""
from __future__ import annotations

from typing import Any, Optional

import pytest

from peer_didcomm.inbound.handlers import (
    LOGIN_AUTHENTICATED_TYPE,
    MEDIATE_DENY_TYPE,
    PING_RESPONSE_TYPE,
    PROFILE_TYPE,
    REQUEST_PROFILE_TYPE,
    HandlerContext,
    HandlerRegistry,
    build_reply,
    default_registry,
)

CONTEXT = HandlerContext(local_did="did:peer:4zQmLocal")


def _message(type_: str, **fields: Any) -> dict[str, Any]:
    return {"type": type_, "id": "incoming-1", "from": "did:ex:alice", **fields}


@pytest.fixture()
def registry() -> HandlerRegistry:
    return default_registry()


class TestBuildReply:
    def test_threading_and_addressing(self) -> None:
        reply = build_reply(_message("t"), CONTEXT, "https://example.org/reply", {"k": "v"})
        assert reply["type"] == "https://example.org/reply"
        assert reply["thid"] == "incoming-1"
        assert reply["from"] == CONTEXT.local_did
        assert reply["to"] == ["did:ex:alice"]
        assert reply["body"] == {"k": "v"}
        assert isinstance(reply["created_time"], int)

    def test_ids_are_unique(self) -> None:
        first = build_reply(_message("t"), CONTEXT, "r", {})
        second = build_reply(_message("t"), CONTEXT, "r", {})
        assert first["id"] != second["id"]


class TestDefaultRegistry:
    def test_login(self, registry: HandlerRegistry) -> None:
        reply = registry.dispatch(
            _message("https://didcomm.org/login/1.0/login", body={"session_token": "abc"}), CONTEXT
        )
        assert reply is not None
        assert reply["type"] == LOGIN_AUTHENTICATED_TYPE
        assert reply["body"] == {"session_token": "abc", "authenticated": True}

    def test_session_authenticated_not_answered(self, registry: HandlerRegistry) -> None:
        message = _message(LOGIN_AUTHENTICATED_TYPE, body={"session_token": "abc"})
        assert registry.dispatch(message, CONTEXT) is None

    def test_mediation_denied(self, registry: HandlerRegistry) -> None:
        reply = registry.dispatch(
            _message("https://didcomm.org/coordinate-mediation/3.0/mediate-request"), CONTEXT
        )
        assert reply is not None
        assert reply["type"] == MEDIATE_DENY_TYPE
        assert "mediation" in reply["body"]["reason"]

    def test_trust_ping(self, registry: HandlerRegistry) -> None:
        reply = registry.dispatch(_message("https://didcomm.org/trust-ping/2.0/ping"), CONTEXT)
        assert reply is not None
        assert reply["type"] == PING_RESPONSE_TYPE
        assert reply["body"] == {}

    def test_ping_without_response_requested(self, registry: HandlerRegistry) -> None:
        message = _message(
            "https://didcomm.org/trust-ping/2.0/ping", body={"response_requested": False}
        )
        assert registry.dispatch(message, CONTEXT) is None

    def test_ping_response_not_answered(self, registry: HandlerRegistry) -> None:
        assert registry.dispatch(_message(PING_RESPONSE_TYPE), CONTEXT) is None

    def test_profile_request_uses_display_name(self, registry: HandlerRegistry) -> None:
        context = HandlerContext(local_did="did:ex:me", display_name="My Site")
        reply = registry.dispatch(_message(REQUEST_PROFILE_TYPE), context)
        assert reply is not None
        assert reply["type"] == PROFILE_TYPE
        assert reply["body"] == {"profile": {"displayName": "My Site"}}

    def test_profile_request_requires_exact_type(self, registry: HandlerRegistry) -> None:
        message = _message("https://didcomm.org/user-profile/2.0/request-profile")
        assert registry.dispatch(message, CONTEXT) is None

    @pytest.mark.parametrize(
        "type_",
        [
            "https://didcomm.org/basic-message/2.0/message",
            "https://didcomm.org/out-of-band/2.0/invitation",
            "https://example.org/unknown/1.0/thing",
        ],
    )
    def test_no_reply_types(self, registry: HandlerRegistry, type_: str) -> None:
        assert registry.dispatch(_message(type_), CONTEXT) is None


class TestHandlerRegistry:
    def test_first_match_wins(self) -> None:
        registry = HandlerRegistry()
        calls: list[str] = []

        def first(message: dict[str, Any], context: HandlerContext) -> Optional[dict[str, Any]]:
            calls.append("first")
            return None

        def second(message: dict[str, Any], context: HandlerContext) -> Optional[dict[str, Any]]:
            calls.append("second")
            return None

        registry.register("/thing", first)
        registry.register("/thing", second)
        registry.dispatch(_message("https://example.org/thing/1.0"), CONTEXT)
        assert calls == ["first"]
        assert len(registry) == 2

    def test_find_returns_none_for_unmatched(self) -> None:
        assert HandlerRegistry().find("https://example.org/x") is None
