"""Tests for peer_didcomm.cli.main — CLI commands via Click test runner."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from peer_didcomm.cli.main import cli
from peer_didcomm.did import peer4
from peer_didcomm.identity import LocalIdentity

ENDPOINT = "https://agent.example/didcomm"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def identity() -> LocalIdentity:
    return LocalIdentity.generate(ENDPOINT)


def _tampered(did: str) -> str:
    replacement = "2" if did[-1] != "2" else "3"
    return did[:-1] + replacement


# ---------------------------------------------------------------------------
# Root CLI
# ---------------------------------------------------------------------------


class TestRootCLI:
    def test_help_exits_zero(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "did" in result.output
        assert "serve" in result.output

    def test_version_command(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "peer-didcomm" in result.output.lower()


# ---------------------------------------------------------------------------
# did create
# ---------------------------------------------------------------------------


class TestDidCreate:
    def test_prints_long_form_did_last(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["did", "create", "--endpoint", ENDPOINT])
        assert result.exit_code == 0
        did = result.output.strip().splitlines()[-1]
        assert peer4.is_long_form(did)
        assert peer4.decode(did)["service"][0]["serviceEndpoint"]["uri"] == ENDPOINT

    def test_endpoint_is_required(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["did", "create"])
        assert result.exit_code != 0

    def test_writes_identity_file(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "id" / "identity.json"
        result = runner.invoke(
            cli, ["did", "create", "-e", ENDPOINT, "--identity-file", str(path)]
        )
        assert result.exit_code == 0
        loaded = LocalIdentity.load(path)
        assert loaded.did == result.output.strip().splitlines()[-1]

    def test_refuses_to_overwrite_without_force(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "identity.json"
        runner.invoke(cli, ["did", "create", "-e", ENDPOINT, "--identity-file", str(path)])
        original = path.read_text()

        result = runner.invoke(cli, ["did", "create", "-e", ENDPOINT, "--identity-file", str(path)])
        assert result.exit_code == 1
        assert path.read_text() == original

        forced = runner.invoke(
            cli, ["did", "create", "-e", ENDPOINT, "--identity-file", str(path), "--force"]
        )
        assert forced.exit_code == 0
        assert path.read_text() != original


# ---------------------------------------------------------------------------
# did resolve / decode / short
# ---------------------------------------------------------------------------


class TestDidResolve:
    def test_resolves_to_short_form_by_default(self, runner: CliRunner, identity: LocalIdentity) -> None:
        result = runner.invoke(cli, ["did", "resolve", identity.did])
        assert result.exit_code == 0
        document = json.loads(result.output)
        assert document["id"] == identity.short_did
        assert identity.did in document["alsoKnownAs"]

    def test_long_flag_keeps_long_form(self, runner: CliRunner, identity: LocalIdentity) -> None:
        result = runner.invoke(cli, ["did", "resolve", "--long", identity.did])
        assert result.exit_code == 0
        document = json.loads(result.output)
        assert document["id"] == identity.did
        assert identity.short_did in document["alsoKnownAs"]

    def test_unsupported_method_exits_one(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["did", "resolve", "did:web:example.com"])
        assert result.exit_code == 1

    def test_tampered_did_exits_one(self, runner: CliRunner, identity: LocalIdentity) -> None:
        result = runner.invoke(cli, ["did", "resolve", _tampered(identity.did)])
        assert result.exit_code == 1


class TestDidDecode:
    def test_decodes_embedded_document(self, runner: CliRunner, identity: LocalIdentity) -> None:
        result = runner.invoke(cli, ["did", "decode", identity.did])
        assert result.exit_code == 0
        assert json.loads(result.output) == identity.document

    def test_short_form_cannot_be_decoded(self, runner: CliRunner, identity: LocalIdentity) -> None:
        result = runner.invoke(cli, ["did", "decode", identity.short_did])
        assert result.exit_code == 1

    def test_tampered_did_exits_one(self, runner: CliRunner, identity: LocalIdentity) -> None:
        result = runner.invoke(cli, ["did", "decode", _tampered(identity.did)])
        assert result.exit_code == 1


class TestDidShort:
    def test_prints_short_form(self, runner: CliRunner, identity: LocalIdentity) -> None:
        result = runner.invoke(cli, ["did", "short", identity.did])
        assert result.exit_code == 0
        assert result.output.strip() == identity.short_did

    def test_rejects_short_input(self, runner: CliRunner, identity: LocalIdentity) -> None:
        result = runner.invoke(cli, ["did", "short", identity.short_did])
        assert result.exit_code == 1


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


class TestServe:
    def test_invalid_port_exits_one(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(
            cli,
            ["serve", "--port", "70000", "--identity-file", str(tmp_path / "identity.json")],
        )
        assert result.exit_code == 1
        assert "invalid settings" in result.output
