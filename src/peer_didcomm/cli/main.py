"""CLI entry point for peer-didcomm.

Invoked as::

    peer-didcomm [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m peer_didcomm.cli.main

Commands
--------
did create    Generate a local did:peer:4 identity
did resolve   Resolve a DID to its document
did decode    Decode the embedded document of a long-form did:peer:4
did short     Print the short form of a long-form did:peer:4
serve         Run the DIDComm HTTP server
"""
from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()


# ------------------------------------------------------------------
# Root group
# ------------------------------------------------------------------


@click.group()
@click.version_option(package_name="peer-didcomm")
def cli() -> None:
    """did:peer:4 identities and DIDComm v2 message routing"""


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from peer_didcomm import __version__

    console.print(f"[bold]peer-didcomm[/bold] v{__version__}")


# ------------------------------------------------------------------
# did command group
# ------------------------------------------------------------------


@cli.group(name="did")
def did_group() -> None:
    """Create, resolve and inspect DIDs."""


@did_group.command(name="create")
@click.option(
    "--endpoint",
    "-e",
    required=True,
    help="DIDComm service endpoint URI (or mediator DID) for the new identity.",
)
@click.option(
    "--identity-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the identity, including private keys, to this JSON file.",
)
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing identity file.")
def create_command(endpoint: str, identity_file: str | None, force: bool) -> None:
    """Generate a new did:peer:4 identity."""
    from peer_didcomm.identity import LocalIdentity

    if identity_file and Path(identity_file).exists() and not force:
        console.print(
            f"[red]Error:[/red] {identity_file} already exists (use --force to overwrite)."
        )
        sys.exit(1)

    identity = LocalIdentity.generate(endpoint)
    if identity_file:
        identity.save(Path(identity_file))

    table = Table(title="New did:peer:4 identity", show_lines=False)
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")
    table.add_row("Short DID", identity.short_did)
    table.add_row("Endpoint", endpoint)
    table.add_row("Saved to", identity_file or "(not saved)")
    console.print(table)
    click.echo(identity.did)


@did_group.command(name="resolve")
@click.argument("did")
@click.option(
    "--long",
    "preserve_long_form",
    is_flag=True,
    default=False,
    help="Anchor a did:peer:4 document to its long form instead of the short form.",
)
def resolve_command(did: str, preserve_long_form: bool) -> None:
    """Resolve DID and print its document as JSON."""
    from peer_didcomm.errors import PeerDIDCommError
    from peer_didcomm.store import DIDResolver

    resolver = DIDResolver(preserve_long_form=preserve_long_form)
    try:
        document = asyncio.run(resolver.resolve_did(did))
    except PeerDIDCommError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    if document is None:
        console.print(f"[red]Error:[/red] Unable to resolve {did}")
        sys.exit(1)
    click.echo(json.dumps(document, indent=2))


@did_group.command(name="decode")
@click.argument("did")
def decode_command(did: str) -> None:
    """Print the document embedded in a long-form did:peer:4."""
    from peer_didcomm.did import peer4
    from peer_didcomm.errors import PeerDIDCommError

    try:
        document = peer4.decode(did)
    except PeerDIDCommError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)
    click.echo(json.dumps(document, indent=2))


@did_group.command(name="short")
@click.argument("did")
def short_command(did: str) -> None:
    """Print the short form of a long-form did:peer:4."""
    from peer_didcomm.did import peer4
    from peer_didcomm.errors import FormatError

    try:
        click.echo(peer4.long_to_short(did))
    except FormatError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)


# ------------------------------------------------------------------
# serve
# ------------------------------------------------------------------


@cli.command(name="serve")
@click.option("--host", default=None, help="Bind address.")
@click.option("--port", type=int, default=None, help="TCP port.")
@click.option("--identity-file", type=click.Path(dir_okay=False), default=None, help="Identity JSON file.")
@click.option("--service-endpoint", default=None, help="Public DIDComm endpoint.")
@click.option(
    "--key-id-anchor",
    type=click.Choice(["long", "short"]),
    default=None,
    help="DID form used to anchor key ids.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level.",
)
def serve_command(
    host: str | None,
    port: int | None,
    identity_file: str | None,
    service_endpoint: str | None,
    key_id_anchor: str | None,
    log_level: str | None,
) -> None:
    """Run the DIDComm HTTP server (blocking)."""
    from pydantic import ValidationError

    from peer_didcomm.config import Settings
    from peer_didcomm.errors import PeerDIDCommError
    from peer_didcomm.server.app import run_server

    overrides = {
        "host": host,
        "port": port,
        "identity_file": identity_file,
        "service_endpoint": service_endpoint,
        "key_id_anchor": key_id_anchor,
        "log_level": log_level,
    }
    try:
        settings = Settings(**{key: value for key, value in overrides.items() if value is not None})
    except ValidationError as exc:
        console.print(f"[red]Error:[/red] invalid settings: {escape(str(exc))}")
        sys.exit(1)

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    console.print(
        f"[bold]peer-didcomm[/bold] serving on http://{settings.host}:{settings.port}/didcomm"
    )
    try:
        run_server(settings)
    except PeerDIDCommError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
