"""HTTP server for peer-didcomm using stdlib http.server.

Routes:
    POST   /didcomm                      — receive a packed DIDComm message
    GET    /api/did                      — this agent's DID and document
    GET    /api/messages                 — all received messages
    GET    /api/messages/{session_token} — messages queued for a session
    GET    /health                       — health check

Usage:
    python -m peer_didcomm.server.app --port 8080
    python -m peer_didcomm.server.app --host 127.0.0.1 --port 9000 --key-id-anchor short
"""
from __future__ import annotations

import argparse
import logging
import json
import re
import urllib.parse
from http.server import BaseHTTPRequestHandler, HTTPServer

from peer_didcomm.agent import Agent
from peer_didcomm.config import Settings
from peer_didcomm.identity import KeyIdAnchor
from peer_didcomm.server import routes

logger = logging.getLogger(__name__)

# URL pattern for /api/messages/{session_token}
_SESSION_MESSAGES_PATTERN = re.compile(r"^/api/messages/([^/]+)$")


class DIDCommHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the peer-didcomm server.

    ``POST /didcomm`` accepts the raw packed message; every other route
    answers JSON.
    """

    def log_message(self, format: str, *args: object) -> None:
        """Override to route access logs through the Python logging system."""
        logger.debug(format, *args)

    # ── GET ───────────────────────────────────────────────────────────────────

    def do_GET(self) -> None:
        """Handle all GET requests by routing on the URL path."""
        parsed = urllib.parse.urlparse(self.path)
        path = parsed.path.rstrip("/")

        if path == "/health":
            status, data = routes.handle_health()
        elif path == "/api/did":
            status, data = routes.handle_get_did()
        elif path == "/api/messages":
            status, data = routes.handle_list_messages()
        else:
            match = _SESSION_MESSAGES_PATTERN.match(path)
            if match:
                session_token = urllib.parse.unquote(match.group(1))
                status, data = routes.handle_session_messages(session_token)
            else:
                status, data = 404, {"error": "Not found", "detail": f"No route for GET {path}"}
        self._send_json(status, data)

    # ── POST ──────────────────────────────────────────────────────────────────

    def do_POST(self) -> None:
        """Handle all POST requests by routing on the URL path."""
        parsed = urllib.parse.urlparse(self.path)
        path = parsed.path.rstrip("/")

        if path != "/didcomm":
            self._send_json(404, {"error": "Not found", "detail": f"No route for POST {path}"})
            return

        body = self._read_text_body()
        if body is None:
            return
        status, data = routes.handle_didcomm(body)
        self._send_json(status, data)

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _send_json(self, status: int, data: dict[str, object]) -> None:
        """Serialize *data* to JSON and send an HTTP response with *status*."""
        body = json.dumps(data, default=str).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _read_text_body(self) -> str | None:
        """Read the request body as UTF-8 text.

        Returns None (and sends a 400 error response) if decoding fails.
        """
        content_length = int(self.headers.get("Content-Length", 0))
        if content_length == 0:
            return ""
        raw = self.rfile.read(content_length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            self._send_json(400, {"error": "Invalid body", "detail": str(exc)})
            return None


def create_server(agent: Agent, host: str = "0.0.0.0", port: int = 8080, endpoint: str = "") -> HTTPServer:
    """Create (but do not start) the peer-didcomm HTTP server.

    Parameters
    ----------
    agent:
        The agent served by the routes.
    host:
        Bind address (default ``"0.0.0.0"``, all interfaces).
    port:
        TCP port to listen on (default 8080). ``0`` picks a free port.
    endpoint:
        Public DIDComm endpoint advertised by ``GET /api/did``.

    Returns
    -------
    HTTPServer
        A configured server instance ready to call ``serve_forever()`` on.
    """
    routes.configure(agent, endpoint)
    server = HTTPServer((host, port), DIDCommHandler)
    logger.info("peer-didcomm server created at http://%s:%d", host, server.server_port)
    return server


def run_server(settings: Settings) -> None:
    """Load the agent from *settings* and serve it (blocking)."""
    agent = Agent.from_settings(settings)
    server = create_server(agent, settings.host, settings.port, settings.service_endpoint)
    logger.info("DIDComm endpoint: %s", settings.service_endpoint)
    logger.info("Server DID: %s", agent.identity.short_did)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down peer-didcomm server.")
    finally:
        server.server_close()


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="peer-didcomm HTTP server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--host", default=None, help="Bind address")
    parser.add_argument("--port", type=int, default=None, help="TCP port")
    parser.add_argument("--identity-file", default=None, help="Identity JSON file")
    parser.add_argument("--service-endpoint", default=None, help="Public DIDComm endpoint")
    parser.add_argument(
        "--key-id-anchor",
        default=None,
        choices=[anchor.value for anchor in KeyIdAnchor],
        help="DID form used to anchor key ids",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Apply command-line overrides on top of environment settings."""
    overrides = {
        key: value
        for key, value in vars(args).items()
        if value is not None
    }
    return Settings(**overrides)


if __name__ == "__main__":
    settings = settings_from_args(_build_arg_parser().parse_args())
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    run_server(settings)
