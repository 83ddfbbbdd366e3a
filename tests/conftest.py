"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Dict, Generator, Optional, Tuple
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from userserver import UserServer, ServerConfig, UserStore
from userserver.handlers import UserHandlers, build_router
from userserver.http import Router


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request for one user."""
    return (
        b"GET /users/7 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: application/json\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with JSON body."""
    body = b'{"name": "Ann", "email": "ann@example.com"}'
    return (
        b"POST /users HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
        + body
    )


@pytest.fixture
def database_url(tmp_path) -> str:
    """A fresh SQLite database file per test."""
    return f"sqlite:///{tmp_path / 'users.db'}"


@pytest.fixture
def store(database_url: str) -> UserStore:
    """Store with the users table created."""
    user_store = UserStore(database_url)
    user_store.ensure_schema()
    return user_store


@pytest.fixture
def handlers(store: UserStore) -> UserHandlers:
    return UserHandlers(store)


@pytest.fixture
def router(store: UserStore) -> Router:
    return build_router(store)


@pytest.fixture
def config(database_url: str) -> ServerConfig:
    """Test server configuration."""
    return ServerConfig(
        database_url=database_url,
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        log_level="WARNING",
    )


# =============================================================================
# LIVE SERVER HELPERS
# =============================================================================

def send_raw(port: int, data: bytes, timeout: float = 5.0) -> bytes:
    """
    Send raw bytes to the server and read until it closes the connection.

    Sending b"" connects and hangs up without a request.
    """
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as sock:
        if data:
            sock.sendall(data)
        else:
            sock.shutdown(socket.SHUT_WR)

        chunks = []
        while True:
            chunk = sock.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)


def split_response(raw: bytes) -> Tuple[str, Dict[str, str], str]:
    """Split a raw response into (status line, headers, body text)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("utf-8").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(":")
        headers[name.strip().lower()] = value.strip()
    return lines[0], headers, body.decode("utf-8")


class TestServer:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: UserServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.port

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def send(self, data: bytes) -> bytes:
        """Send raw bytes; returns the raw response (b"" if none)."""
        return send_raw(self.port, data)

    split = staticmethod(split_response)

    def request(self, method: str, target: str, body: Optional[str] = None) -> Tuple[str, Dict[str, str], str]:
        """Send one well-formed request and return the split response."""
        raw = f"{method} {target} HTTP/1.1\r\nHost: localhost\r\n"
        if body is not None:
            raw += f"Content-Type: application/json\r\nContent-Length: {len(body.encode())}\r\n"
        raw += "\r\n"
        if body is not None:
            raw += body
        return split_response(self.send(raw.encode("utf-8")))


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """A running server on a free port with an empty database."""
    test_srv = TestServer(UserServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()
