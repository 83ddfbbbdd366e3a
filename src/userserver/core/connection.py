"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for exactly one request/response
exchange.

=============================================================================
ONE READ, ONE WRITE, CLOSE
=============================================================================

TCP is a byte stream, so a robust server keeps reading until it has a
complete message. This server deliberately does not: it performs a
single bounded recv() and treats whatever arrived as the request.

    Client sends:                     Server sees (buffer_size=1024):
    ─────────────                     ───────────────────────────────
    small request (< 1 KB)      →     the whole request
    large request (> 1 KB)      →     the first 1024 bytes only
    nothing, then FIN           →     b"" → no response, close

That keeps the exchange simple and predictable:

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED
              │                                       ▲
              └──── empty read / socket error ────────┘

There are no read or write timeouts. A client that connects and stays
silent blocks the server until it sends or disconnects. The one bounded
wait is on close, and only after a truncated read: the unread tail of
the request is discarded for at most DRAIN_TIMEOUT seconds.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional
import uuid


logger = logging.getLogger(__name__)

# Upper bound on discarding the unread tail of a truncated request
DRAIN_TIMEOUT = 0.5


class ConnectionState(Enum):
    """Where a connection is in its single request/response exchange."""

    NEW = "new"                # Just accepted
    READING = "reading"        # Waiting for request bytes
    PROCESSING = "processing"  # Request read, handler running
    WRITING = "writing"        # Sending the response
    CLOSING = "closing"        # Shutdown sequence in progress
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used as a log prefix.
        state: Current ConnectionState.
        created_at: When the connection was accepted.
        buffer_size: Maximum bytes read for the request.
        truncated: True when the read filled the buffer, so request bytes
                   may still be waiting in the socket.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 1024
    truncated: bool = False

    def __post_init__(self):
        # Plain blocking socket, no timeout
        self.socket.settimeout(None)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> Optional[bytes]:
        """
        Read the request with one recv() call.

        Returns:
            Up to buffer_size bytes, or None if the client closed the
            connection without sending anything.

        Raises:
            OSError: On socket errors (reset, broken pipe, ...). The
                     caller logs and abandons the connection.
        """
        self.state = ConnectionState.READING
        data = self.socket.recv(self.buffer_size)
        if not data:
            return None

        self.truncated = len(data) >= self.buffer_size
        self.state = ConnectionState.PROCESSING
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send the full response with sendall().

        Returns:
            True if sent, False if the client went away.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        1. shutdown(SHUT_WR) sends FIN so the client sees end-of-response
        2. If the read was truncated, drain the rest of the request for
           at most DRAIN_TIMEOUT seconds; closing with unread data makes
           the kernel send RST, which can destroy the response before
           the client reads it
        3. close() releases the descriptor

        A request that fit in one read leaves nothing to drain, so close
        returns immediately whether or not the client has hung up.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        if self.truncated:
            self._drain()

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def _drain(self):
        try:
            self.socket.settimeout(DRAIN_TIMEOUT)
            while self.socket.recv(self.buffer_size):
                pass
        except OSError:
            pass  # Includes socket.timeout

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
