"""
Unit tests for the client connection wrapper.
"""

import socket
import time

import pytest

from userserver.core.connection import DRAIN_TIMEOUT, Connection, ConnectionState


@pytest.fixture
def socket_pair():
    """Connected (server side, client side) sockets."""
    server_side, client_side = socket.socketpair()
    client_side.settimeout(5.0)

    yield server_side, client_side

    server_side.close()
    client_side.close()


class TestConnection:
    """Tests for Connection class."""

    def test_read_request(self, socket_pair):
        server_side, client_side = socket_pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 5000))

        client_side.sendall(b"GET /users HTTP/1.1\r\n\r\n")

        assert conn.read_request() == b"GET /users HTTP/1.1\r\n\r\n"
        assert conn.state == ConnectionState.PROCESSING
        assert not conn.truncated

    def test_read_is_bounded(self, socket_pair):
        server_side, client_side = socket_pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 5000), buffer_size=1024)

        client_side.sendall(b"x" * 1500)

        assert len(conn.read_request()) == 1024
        assert conn.truncated

    def test_empty_read(self, socket_pair):
        server_side, client_side = socket_pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 5000))

        client_side.shutdown(socket.SHUT_WR)

        assert conn.read_request() is None

    def test_close_does_not_wait_on_open_client(self, socket_pair):
        """Test close returns at once when the whole request was read."""
        server_side, client_side = socket_pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 5000))

        client_side.sendall(b"GET /users HTTP/1.1\r\n\r\n")
        conn.read_request()
        assert conn.send_response(b"HTTP/1.1 200 OK\r\n\r\n")

        start = time.monotonic()
        conn.close()

        assert time.monotonic() - start < DRAIN_TIMEOUT / 2
        assert conn.state == ConnectionState.CLOSED
        assert client_side.recv(1024) == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_close_drains_truncated_request(self, socket_pair):
        """Test the unread tail is discarded and the response still arrives."""
        server_side, client_side = socket_pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 5000))

        client_side.sendall(b"x" * 1500)
        conn.read_request()
        conn.send_response(b"HTTP/1.1 500 INTERNAL SERVER ERROR\r\n\r\n")
        client_side.shutdown(socket.SHUT_WR)

        with conn:
            pass

        assert conn.state == ConnectionState.CLOSED
        assert client_side.recv(1024) == b"HTTP/1.1 500 INTERNAL SERVER ERROR\r\n\r\n"

    def test_close_twice(self, socket_pair):
        server_side, _ = socket_pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 5000))

        conn.close()
        conn.close()

        assert conn.state == ConnectionState.CLOSED
