"""
Low-level networking.

    socket_server.py   Listening socket and the sequential accept loop
    connection.py      One client socket: single read, write, close
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
]
