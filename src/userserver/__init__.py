"""
=============================================================================
USERSERVER - User CRUD Over a Hand-Rolled HTTP Server
=============================================================================

A tiny HTTP/1.1 service on raw sockets exposing create, read, update
and delete for a single "user" resource (id, name, email), persisted in
SQLite.

=============================================================================
API
=============================================================================

    POST    /users        {"name", "email"}   → 200 "User created"
    GET     /users/<id>                       → 200 {"id", "name", "email"}
    GET     /users                            → 200 [ ... ]
    PUT     /users/<id>   {"name", "email"}   → 200 "User updated"
    DELETE  /users/<id>                       → 200 "User deleted"

Anything else answers an empty 404.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    userserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # Entry point (python -m userserver)
    ├── server.py            # UserServer: wiring and per-request flow
    ├── config.py            # ServerConfig dataclass
    ├── models.py            # User entity
    ├── codec.py             # JSON ↔ User
    ├── store.py             # SQLite gateway
    ├── core/                # Sockets
    │   ├── socket_server.py # Sequential accept loop
    │   └── connection.py    # Single read, write, close
    ├── http/                # Protocol
    │   ├── request.py       # Parsing and id extraction
    │   ├── response.py      # Responses and serialization
    │   ├── router.py        # Prefix router
    │   └── status_codes.py  # 200 / 404 / 500
    └── handlers/
        └── users.py         # The five CRUD handlers

=============================================================================
QUICK START
=============================================================================

    DATABASE_URL=sqlite:///users.db python -m userserver

    curl -X POST localhost:8080/users -d '{"name":"Ann","email":"a@x.io"}'
    curl localhost:8080/users

=============================================================================
"""

from .server import UserServer
from .config import ServerConfig
from .models import User
from .store import UserStore, StoreError
from .codec import CodecError

__version__ = "1.0.0"

__all__ = [
    "UserServer",
    "ServerConfig",
    "User",
    "UserStore",
    "StoreError",
    "CodecError",
    "__version__",
]
