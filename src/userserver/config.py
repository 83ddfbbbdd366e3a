"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All settings live in one frozen dataclass, built once at process start
and passed to the components that need it. Nothing reads the
environment after startup.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   DATABASE_URL=sqlite:///users.db python -m userserver              │
    │        │                                                             │
    │        ▼                                                             │
    │   ServerConfig.from_env()                                            │
    │        │                                                             │
    │        ├── database_url  ← DATABASE_URL (required)                  │
    │        └── everything else ← defaults below                         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The process takes no command-line flags. Tests and embedding code
construct ServerConfig directly.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


DATABASE_URL_ENV = "DATABASE_URL"


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the user server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    STORE
    - database_url

    NETWORK SETTINGS
    - host, port, backlog, buffer_size

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # STORE
    # ─────────────────────────────────────────────────────────────────────

    database_url: str = ""
    """
    Where the users table lives, e.g. "sqlite:///users.db".
    Required: the server refuses to start without it.
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """All interfaces."""

    port: int = 8080

    backlog: int = 128
    """Maximum number of queued connections waiting for accept()."""

    buffer_size: int = 1024
    """
    Bytes read per request. A request (headers + body) must fit in a
    single read of this size; anything beyond it is never seen.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "UserServer/1.0"
    """Value of the Server response header."""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """
        Create configuration from environment variables.

        DATABASE_URL    Store location (required)

        Args:
            environ: Mapping to read instead of os.environ (for tests).
        """
        env = os.environ if environ is None else environ
        return cls(database_url=env.get(DATABASE_URL_ENV, ""))

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at startup so a bad value fails before the socket is
        bound or the database is touched.

        Raises:
            ValueError: On the first invalid setting.
        """
        if not self.database_url:
            raise ValueError(f"{DATABASE_URL_ENV} is not set")

        # Port 0 lets the OS pick (used by tests)
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")
