"""
=============================================================================
USERSERVER ENTRY POINT
=============================================================================

    DATABASE_URL=sqlite:///users.db python -m userserver

or, once installed, simply `userserver`.

The process takes no command-line flags. Its only input is the
DATABASE_URL environment variable; host, port and the rest come from
ServerConfig defaults (0.0.0.0:8080).

=============================================================================
EXIT STATUS
=============================================================================

    0   Clean shutdown (SIGINT / SIGTERM)
    1   Startup failed: missing or invalid DATABASE_URL, store
        unreachable, or port already in use

=============================================================================
"""

import logging
import sys

from .config import ServerConfig
from .server import UserServer
from .store import StoreError


logger = logging.getLogger("userserver")


def main():
    """Build the config from the environment and run the server."""
    config = ServerConfig.from_env()

    try:
        server = UserServer(config)
        server.run()
    except (ValueError, StoreError, OSError) as e:
        # Logging may not be configured yet if the config itself was bad
        if not logging.getLogger().handlers:
            logging.basicConfig(
                format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        logger.error(f"Startup failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
