"""
=============================================================================
USER SERVER
=============================================================================

Ties the components together: socket accept loop, request parser,
router with the user handlers, and the store.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │                        ┌─────────────────┐                          │
    │                        │   UserServer    │                          │
    │                        └────────┬────────┘                          │
    │            ┌────────────────────┼────────────────────┐              │
    │            ▼                    ▼                    ▼              │
    │    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐        │
    │    │ SocketServer │    │    Router    │    │  UserStore   │        │
    │    │ (accept loop)│    │ (5 routes)   │    │  (sqlite3)   │        │
    │    └──────┬───────┘    └──────┬───────┘    └──────────────┘        │
    │           ▼                   ▼                                     │
    │    ┌──────────────┐    ┌──────────────┐                            │
    │    │  Connection  │    │ UserHandlers │                            │
    │    └──────────────┘    └──────────────┘                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. ACCEPT       SocketServer hands over a Connection
    2. READ         One recv() of up to buffer_size bytes
    3. PARSE        RequestParser never fails; garbage just won't route
    4. DISPATCH     Router picks the first matching route, or 404
    5. RESPOND      Serialize, sendall(), close

Steps 2 to 5 happen inline in the accept loop. The next client is not
accepted until the current one is closed.

=============================================================================
"""

import logging
from typing import Optional, Tuple

from .config import ServerConfig
from .core import SocketServer, Connection
from .handlers import build_router
from .http import HTTPRequest, HTTPResponse, RequestParser, Router, internal_error
from .store import UserStore


logger = logging.getLogger(__name__)


class UserServer:
    """
    The user CRUD server.

    Usage:
        config = ServerConfig(database_url="sqlite:///users.db")
        server = UserServer(config)
        server.run()  # Blocks until SIGINT/SIGTERM or shutdown()

    Construction validates the config and resolves the store location
    but touches neither the network nor the database. run() creates the
    schema first and only binds the socket once that has succeeded.
    """

    def __init__(self, config: ServerConfig):
        """
        Raises:
            ValueError: If the config is invalid.
            StoreError: If database_url has an unsupported scheme.
        """
        self.config = config
        self.config.validate()  # Fail fast

        # ─────────────────────────────────────────────────────────────────
        # COMPONENTS
        # ─────────────────────────────────────────────────────────────────

        self._store = UserStore(self.config.database_url)
        self._router = build_router(self._store)
        self._parser = RequestParser()
        self._socket_server = SocketServer(self.config)

    @property
    def router(self) -> Router:
        return self._router

    @property
    def store(self) -> UserStore:
        return self._store

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (host, port), with the real port once listening."""
        return self._socket_server.address

    @property
    def port(self) -> int:
        return self.address[1]

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Prepare the store, then serve until shut down.

        Raises:
            StoreError: If the schema cannot be created. Nothing has
                        been bound at that point.
            OSError: If the address cannot be bound.
        """
        self._setup_logging()

        logger.info(f"Preparing store at {self._store.database_path}")
        self._store.ensure_schema()

        self._router.print_routes()

        try:
            self._socket_server.start(self._handle_connection)
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. run() returns within about a second."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_for_shutdown(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("userserver").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Serve exactly one request on the connection, then close it.

        A read that fails or returns nothing gets no response at all.
        """
        with conn:
            try:
                raw_request = conn.read_request()
            except OSError as e:
                logger.error(f"[{conn.id}] Read error from {conn.client_ip}: {e}")
                return

            if raw_request is None:
                logger.warning(f"[{conn.id}] {conn.client_ip} closed without sending a request")
                return

            request = self._parser.parse(raw_request)
            response = self.dispatch(request)

            if conn.send_response(response.to_bytes(self.config.server_name)):
                logger.info(f"[{conn.id}] {request.method} {request.path} -> {int(response.status)}")

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route the request and finalize the response.

        Handlers turn their own failures into responses; anything that
        still escapes becomes a generic 500.
        """
        try:
            response = self._router.handle(request)
        except Exception as e:
            logger.exception(f"Handler error for {request.request_line}: {e}")
            response = internal_error()

        response.set_header("Connection", "close")
        return response
