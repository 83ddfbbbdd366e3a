"""
=============================================================================
PREFIX ROUTER
=============================================================================

Maps a parsed request to a handler by METHOD plus PATH PREFIX.

=============================================================================
ROUTING FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ROUTING FLOW                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Incoming Request                                                   │
    │   GET /users/5                                                       │
    │        │                                                             │
    │        ▼                                                             │
    │   Registered Routes (checked top to bottom):                         │
    │   ┌────────────────────────────────────────────────────────────┐    │
    │   │ 1. POST   /users    → create                               │    │
    │   │ 2. GET    /users/   → read_one     ← MATCH!                │    │
    │   │ 3. GET    /users    → read_all                             │    │
    │   │ 4. PUT    /users    → update                               │    │
    │   │ 5. DELETE /users    → delete                               │    │
    │   └────────────────────────────────────────────────────────────┘    │
    │        │                                                             │
    │        ▼                                                             │
    │   read_one(request)                                                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHY ORDER MATTERS
=============================================================================

Prefix matching is deliberately coarse. "/users" is a prefix of every
path under "/users/", so:

    GET /users/5   startswith("/users/")  → True   (route 2)
                   startswith("/users")   → True   (route 3)

First match wins, so "GET /users/" MUST be registered before
"GET /users" or single-user reads silently turn into list reads.

Nothing after the prefix is checked either: "GET /usersXYZ" is a list
read, "PUT /users" without an id reaches the update handler (which then
fails to parse the id). A request that matches no route gets an empty
404 and its body is never looked at.

=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, List, Optional
import logging

from .request import HTTPRequest
from .response import HTTPResponse, not_found


logger = logging.getLogger(__name__)

# Handler: takes a request, returns a response
Handler = Callable[[HTTPRequest], HTTPResponse]


@dataclass
class Route:
    """
    A registered (method, prefix) → handler binding.

        Route(method="GET", prefix="/users/", handler=read_one)
    """

    method: str
    prefix: str
    handler: Handler
    name: Optional[str] = None

    def matches(self, request: HTTPRequest) -> bool:
        """Exact method, literal path prefix."""
        return request.method == self.method and request.path.startswith(self.prefix)


class Router:
    """
    Ordered prefix router.

    Routes are tried in registration order; the first match handles the
    request.

        router = Router()

        @router.get("/users/")
        def read_one(request):
            ...

        @router.get("/users")
        def read_all(request):
            ...
    """

    def __init__(self):
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        method: str,
        prefix: str,
        handler: Handler,
        name: Optional[str] = None,
    ) -> Route:
        """
        Append a route after all previously registered ones.

        Args:
            method: Request method to match exactly ("GET", "POST", ...)
            prefix: Literal path prefix ("/users/")
            handler: Function taking a request, returning a response
            name: Optional label, used in logs and print_routes()

        Returns:
            The registered Route.
        """
        route = Route(
            method=method.upper(),
            prefix=prefix,
            handler=handler,
            name=name or getattr(handler, "__name__", None),
        )
        self._routes.append(route)
        return route

    def route(self, method: str, prefix: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator form of add_route(). Returns the handler unchanged."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(method, prefix, handler, name)
            return handler
        return decorator

    def get(self, prefix: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a GET route."""
        return self.route("GET", prefix, name)

    def post(self, prefix: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a POST route."""
        return self.route("POST", prefix, name)

    def put(self, prefix: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a PUT route."""
        return self.route("PUT", prefix, name)

    def delete(self, prefix: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a DELETE route."""
        return self.route("DELETE", prefix, name)

    # =========================================================================
    # MATCHING
    # =========================================================================

    def match(self, request: HTTPRequest) -> Optional[Route]:
        """First route matching the request, or None."""
        for route in self._routes:
            if route.matches(request):
                return route
        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Dispatch the request.

        Returns:
            The handler's response, or an empty 404 if nothing matched.
        """
        route = self.match(request)
        if route is None:
            logger.debug(f"No route for {request.method!r} {request.path!r}")
            return not_found()

        return route.handler(request)

    def routes(self) -> List[Route]:
        """All routes in priority order."""
        return list(self._routes)

    def print_routes(self) -> None:
        """
        Print the routing table, for example:

            Registered Routes:
            ------------------------------------------------------------
              POST     /users      create
              GET      /users/     read_one
            ------------------------------------------------------------
        """
        print("\nRegistered Routes:")
        print("-" * 60)
        for route in self._routes:
            print(f"  {route.method:8} {route.prefix:11} {route.name or ''}")
        print("-" * 60)
