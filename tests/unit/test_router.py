"""
Unit tests for the prefix router.
"""

from userserver.http.router import Router, Route
from userserver.http.request import HTTPRequest
from userserver.http.response import HTTPResponse, ResponseBuilder, HTTPStatus


def make_request(method: str, path: str) -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=method, path=path)


def dummy_handler(request: HTTPRequest) -> HTTPResponse:
    """Dummy handler for testing."""
    return ResponseBuilder().text(request.path).build()


class TestRoute:
    """Tests for Route matching."""

    def test_prefix_match(self):
        route = Route(method="GET", prefix="/users", handler=dummy_handler)

        assert route.matches(make_request("GET", "/users"))
        assert route.matches(make_request("GET", "/users/5"))
        assert route.matches(make_request("GET", "/usersXYZ"))
        assert not route.matches(make_request("GET", "/user"))

    def test_method_must_match_exactly(self):
        route = Route(method="GET", prefix="/users", handler=dummy_handler)

        assert not route.matches(make_request("POST", "/users"))
        assert not route.matches(make_request("get", "/users"))


class TestRouter:
    """Tests for Router class."""

    def test_add_route(self):
        """Test adding routes."""
        router = Router()
        router.add_route("get", "/users", dummy_handler)

        assert len(router.routes()) == 1
        assert router.routes()[0].method == "GET"
        assert router.routes()[0].prefix == "/users"
        assert router.routes()[0].name == "dummy_handler"

    def test_first_registered_route_wins(self):
        """Test routes are tried in registration order."""
        router = Router()
        router.add_route("GET", "/users/", dummy_handler, name="one")
        router.add_route("GET", "/users", dummy_handler, name="all")

        assert router.match(make_request("GET", "/users/5")).name == "one"
        assert router.match(make_request("GET", "/users")).name == "all"

    def test_registration_order_matters(self):
        """Test a shorter prefix registered first shadows a longer one."""
        router = Router()
        router.add_route("GET", "/users", dummy_handler, name="all")
        router.add_route("GET", "/users/", dummy_handler, name="one")

        assert router.match(make_request("GET", "/users/5")).name == "all"

    def test_decorators(self):
        """Test decorator route registration."""
        router = Router()

        @router.post("/users")
        def create(request):
            return dummy_handler(request)

        @router.put("/users")
        def update(request):
            return dummy_handler(request)

        @router.delete("/users")
        def delete(request):
            return dummy_handler(request)

        assert [r.method for r in router.routes()] == ["POST", "PUT", "DELETE"]
        assert [r.name for r in router.routes()] == ["create", "update", "delete"]
        assert create.__name__ == "create"

    def test_handle_dispatches(self):
        router = Router()
        router.get("/users")(dummy_handler)

        response = router.handle(make_request("GET", "/users/9"))

        assert response.status == HTTPStatus.OK
        assert response.text == "/users/9"

    def test_handle_no_match_is_empty_404(self):
        """Test unmatched requests get an empty 404."""
        router = Router()
        router.get("/users")(dummy_handler)

        response = router.handle(make_request("GET", "/health"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.body == b""

    def test_print_routes(self, capsys):
        router = Router()
        router.get("/users/", name="read_one")(dummy_handler)
        router.print_routes()

        out = capsys.readouterr().out
        assert "/users/" in out
        assert "read_one" in out


class TestUserRoutes:
    """Tests for the installed user route table."""

    def test_route_table_order(self, router):
        table = [(r.method, r.prefix, r.name) for r in router.routes()]

        assert table == [
            ("POST", "/users", "create"),
            ("GET", "/users/", "read_one"),
            ("GET", "/users", "read_all"),
            ("PUT", "/users", "update"),
            ("DELETE", "/users", "delete"),
        ]

    def test_get_with_slash_goes_to_read_one(self, router):
        assert router.match(make_request("GET", "/users/")).name == "read_one"
        assert router.match(make_request("GET", "/users/abc")).name == "read_one"

    def test_get_without_slash_goes_to_read_all(self, router):
        assert router.match(make_request("GET", "/users")).name == "read_all"
        assert router.match(make_request("GET", "/users?x=1")).name == "read_all"

    def test_unrouted(self, router):
        assert router.match(make_request("PATCH", "/users/1")) is None
        assert router.match(make_request("GET", "/")) is None
