"""
Unit tests for URL router.
"""

import pytest

from minihttp.http.router import Router
from minihttp.http.request import HTTPRequest
from minihttp.http.response import HTTPResponse, ok
from minihttp.http.status_codes import HTTPStatus


def make_request(method: str, path: str) -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=method, path=path)


def dummy_handler(request: HTTPRequest) -> HTTPResponse:
    """Dummy handler for testing."""
    return ok(request.path)


class TestRouter:
    """Tests for Router class."""

    def test_add_route(self):
        """Test adding routes."""
        router = Router()
        router.add_route("/user-agent", dummy_handler, method="get")

        routes = router.routes()
        assert len(routes) == 1
        assert routes[0].path == "/user-agent"
        assert routes[0].method == "GET"

    def test_exact_match(self):
        """Test matching static paths."""
        router = Router()
        router.add_route("/", dummy_handler)
        router.add_route("/user-agent", dummy_handler)

        assert router.match("GET", "/").route.path == "/"
        assert router.match("GET", "/user-agent").route.path == "/user-agent"
        assert router.match("GET", "/user-agent/") is None
        assert router.match("GET", "//") is None

    @pytest.mark.parametrize("path,text", [
        ("/echo/abc", "abc"),
        ("/echo/a/b/", "a/b/"),
        ("/echo/", ""),
        ("/echo/hello%20world", "hello%20world"),
    ])
    def test_wildcard_capture(self, path, text):
        """Test that *name captures the rest of the path verbatim."""
        router = Router()
        router.add_route("/echo/*text", dummy_handler)

        match = router.match("GET", path)
        assert match.params == {"text": text}

    def test_wildcard_needs_prefix(self):
        """Test that the literal prefix must be present in full."""
        router = Router()
        router.add_route("/echo/*text", dummy_handler)

        assert router.match("GET", "/echo") is None
        assert router.match("GET", "/echoes/x") is None

    def test_match_with_method(self):
        """Test method-based routing."""
        router = Router()
        router.add_route("/files/*name", dummy_handler, method="GET", name="read")
        router.add_route("/files/*name", dummy_handler, method="POST", name="write")

        assert router.match("GET", "/files/a").route.name == "read"
        assert router.match("POST", "/files/a").route.name == "write"
        assert router.match("PUT", "/files/a") is None

    def test_any_method(self):
        """Test that method=None accepts every method."""
        router = Router()
        router.add_route("/", dummy_handler)

        for method in ("GET", "POST", "DELETE", "BREW"):
            assert router.match(method, "/") is not None

    def test_first_match_wins(self):
        """Test registration order decides between overlapping routes."""
        router = Router()
        router.add_route("/echo/*text", dummy_handler, name="wide")
        router.add_route("/echo/special", dummy_handler, name="narrow")

        assert router.match("GET", "/echo/special").route.name == "wide"

    def test_regex_characters_are_literal(self):
        """Test that pattern text is not interpreted as a regex."""
        router = Router()
        router.add_route("/a.b", dummy_handler)

        assert router.match("GET", "/a.b") is not None
        assert router.match("GET", "/axb") is None

    def test_handle_sets_path_params(self):
        """Test that handle() injects captures before calling the handler."""
        router = Router()
        router.add_route("/echo/*text", lambda request: ok(request.path_params["text"]))

        response = router.handle(make_request("GET", "/echo/xyz"))
        assert response.body == b"xyz"

    def test_handle_not_found(self):
        """Test 404 for unmatched routes."""
        router = Router()
        router.add_route("/", dummy_handler)

        response = router.handle(make_request("GET", "/missing"))
        assert response.status == HTTPStatus.NOT_FOUND
        assert response.body is None


class TestRouterDecorators:
    """Tests for router decorators."""

    def test_get_decorator(self):
        """Test @router.get decorator."""
        router = Router()

        @router.get("/user-agent")
        def handler(request):
            return ok()

        assert router.match("GET", "/user-agent").route.handler is handler
        assert router.match("POST", "/user-agent") is None

    def test_post_decorator(self):
        """Test @router.post decorator."""
        router = Router()

        @router.post("/files/*filename")
        def handler(request):
            return ok()

        assert router.match("POST", "/files/x").params == {"filename": "x"}

    def test_describe(self):
        """Test the route listing used in startup logs."""
        router = Router()
        router.add_route("/", dummy_handler)
        router.add_route("/files/*filename", dummy_handler, method="POST")

        assert router.describe() == ["*      /", "POST   /files/*filename"]
