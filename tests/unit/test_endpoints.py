"""
Unit tests for the endpoint table (router + handlers, no sockets).
"""

import pytest

from minihttp.handlers import FilesHandler, build_router
from minihttp.http import parse_request
from minihttp.http.status_codes import HTTPStatus


def dispatch(router, raw: bytes):
    return router.handle(parse_request(raw))


@pytest.fixture
def router(storage):
    return build_router(storage)


class TestBasicEndpoints:
    """Tests for /, /echo/ and /user-agent."""

    def test_root(self, router):
        """Test GET / is a bare 200."""
        response = dispatch(router, b"GET / HTTP/1.1\r\n\r\n")

        assert response.status == HTTPStatus.OK
        assert response.body is None
        assert response.headers == {}

    def test_root_any_method(self, router):
        """Test / answers every method."""
        response = dispatch(router, b"DELETE / HTTP/1.1\r\n\r\n")

        assert response.status == HTTPStatus.OK

    def test_echo(self, router):
        """Test /echo/<text> returns text verbatim."""
        response = dispatch(router, b"GET /echo/abc HTTP/1.1\r\n\r\n")

        assert response.headers["Content-Type"] == "text/plain"
        assert response.body == b"abc"

    def test_echo_keeps_slashes_and_escapes(self, router):
        """Test the captured text is not decoded or normalized."""
        response = dispatch(router, b"GET /echo/a/b%20c/ HTTP/1.1\r\n\r\n")

        assert response.body == b"a/b%20c/"

    def test_echo_empty(self, router):
        """Test /echo/ echoes nothing, with a zero-length body."""
        response = dispatch(router, b"GET /echo/ HTTP/1.1\r\n\r\n")

        assert response.body == b""
        assert b"Content-Length: 0\r\n" in response.to_bytes()

    def test_user_agent(self, router):
        """Test /user-agent echoes the header."""
        response = dispatch(router, b"GET /user-agent HTTP/1.1\r\nUser-Agent: foobar/1.2.3\r\n\r\n")

        assert response.headers["Content-Type"] == "text/plain"
        assert response.body == b"foobar/1.2.3"

    def test_user_agent_missing(self, router):
        """Test /user-agent without the header gives an empty body."""
        response = dispatch(router, b"GET /user-agent HTTP/1.1\r\n\r\n")

        assert response.status == HTTPStatus.OK
        assert response.body == b""

    @pytest.mark.parametrize("path", [b"/unknown", b"/echo", b"/user-agent/x", b""])
    def test_unknown_path(self, router, path):
        """Test everything else is a bare 404."""
        response = dispatch(router, b"GET " + path + b" HTTP/1.1\r\n\r\n")

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.body is None


class TestFilesEndpoint:
    """Tests for /files/<name>."""

    def test_get_existing(self, router, storage):
        """Test GET returns stored bytes as octet-stream."""
        storage.write("foo", b"Hello, World!")

        response = dispatch(router, b"GET /files/foo HTTP/1.1\r\n\r\n")

        assert response.status == HTTPStatus.OK
        assert response.headers["Content-Type"] == "application/octet-stream"
        assert response.body == b"Hello, World!"

    @pytest.mark.parametrize("name", [b"nope", b"a" * 300, b"a\x00b"])
    def test_get_missing(self, router, name):
        """Test GET of a file never written is 404, however odd the name."""
        response = dispatch(router, b"GET /files/" + name + b" HTTP/1.1\r\n\r\n")

        assert response.status == HTTPStatus.NOT_FOUND

    def test_post_stores_body(self, router, storage):
        """Test POST writes the body and answers 201 with no body."""
        response = dispatch(
            router,
            b"POST /files/new.txt HTTP/1.1\r\nContent-Length: 5\r\n\r\nhello",
        )

        assert response.status == HTTPStatus.CREATED
        assert response.body is None
        assert storage.read("new.txt") == b"hello"

    def test_post_empty_body(self, router, storage):
        """Test POST without Content-Length stores an empty file."""
        response = dispatch(router, b"POST /files/empty HTTP/1.1\r\n\r\n")

        assert response.status == HTTPStatus.CREATED
        assert storage.read("empty") == b""

    def test_other_methods_404(self, router, storage):
        """Test PUT/DELETE on /files/ fall through to 404."""
        storage.write("foo", b"x")

        response = dispatch(router, b"DELETE /files/foo HTTP/1.1\r\n\r\n")

        assert response.status == HTTPStatus.NOT_FOUND
        assert storage.exists("foo")

    @pytest.mark.parametrize("name", [b"a" * 300, b"a\x00b"])
    def test_post_unusable_name_is_404(self, router, name):
        """Test POST to a name the filesystem cannot hold is 404."""
        response = dispatch(
            router,
            b"POST /files/" + name + b" HTTP/1.1\r\nContent-Length: 1\r\n\r\nx",
        )

        assert response.status == HTTPStatus.NOT_FOUND

    def test_traversal_is_404(self, router, storage):
        """Test names escaping the storage root are 404 for GET and POST."""
        get = dispatch(router, b"GET /files/../../etc/passwd HTTP/1.1\r\n\r\n")
        post = dispatch(router, b"POST /files/../x HTTP/1.1\r\nContent-Length: 1\r\n\r\nx")

        assert get.status == HTTPStatus.NOT_FOUND
        assert post.status == HTTPStatus.NOT_FOUND
        assert not (storage.root.parent / "x").exists()

    def test_empty_name_is_404(self, router):
        """Test /files/ with no name is 404."""
        response = dispatch(router, b"GET /files/ HTTP/1.1\r\n\r\n")

        assert response.status == HTTPStatus.NOT_FOUND

    def test_no_storage_configured(self):
        """Test /files/ is 404 when the server has no directory."""
        router = build_router(None)

        get = dispatch(router, b"GET /files/foo HTTP/1.1\r\n\r\n")
        post = dispatch(router, b"POST /files/foo HTTP/1.1\r\nContent-Length: 1\r\n\r\nx")

        assert get.status == HTTPStatus.NOT_FOUND
        assert post.status == HTTPStatus.NOT_FOUND

    def test_files_handler_direct(self, storage):
        """Test FilesHandler outside of a router."""
        handler = FilesHandler(storage)
        request = parse_request(b"POST /files/a HTTP/1.1\r\nContent-Length: 2\r\n\r\nhi")
        request.path_params = {"filename": "a"}

        assert handler.write(request).status == HTTPStatus.CREATED
        assert handler.read(request).body == b"hi"
