"""
Unit tests for the route table, driven through create_router().
"""

import gzip
from pathlib import Path

import pytest

from tinyhttp.http.request import parse_request
from tinyhttp.http.router import Router
from tinyhttp.http.status_codes import HTTPStatus


def call(router: Router, raw: bytes):
    """Parse raw bytes and dispatch them."""
    return router.handle(parse_request(raw))


class TestRoutes:
    """Tests for each route's behavior."""

    def test_index(self, router: Router):
        response = call(router, b"GET / HTTP/1.1\r\nHost: localhost:4221\r\n\r\n")

        assert response.to_bytes() == b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n"

    def test_echo(self, router: Router):
        """Test /echo/{value} returns value as text/plain."""
        response = call(router, b"GET /echo/abc HTTP/1.1\r\n\r\n")

        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Length: 3\r\n"
            b"Content-Type: text/plain\r\n"
            b"\r\n"
            b"abc"
        )

    def test_echo_gzip(self, router: Router):
        """Test /echo/ compresses when the client accepts gzip."""
        response = call(
            router,
            b"GET /echo/abc HTTP/1.1\r\nAccept-Encoding: invalid-1, gzip, invalid-2\r\n\r\n",
        )

        assert response.headers["Content-Encoding"] == "gzip"
        assert gzip.decompress(response.body) == b"abc"
        assert response.content_length == len(response.body)

    def test_echo_unsupported_encoding(self, router: Router):
        """Test unsupported encodings leave the body uncompressed."""
        response = call(router, b"GET /echo/abc HTTP/1.1\r\nAccept-Encoding: invalid\r\n\r\n")

        assert response.body == b"abc"
        assert "Content-Encoding" not in response.headers

    def test_echo_any_method(self, router: Router):
        """Test /echo/ answers whatever the method."""
        response = call(router, b"POST /echo/xyz HTTP/1.1\r\n\r\n")

        assert response.status == HTTPStatus.OK
        assert response.body == b"xyz"

    def test_user_agent(self, router: Router):
        """Test /user-agent echoes the header."""
        response = call(router, b"GET /user-agent HTTP/1.1\r\nuser-agent: foobar/1.2.3\r\n\r\n")

        assert response.body == b"foobar/1.2.3"
        assert response.headers["Content-Type"] == "text/plain"

    def test_user_agent_missing(self, router: Router):
        """Test a missing User-Agent gives an empty 200."""
        response = call(router, b"GET /user-agent HTTP/1.1\r\n\r\n")

        assert response.status == HTTPStatus.OK
        assert response.content_length == 0

    def test_files_round_trip(self, router: Router, data_dir: Path):
        """Test POST then GET of the same file."""
        post = call(router, b"POST /files/foo.txt HTTP/1.1\r\nContent-Length: 5\r\n\r\nhello")
        get = call(router, b"GET /files/foo.txt HTTP/1.1\r\n\r\n")

        assert post.status_line == "HTTP/1.1 201 Created"
        assert get.status == HTTPStatus.OK
        assert get.body == b"hello"
        assert get.headers["Content-Type"] == "application/octet-stream"
        assert (data_dir / "foo.txt").read_bytes() == b"hello"

    def test_files_missing(self, router: Router):
        """Test GET of a missing file is a 404 with an empty body."""
        response = call(router, b"GET /files/doesnotexist HTTP/1.1\r\n\r\n")

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.content_length == 0

    def test_files_traversal(self, router: Router, tmp_path: Path):
        """Test /files/../secret does not read outside the data directory."""
        (tmp_path / "secret").write_bytes(b"nope")
        response = call(router, b"GET /files/../secret HTTP/1.1\r\n\r\n")

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.body is None

    @pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH"])
    def test_files_other_methods(self, router: Router, method: str):
        """Test methods other than GET and POST on /files/ are 404."""
        response = call(router, f"{method} /files/foo HTTP/1.1\r\n\r\n".encode())

        assert response.status == HTTPStatus.NOT_FOUND

    def test_unknown_route(self, router: Router):
        """Test unknown paths are 404 Not Found."""
        response = call(router, b"GET /nonsense HTTP/1.1\r\n\r\n")

        assert response.to_bytes().startswith(b"HTTP/1.1 404 Not Found\r\n")

    def test_files_nul_byte(self, router: Router):
        """Test a NUL byte in the file name is a 404."""
        response = call(router, b"GET /files/a\x00b HTTP/1.1\r\n\r\n")

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.content_length == 0
