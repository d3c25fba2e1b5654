"""
Integration tests: a real HTTPServer on a free port, spoken to over raw sockets.
"""

import gzip
import socket
import time
from pathlib import Path

import pytest


def exchange(live_server, recv_response, raw: bytes):
    """Send one request on a fresh connection and read the response."""
    with live_server.connect() as sock:
        sock.sendall(raw)
        return recv_response(sock)


class TestRoutesOverTCP:
    """End-to-end tests for each route."""

    def test_index(self, live_server, recv_response):
        status, headers, body = exchange(
            live_server, recv_response, b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n"
        )

        assert status == b"HTTP/1.1 200 OK"
        assert headers["content-length"] == "0"
        assert body == b""

    def test_echo(self, live_server, recv_response):
        """Test /echo/abc round trip."""
        status, headers, body = exchange(
            live_server, recv_response, b"GET /echo/abc HTTP/1.1\r\n\r\n"
        )

        assert status == b"HTTP/1.1 200 OK"
        assert headers["content-type"] == "text/plain"
        assert headers["content-length"] == "3"
        assert body == b"abc"

    def test_echo_gzip(self, live_server, recv_response):
        """Test gzip negotiation over the wire."""
        _, headers, body = exchange(
            live_server, recv_response,
            b"GET /echo/abc HTTP/1.1\r\nAccept-Encoding: gzip\r\n\r\n",
        )

        assert headers["content-encoding"] == "gzip"
        assert int(headers["content-length"]) == len(body)
        assert gzip.decompress(body) == b"abc"

    def test_user_agent(self, live_server, recv_response):
        _, _, body = exchange(
            live_server, recv_response,
            b"GET /user-agent HTTP/1.1\r\nUser-Agent: foobar/1.2.3\r\n\r\n",
        )

        assert body == b"foobar/1.2.3"

    def test_files_round_trip(self, live_server, recv_response, data_dir: Path):
        """Test POST then GET /files/foo.txt."""
        status, _, _ = exchange(
            live_server, recv_response,
            b"POST /files/foo.txt HTTP/1.1\r\nContent-Length: 5\r\n\r\nhello",
        )
        assert status == b"HTTP/1.1 201 Created"
        assert (data_dir / "foo.txt").read_bytes() == b"hello"

        status, headers, body = exchange(
            live_server, recv_response, b"GET /files/foo.txt HTTP/1.1\r\n\r\n"
        )
        assert status == b"HTTP/1.1 200 OK"
        assert headers["content-type"] == "application/octet-stream"
        assert body == b"hello"

    def test_missing_file(self, live_server, recv_response):
        status, headers, body = exchange(
            live_server, recv_response, b"GET /files/doesnotexist HTTP/1.1\r\n\r\n"
        )

        assert status == b"HTTP/1.1 404 Not Found"
        assert body == b""

    def test_traversal(self, live_server, recv_response, tmp_path: Path):
        """Test files outside the data directory are not served."""
        (tmp_path / "secret").write_bytes(b"top secret")
        status, _, body = exchange(
            live_server, recv_response, b"GET /files/../secret HTTP/1.1\r\n\r\n"
        )

        assert status == b"HTTP/1.1 404 Not Found"
        assert body == b""

    def test_unknown_route(self, live_server, recv_response):
        status, _, _ = exchange(live_server, recv_response, b"GET /nonsense HTTP/1.1\r\n\r\n")

        assert status == b"HTTP/1.1 404 Not Found"


class TestConnectionHandling:
    """Tests for framing and connection behavior."""

    def test_split_request(self, live_server, recv_response):
        """Test a request split across two TCP writes is still answered."""
        with live_server.connect() as sock:
            sock.sendall(b"POST /files/split HTTP/1.1\r\nContent-Len")
            time.sleep(0.1)
            sock.sendall(b"gth: 6\r\n\r\nsplit!")
            status, _, _ = recv_response(sock)

        assert status == b"HTTP/1.1 201 Created"

        _, _, body = exchange(live_server, recv_response, b"GET /files/split HTTP/1.1\r\n\r\n")
        assert body == b"split!"

    def test_post_without_content_length(self, live_server, recv_response, data_dir: Path):
        """Test a body sent without Content-Length is still stored."""
        status, _, _ = exchange(
            live_server, recv_response, b"POST /files/nocl.txt HTTP/1.1\r\n\r\nhello"
        )

        assert status == b"HTTP/1.1 201 Created"
        assert (data_dir / "nocl.txt").read_bytes() == b"hello"

    def test_sequential_requests_on_one_connection(self, live_server, recv_response):
        """Test one connection serves several requests in order."""
        with live_server.connect() as sock:
            for value in (b"one", b"two", b"three"):
                sock.sendall(b"GET /echo/" + value + b" HTTP/1.1\r\n\r\n")
                _, _, body = recv_response(sock)
                assert body == value

    def test_handler_error_keeps_connection(self, live_server, recv_response):
        """Test a raising handler answers an empty 500 and the connection stays usable."""
        @live_server.server.router.get("/boom")
        def boom(request):
            raise RuntimeError("handler failed")

        with live_server.connect() as sock:
            sock.sendall(b"GET /boom HTTP/1.1\r\n\r\n")
            status, headers, body = recv_response(sock)

            assert status == b"HTTP/1.1 500 Internal Server Error"
            assert headers["content-length"] == "0"
            assert body == b""

            sock.sendall(b"GET /echo/ok HTTP/1.1\r\n\r\n")
            status, _, body = recv_response(sock)

        assert status == b"HTTP/1.1 200 OK"
        assert body == b"ok"

    def test_malformed_request_closes_connection(self, live_server):
        """Test a malformed status line gets no response, just a close."""
        with live_server.connect() as sock:
            sock.sendall(b"GARBAGE\r\n\r\n")

            assert sock.recv(1024) == b""

    def test_concurrent_clients(self, live_server, recv_response):
        """Test an idle open connection does not block another client."""
        with live_server.connect() as idle:
            idle.sendall(b"GET /echo/")  # Incomplete, holds a worker
            status, _, body = exchange(
                live_server, recv_response, b"GET /echo/other HTTP/1.1\r\n\r\n"
            )

        assert status == b"HTTP/1.1 200 OK"
        assert body == b"other"


class TestLifecycle:
    """Tests for server start and stop."""

    def test_shutdown_releases_port(self, live_server):
        """Test a stopped server no longer accepts connections."""
        port = live_server.port
        live_server.stop()

        assert not live_server.server.is_running
        with pytest.raises(OSError):
            socket.create_connection(("127.0.0.1", port), timeout=1.0)
