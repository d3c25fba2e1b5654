"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tinyhttp import HTTPServer, ServerConfig
from tinyhttp.handlers import FileStore
from tinyhttp.app import create_router


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /user-agent HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"User-Agent: foobar/1.2.3\r\n"
        b"Accept: */*\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a body."""
    body = b"12345"
    return (
        b"POST /files/number HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"Content-Type: application/octet-stream\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
    ) + body


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Empty data directory for the file routes."""
    directory = tmp_path / "data"
    directory.mkdir()
    return directory


@pytest.fixture
def file_store(data_dir: Path) -> FileStore:
    """FileStore rooted at data_dir."""
    return FileStore(data_dir)


@pytest.fixture
def router(file_store: FileStore):
    """The application router over file_store."""
    return create_router(file_store)


@pytest.fixture
def config(data_dir: Path) -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        min_workers=2,
        max_workers=4,
        timeout=5.0,
        data_directory=str(data_dir),
        log_level="WARNING",
    )


class LiveServer:
    """Runs an HTTPServer in a background thread."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread and wait until it listens."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=10.0)

    def connect(self) -> socket.socket:
        """Open a client socket to the server."""
        sock = socket.create_connection(("127.0.0.1", self.port), timeout=5.0)
        return sock


def read_response(sock: socket.socket) -> tuple[bytes, dict, bytes]:
    """
    Read one response from a client socket.

    Returns:
        (status line, headers with lowercase names, body)
    """
    data = b""
    while b"\r\n\r\n" not in data:
        chunk = sock.recv(4096)
        if not chunk:
            raise ConnectionError(f"Connection closed mid-response: {data!r}")
        data += chunk

    head, _, body = data.partition(b"\r\n\r\n")
    status_line, *header_lines = head.decode().split("\r\n")
    headers = {}
    for line in header_lines:
        name, _, value = line.partition(": ")
        headers[name.lower()] = value

    length = int(headers.get("content-length", "0"))
    while len(body) < length:
        chunk = sock.recv(4096)
        if not chunk:
            break
        body += chunk

    return status_line.encode(), headers, body


@pytest.fixture
def live_server(config: ServerConfig) -> Generator[LiveServer, None, None]:
    """A running server on a free port, serving data_dir."""
    srv = LiveServer(HTTPServer(config))
    srv.start()

    yield srv

    srv.stop()


@pytest.fixture
def recv_response():
    """The read_response helper, for tests that talk raw sockets."""
    return read_response
