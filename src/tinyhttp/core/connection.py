"""
=============================================================================
CONNECTION WRAPPER
=============================================================================

Wraps an accepted client socket with buffered request reads and
all-or-nothing response writes.

=============================================================================
READING A COMPLETE REQUEST
=============================================================================

TCP is a byte stream. One recv() may return half a request, or a request
and the start of the next one. read_request() assembles exactly one:

    1. recv() until the buffer contains \r\n\r\n (end of headers)
    2. look up Content-Length in the header bytes
    3. recv() until that many body bytes follow the separator,
       or the peer closes
    4. return headers + body; keep any surplus for the next call

Without a Content-Length header, everything already received after the
separator is the body. Nothing more is waited for.

        recv #1: b"POST /files/a HTTP/1.1\r\nContent-Le"
        recv #2: b"ngth: 5\r\n\r\nhel"
        recv #3: b"lo"
                           │
                           ▼
        b"POST /files/a HTTP/1.1\r\nContent-Length: 5\r\n\r\nhello"

The request parser then trusts this buffer as-is.

=============================================================================
IDLE CONNECTIONS
=============================================================================

A connection holds a worker thread while it stays open. Between requests
the socket waits only idle_timeout seconds for the next one (shorter than
the read timeout), then the connection is closed quietly so an idle
client gives its worker back.

=============================================================================
"""

import logging
import socket
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, for logging and close()."""
    NEW = "new"                # Accepted, nothing read yet
    READING = "reading"        # Reading request bytes
    PROCESSING = "processing"  # Request parsed, handler running
    WRITING = "writing"        # Sending response bytes
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used in log lines.
        state: Current connection state.
        requests_handled: Requests read so far on this connection.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    requests_handled: int = 0

    buffer_size: int = 8192
    timeout: Optional[float] = 30.0
    idle_timeout: Optional[float] = 5.0
    max_request_size: int = 10 * 1024 * 1024

    # Bytes received but not yet returned by read_request()
    _buffer: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    def read_request(self) -> Optional[bytes]:
        """
        Read one complete HTTP request from the socket.

        Returns:
            The request bytes, or None if the peer closed (or stayed idle
            past idle_timeout) before sending a complete header section.

        Raises:
            TimeoutError: If the socket read times out mid-request.
            ValueError: If the request exceeds max_request_size.
        """
        self.state = ConnectionState.READING

        try:
            if self.requests_handled and not self._buffer:
                if not self._wait_for_next_request():
                    return None

            # Phase 1: headers
            while b"\r\n\r\n" not in self._buffer:
                chunk = self._recv()
                if not chunk:
                    return None
                self._append(chunk)

            header_end = self._buffer.find(b"\r\n\r\n")
            body_start = header_end + 4
            content_length = self._parse_content_length(self._buffer[:header_end])

            # Phase 2: body
            if content_length is None:
                # Undeclared length: the body is whatever already arrived
                request_end = len(self._buffer)
            else:
                while len(self._buffer) - body_start < content_length:
                    chunk = self._recv()
                    if not chunk:
                        break  # Peer closed mid-body; hand over what we have
                    self._append(chunk)
                request_end = body_start + content_length

        except socket.timeout:
            raise TimeoutError("Request read timeout") from None

        request_data = self._buffer[:request_end]
        self._buffer = self._buffer[request_end:]

        self.requests_handled += 1
        return request_data

    def _wait_for_next_request(self) -> bool:
        """
        Wait up to idle_timeout for the first bytes of another request.

        Returns:
            False if the peer closed or stayed silent.
        """
        self.socket.settimeout(self.idle_timeout)
        try:
            chunk = self._recv()
        except socket.timeout:
            logger.debug(f"[{self.id}] Idle for {self.idle_timeout}s, closing")
            return False
        finally:
            self.socket.settimeout(self.timeout)

        if not chunk:
            return False
        self._append(chunk)
        return True

    def _append(self, chunk: bytes) -> None:
        self._buffer += chunk
        if len(self._buffer) > self.max_request_size:
            raise ValueError(f"Request too large: {len(self._buffer)} bytes")

    def _recv(self) -> bytes:
        """socket.recv() that reports a reset connection as a close."""
        try:
            return self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return b""

    def _parse_content_length(self, headers: bytes) -> Optional[int]:
        """
        Find Content-Length in raw header bytes.

        A plain scan, because the request has not been parsed yet.
        Returns None when the header is absent; an invalid value counts as 0.
        """
        for line in headers.decode("utf-8", errors="replace").split("\r\n")[1:]:
            name, _, value = line.partition(":")
            if name.strip().lower() == "content-length":
                try:
                    return max(int(value.strip()), 0)
                except ValueError:
                    return 0
        return None

    def send_response(self, data: bytes) -> bool:
        """
        Send response bytes to the client.

        Uses sendall() so the whole response is written before the next
        request is read.

        Returns:
            True if send succeeded, False if the connection was lost.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    def close(self):
        """Shut down and close the socket. Safe to call twice."""
        if self.state == ConnectionState.CLOSED:
            return

        try:
            # Send FIN so the client sees end-of-stream
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.requests_handled} requests")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
