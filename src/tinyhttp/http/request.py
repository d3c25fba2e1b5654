"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Parses one raw HTTP/1.1 request buffer into an immutable HTTPRequest.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ STATUS LINE ──────────────────────────────────────────────────┐ │
    │  │    POST /files/notes.txt HTTP/1.1\r\n                           │ │
    │  │    ─┬── ────────┬─────── ────┬───                               │ │
    │  │   Method       Path       Version                               │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS ──────────────────────────────────────────────────────┐ │
    │  │    Host: localhost:4221\r\n                                     │ │
    │  │    User-Agent: curl/8.4.0\r\n                                   │ │
    │  │    Content-Length: 5\r\n                                        │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BLANK LINE ───────────────────────────────────────────────────┐ │
    │  │    \r\n                     ← separator (\r\n\r\n overall)      │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY ─────────────────────────────────────────────────────────┐ │
    │  │    hello                    ← every byte after the separator    │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
THE SINGLE-BUFFER CONTRACT
=============================================================================

The parser never reads Content-Length to decide where the body ends. The
body is simply everything after the first \r\n\r\n in the buffer it is
given. Assembling a complete buffer (waiting for the separator and for
the declared body bytes) is the job of core.connection.Connection.

    socket ──recv──► Connection.read_request() ──bytes──► RequestParser
                     (buffers until complete)             (trusts buffer)

=============================================================================
PARSING POLICY
=============================================================================

    Situation                          Result
    ─────────────────────────────────  ──────────────────────────────────
    No \r\n\r\n in buffer              MalformedRequestError
    Status line not exactly 3 fields   MalformedRequestError
    Header line without ": "           Line ignored
    Repeated header name               Values joined with ", "
    No body after separator            body == b""

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional

from .headers import Headers


class HTTPParseError(Exception):
    """
    Raised when an HTTP request cannot be parsed.

    Carries the status code that would describe the failure. The server
    does not answer malformed requests (it drops the connection), but the
    code keeps log lines meaningful.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class MalformedRequestError(HTTPParseError):
    """The status line or header section does not have the expected shape."""


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed HTTP request.

    Frozen: built once from a single raw buffer, never mutated afterwards.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:         Token as received (GET, POST, ...)
        path:           Raw request target, e.g. "/echo/abc". No query
                        string handling: "/echo/a?b" keeps the "?b".
        version:        Protocol version string ("HTTP/1.1")
        headers:        Headers mapping, case-insensitive lookups
        body:           Bytes after the first \r\n\r\n (may be empty)
        client_address: (ip, port) of the peer, for logging
        raw:            The buffer this request was parsed from

    =========================================================================
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    client_address: tuple[str, int] = ("", 0)
    raw: bytes = field(default=b"", repr=False)

    @property
    def user_agent(self) -> Optional[str]:
        """
        Get the User-Agent header value.

        Returns None when the client did not send one, so callers can tell
        an absent header from an empty one.
        """
        return self.headers.get("User-Agent")

    @property
    def accept_encoding(self) -> Optional[str]:
        """Get the Accept-Encoding header value, or None if absent."""
        return self.headers.get("Accept-Encoding")

    @property
    def content_length(self) -> int:
        """
        Get the Content-Length header value as integer.

        Returns 0 if the header is missing or invalid. Informational only:
        the body is not truncated to this length.
        """
        try:
            return int(self.headers.get("Content-Length", 0))
        except ValueError:
            return 0

    def get_header(self, name: str, default: str = "") -> str:
        """
        Get a header value (case-insensitive lookup).

        Example:
            request.get_header("accept-encoding")
            request.get_header("X-Missing", "fallback")
        """
        return self.headers.get(name, default)

    def __str__(self) -> str:
        return f"<HTTPRequest {self.method} {self.path}>"


class RequestParser:
    """
    Parses raw HTTP request bytes into HTTPRequest objects.

        Raw Request Bytes
              │
              ▼
        1. Find Header/Body Separator (\r\n\r\n)
              │  Not found? → MalformedRequestError
              ▼
        2. Parse Status Line
              │  METHOD SP PATH SP VERSION
              │  Not 3 fields? → MalformedRequestError
              ▼
        3. Parse Headers
              │  "Name: Value" pairs, built once into Headers
              ▼
        4. Body = everything after the separator
              │
              ▼
        HTTPRequest (frozen dataclass)
    """

    LINE_TERMINATOR = b"\r\n"
    HEADER_TERMINATOR = b"\r\n\r\n"
    HEADER_SEPARATOR = ": "

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse raw HTTP request data into an HTTPRequest object.

        Args:
            data: One complete request buffer.
            client_address: Client's (ip, port) tuple for logging.

        Returns:
            Parsed HTTPRequest object.

        Raises:
            MalformedRequestError: If the request is malformed.
        """
        # =====================================================================
        # STEP 1: Split headers and body at the first \r\n\r\n
        # =====================================================================
        header_end = data.find(self.HEADER_TERMINATOR)
        if header_end == -1:
            raise MalformedRequestError("Incomplete request: no header terminator")

        # Header section is text; the body stays binary
        header_section = data[:header_end].decode("utf-8", errors="replace")
        body = data[header_end + len(self.HEADER_TERMINATOR):]

        lines = header_section.split(self.LINE_TERMINATOR.decode())

        # =====================================================================
        # STEP 2: Status line
        # =====================================================================
        method, path, version = self._parse_status_line(lines[0])

        # =====================================================================
        # STEP 3: Header lines
        # =====================================================================
        headers = self._parse_headers(lines[1:])

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            body=body,
            client_address=client_address,
            raw=data,
        )

    def _parse_status_line(self, line: str) -> tuple[str, str, str]:
        """
        Parse the request status line.

            "GET /echo/abc HTTP/1.1"  →  ("GET", "/echo/abc", "HTTP/1.1")

        Split on single spaces; exactly three non-empty fields are required.
        "GET  /x HTTP/1.1" (double space) yields an empty field and fails.

        Raises:
            MalformedRequestError: If the line does not have that shape.
        """
        parts = line.split(" ")
        if len(parts) != 3 or not all(parts):
            raise MalformedRequestError(f"Invalid status line: {line!r}")

        method, path, version = parts
        return method, path, version

    def _parse_headers(self, lines: list[str]) -> Headers:
        """
        Build the header mapping from header lines.

        Each line splits on the first ": " into name and value. Lines
        without the separator are skipped (lenient parsing).
        """
        fields = []

        for line in lines:
            if not line:
                continue

            name, separator, value = line.partition(self.HEADER_SEPARATOR)
            if not separator or not name:
                continue  # Skip malformed header lines

            fields.append((name, value))

        return Headers(fields)


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

_default_parser = RequestParser()


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
) -> HTTPRequest:
    """
    Parse an HTTP request in one call.

    Args:
        data: Raw HTTP request bytes.
        client_address: Client's (ip, port) tuple.

    Returns:
        Parsed HTTPRequest object.

    Raises:
        MalformedRequestError: If the request is malformed.
    """
    return _default_parser.parse(data, client_address)
