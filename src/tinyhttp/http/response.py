"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds HTTP/1.1 responses and serializes them to wire bytes.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  HTTP/1.1 200 OK\r\n                   ← Status line                │
    │  Content-Length: 23\r\n                ← Always first, always       │
    │                                          computed from the body     │
    │  Content-Type: text/plain\r\n          ← Caller headers, in the     │
    │  Content-Encoding: gzip\r\n              order they were added      │
    │  \r\n                                  ← Blank line                 │
    │  <23 raw body bytes>                   ← Binary-safe body           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
THE CONTENT-LENGTH INVARIANT
=============================================================================

Content-Length is derived from len(body) at serialization time (0 when the
body is absent). A Content-Length supplied by the caller, in any casing,
is dropped. The header on the wire always equals the number of body bytes
that follow it, including for gzip-compressed bodies.

Nothing else is added automatically: no Date, Server or Connection header.

=============================================================================
THE BUILDER PATTERN
=============================================================================

HTTPResponse is frozen. Handlers assemble one with ResponseBuilder:

    response = (ResponseBuilder()
        .status(HTTPStatus.OK)
        .content_type("application/octet-stream")
        .body(file_bytes)
        .build())

Or, for the common cases, with the one-liners at the bottom of this module:

    return ok()
    return created()
    return not_found()

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from .status_codes import HTTPStatus


HTTP_VERSION = "HTTP/1.1"
CONTENT_LENGTH = "Content-Length"


@dataclass(frozen=True)
class HTTPResponse:
    """
    An HTTP response to be sent to the client.

    Constructed by a handler, serialized exactly once, then discarded.

        Handler returns          to_bytes()              Socket sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes
    """

    status: HTTPStatus = HTTPStatus.OK
    body: Optional[bytes] = None
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def status_message(self) -> str:
        """Reason phrase from the static status table."""
        return self.status.phrase

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 201 Created"
        """
        return f"{HTTP_VERSION} {int(self.status)} {self.status_message}"

    @property
    def content_length(self) -> int:
        """Byte length of the body (0 when absent)."""
        return len(self.body) if self.body else 0

    def header_items(self) -> list[tuple[str, str]]:
        """
        The headers in wire order.

        Content-Length first, then caller headers in insertion order. Any
        caller Content-Length is skipped.
        """
        items = [(CONTENT_LENGTH, str(self.content_length))]
        for name, value in self.headers.items():
            if name.lower() == CONTENT_LENGTH.lower():
                continue
            items.append((name, str(value)))
        return items

    def to_bytes(self) -> bytes:
        """
        Serialize the response to bytes for sending over socket.

            HTTP/1.1 200 OK\r\n
            Content-Length: 3\r\n
            Content-Type: text/plain\r\n
            \r\n
            abc

        Returns:
            Complete HTTP response as bytes ready for socket.sendall()
        """
        lines = [self.status_line]
        for name, value in self.header_items():
            lines.append(f"{name}: {value}")

        # Empty line separates headers from body
        lines.append("")

        head = "\r\n".join(lines).encode("utf-8") + b"\r\n"

        # Body is concatenated as bytes, never decoded
        return head + (self.body or b"")


def serialize(response: HTTPResponse) -> bytes:
    """Serialize a response to wire bytes. Same as response.to_bytes()."""
    return response.to_bytes()


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .header("Content-Type", "text/plain")
            .body(b"hello")
            .build())

    Every setter returns self for chaining. build() produces a frozen
    HTTPResponse holding its own copy of the headers, so one builder can
    build several responses without them sharing state.
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: Optional[bytes] = None

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        """Set the response status."""
        self._status = HTTPStatus(status)
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """
        Set a single header.

        Setting the same name twice replaces the value but keeps the
        original position.
        """
        self._headers[name] = value
        return self

    def headers(self, headers: Dict[str, str]) -> "ResponseBuilder":
        """Set several headers at once, preserving their order."""
        for name, value in headers.items():
            self.header(name, value)
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        """Set the Content-Type header."""
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes, None]) -> "ResponseBuilder":
        """
        Set the response body.

        Strings are encoded as UTF-8. Bytes are kept as-is, so binary
        payloads (gzip, file contents) pass through untouched.
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._body = body
        return self

    def text(self, text: str) -> "ResponseBuilder":
        """Set a text/plain body."""
        return self.content_type("text/plain").body(text)

    def build(self) -> HTTPResponse:
        """Build the frozen HTTPResponse."""
        return HTTPResponse(
            status=self._status,
            body=self._body,
            headers=dict(self._headers),
        )

    def to_bytes(self) -> bytes:
        """Build and serialize the response in one step."""
        return self.build().to_bytes()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# One-liners for the responses the routes produce.
#
#     return ok(b"abc", {"Content-Type": "text/plain"})
#     return created()
#     return not_found()
#
# =============================================================================

def ok(
    body: Union[str, bytes, None] = None,
    headers: Optional[Dict[str, str]] = None,
) -> HTTPResponse:
    """Create a 200 OK response."""
    return (ResponseBuilder()
        .status(HTTPStatus.OK)
        .headers(headers or {})
        .body(body)
        .build())


def created() -> HTTPResponse:
    """Create a 201 Created response with an empty body."""
    return ResponseBuilder().status(HTTPStatus.CREATED).build()


def not_found() -> HTTPResponse:
    """Create a 404 Not Found response with an empty body."""
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).build()


def internal_error() -> HTTPResponse:
    """
    Create a 500 Internal Server Error response.

    The body is empty; details go to the log, not to the client.
    """
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).build()
