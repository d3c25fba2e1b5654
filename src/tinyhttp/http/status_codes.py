"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server emits, with their reason phrases.

=============================================================================
A DELIBERATELY SMALL TABLE
=============================================================================

The server answers every request with one of four codes:

    ┌──────┬────────────────────────┬──────────────────────────────────────┐
    │ Code │ Phrase                 │ Emitted when                         │
    ├──────┼────────────────────────┼──────────────────────────────────────┤
    │ 200  │ OK                     │ /, /echo/, /user-agent, file read    │
    │ 201  │ Created                │ file written by POST /files/{name}   │
    │ 404  │ Not Found              │ unknown route, missing file          │
    │ 500  │ Internal Server Error  │ file write failed, handler crashed   │
    └──────┴────────────────────────┴──────────────────────────────────────┘

Any other code is undefined here. HTTPStatus(418) raises ValueError
instead of producing a status line with a made-up phrase. Adding a code
means adding both the enum member and its phrase below.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    This enum extends IntEnum, so status codes can be used as integers:

        >>> HTTPStatus.CREATED
        <HTTPStatus.CREATED: 201>
        >>> HTTPStatus.CREATED == 201
        True
        >>> HTTPStatus.CREATED.phrase
        'Created'
    """

    OK = 200                        # Request served
    CREATED = 201                   # File written by POST
    NOT_FOUND = 404                 # No route, no file, or wrong method
    INTERNAL_SERVER_ERROR = 500     # Write failure or handler fault

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 201 Created
                     ─── ───────
                      │     │
                      │     └── Reason phrase
                      └──────── Status code
        """
        return _STATUS_PHRASES[self]

    @property
    def is_success(self) -> bool:
        """Check if this is a 2xx (success) status code."""
        return 200 <= self < 300

    @property
    def is_error(self) -> bool:
        """Check if this is an error status code (4xx or 5xx)."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
