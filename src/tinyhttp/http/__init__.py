"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

The message model and everything that turns bytes into a response:

    request.py       bytes → HTTPRequest          (parsing)
    headers.py       case-insensitive Headers     (built once at parse time)
    router.py        HTTPRequest → handler        (dispatch)
    negotiation.py   payload → gzip or identity   (Accept-Encoding)
    response.py      HTTPResponse → bytes         (serialization)
    status_codes.py  200/201/404/500 + phrases    (static table)

=============================================================================
"""

from .headers import Headers
from .request import (
    HTTPRequest,
    RequestParser,
    HTTPParseError,
    MalformedRequestError,
    parse_request,
)
from .response import (
    HTTPResponse,
    ResponseBuilder,
    serialize,
    ok,             # 200 OK
    created,        # 201 Created
    not_found,      # 404 Not Found
    internal_error, # 500 Internal Server Error
)
from .negotiation import negotiate_encoding, NegotiatedBody, SUPPORTED_ENCODINGS
from .router import Router, Route, RouteMatch
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "Headers",
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "MalformedRequestError",
    "parse_request",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "serialize",
    "ok",
    "created",
    "not_found",
    "internal_error",

    # Content negotiation
    "negotiate_encoding",
    "NegotiatedBody",
    "SUPPORTED_ENCODINGS",

    # Routing
    "Router",
    "Route",
    "RouteMatch",

    # Status codes
    "HTTPStatus",
]
