"""
Handlers for the fixed text routes: /, /echo/{value} and /user-agent.
"""

import logging

from ..http.negotiation import negotiate_encoding
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ok


logger = logging.getLogger(__name__)


def index(request: HTTPRequest) -> HTTPResponse:
    """200 OK with an empty body."""
    return ok()


def echo(request: HTTPRequest, value: str) -> HTTPResponse:
    """
    Echo the rest of the path back as the body.

    The value goes through content negotiation, so clients sending
    Accept-Encoding: gzip get a gzip-compressed body.

        GET /echo/abc           →  200, "abc", Content-Type: text/plain
    """
    body, headers = negotiate_encoding(request.accept_encoding, value.encode("utf-8"))
    return ok(body, headers)


def user_agent(request: HTTPRequest) -> HTTPResponse:
    """
    Echo the User-Agent header back as a text/plain body.

    A missing header gives an empty body rather than an error.
    """
    agent = request.user_agent
    if agent is None:
        logger.debug(f"{request} has no User-Agent header")
        agent = ""

    return ok(agent, {"Content-Type": "text/plain"})
