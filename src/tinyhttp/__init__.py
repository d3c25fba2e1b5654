"""
=============================================================================
TINYHTTP
=============================================================================

A small HTTP/1.1 server on raw sockets.

    GET  /                    200
    *    /echo/{value}        200, value (gzip when the client accepts it)
    *    /user-agent          200, the client's User-Agent
    GET  /files/{name}        200 with the file, or 404
    POST /files/{name}        201 after storing the body

=============================================================================
LAYOUT
=============================================================================

    config.py       ServerConfig (CLI flags and TINYHTTP_* env vars)
    server.py       HTTPServer: sockets + workers + router
    app.py          The route table
    core/           Sockets, connections, thread pool
    http/           Request parsing, responses, routing, gzip negotiation
    handlers/       Route handlers and the file store
    middleware/     Access logging

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "__version__"]
