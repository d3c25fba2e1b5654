"""
=============================================================================
ROUTE TABLE
=============================================================================

The fixed set of routes this server answers, in precedence order:

    ┌────────┬──────────────────┬──────────────────────────────────────────┐
    │ Method │ Path             │ Response                                 │
    ├────────┼──────────────────┼──────────────────────────────────────────┤
    │ any    │ /                │ 200, empty                               │
    │ any    │ /echo/{value}    │ 200, value (gzip if accepted)            │
    │ any    │ /user-agent      │ 200, User-Agent header value             │
    │ GET    │ /files/{name}    │ 200 file bytes, or 404                   │
    │ POST   │ /files/{name}    │ 201, body stored, or 404/500             │
    │ other  │ anything else    │ 404, empty                               │
    └────────┴──────────────────┴──────────────────────────────────────────┘

=============================================================================
"""

from .handlers import FileHandler, FileStore, echo, index, user_agent
from .http.router import Router


def create_router(file_store: FileStore) -> Router:
    """
    Build the router for the server's routes.

    Args:
        file_store: Where /files/ reads and writes.

    Returns:
        Router with every route registered
    """
    router = Router()
    files = FileHandler(file_store)

    router.route("/")(index)
    router.route("/echo/*value")(echo)
    router.route("/user-agent")(user_agent)
    router.get("/files/*filename")(files.get)
    router.post("/files/*filename")(files.post)

    return router
