"""
=============================================================================
REQUEST HANDLERS
=============================================================================

A handler takes an HTTPRequest (plus any params the router captured) and
returns an HTTPResponse:

    def echo(request, value):
        return ok(value)

    basic.py    /, /echo/{value}, /user-agent
    files.py    /files/{filename} with its FileStore collaborator

=============================================================================
"""

from .basic import index, echo, user_agent
from .files import FileStore, FileHandler, FileStoreError, PathOutsideRootError

__all__ = [
    "index",
    "echo",
    "user_agent",
    "FileStore",
    "FileHandler",
    "FileStoreError",
    "PathOutsideRootError",
]
