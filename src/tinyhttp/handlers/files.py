"""
=============================================================================
FILE STORE AND /files/ HANDLER
=============================================================================

Reads and writes files under the data directory given with --directory.

=============================================================================
FLOW
=============================================================================

    GET /files/notes.txt                    POST /files/notes.txt
        │                                       │   body: b"hello"
        ▼                                       ▼
    FileStore.resolve("notes.txt")          FileStore.resolve("notes.txt")
        │  outside root? → 404                  │  outside root? → 404
        ▼                                       ▼
    FileStore.read(...)                     FileStore.write(..., b"hello")
        │  missing?  → 404                      │  OSError? → 500
        │  OSError?  → 404                      ▼
        ▼                                   201 Created
    200 OK
    Content-Type: application/octet-stream
    <file bytes>

=============================================================================
PATH TRAVERSAL
=============================================================================

The filename comes straight from the URL, so "/files/../../etc/passwd"
would name a file outside the data directory. resolve() follows ".." and
symlinks, then checks the result is still inside the root:

    root:       /srv/data
    name:       ../../etc/passwd
    resolved:   /etc/passwd          ← not under /srv/data → rejected

Rejected names are answered with 404, the same as a missing file.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Union

from ..http.request import HTTPRequest
from ..http.response import (
    HTTPResponse, ResponseBuilder, HTTPStatus,
    created, not_found, internal_error,
)


logger = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"


class FileStoreError(Exception):
    """Base class for file store failures that are not plain OSErrors."""


class PathOutsideRootError(FileStoreError):
    """The requested name resolves to a path outside the data directory."""

    def __init__(self, name: str):
        super().__init__(f"Path escapes data directory: {name}")
        self.name = name


class FileStore:
    """
    Binary file access rooted at a data directory.

    All names are relative to the root. Reads and writes are whole-file
    and binary.

    Usage:
        store = FileStore("/srv/data")
        store.write("notes.txt", b"hello")
        store.read("notes.txt")        # b"hello"
        store.exists("missing.txt")    # False
    """

    def __init__(self, root: Union[str, Path]):
        # Resolve once, so the containment check compares absolute paths
        self.root = Path(root).resolve()

    def resolve(self, name: str) -> Path:
        """
        Map a name to an absolute path inside the root.

        Raises:
            PathOutsideRootError: If the name escapes the root or is not
                a usable path (e.g. contains a NUL byte).
        """
        try:
            path = (self.root / name).resolve()
        except ValueError:
            raise PathOutsideRootError(name) from None
        try:
            path.relative_to(self.root)
        except ValueError:
            raise PathOutsideRootError(name) from None
        return path

    def exists(self, name: str) -> bool:
        """Check whether name is an existing regular file under the root."""
        try:
            return self.resolve(name).is_file()
        except FileStoreError:
            return False

    def read(self, name: str) -> bytes:
        """
        Read a whole file.

        Raises:
            PathOutsideRootError: If the name escapes the root.
            FileNotFoundError: If there is no regular file with that name.
            OSError: On permission or I/O failures.
        """
        path = self.resolve(name)
        if not path.is_file():
            raise FileNotFoundError(f"No such file: {name}")
        return path.read_bytes()

    def write(self, name: str, data: bytes) -> None:
        """
        Write a whole file, creating it or replacing its contents.

        Parent directories are not created.

        Raises:
            PathOutsideRootError: If the name escapes the root.
            OSError: On permission or I/O failures.
        """
        self.resolve(name).write_bytes(data)


class FileHandler:
    """
    Handler for GET and POST on /files/{filename}.

    Usage:
        files = FileHandler(FileStore(config.data_directory))
        router.get("/files/*filename")(files.get)
        router.post("/files/*filename")(files.post)
    """

    def __init__(self, store: FileStore):
        self.store = store

    def get(self, request: HTTPRequest, filename: str) -> HTTPResponse:
        """Serve a file's bytes, or 404 when it cannot be read."""
        try:
            content = self.store.read(filename)
        except PathOutsideRootError as e:
            logger.warning(f"Path traversal attempt: {e.name!r}")
            return not_found()
        except FileNotFoundError:
            return not_found()
        except OSError as e:
            logger.error(f"Error reading file {filename!r}: {e}")
            return not_found()

        return (ResponseBuilder()
            .status(HTTPStatus.OK)
            .content_type(OCTET_STREAM)
            .body(content)
            .build())

    def post(self, request: HTTPRequest, filename: str) -> HTTPResponse:
        """Store the request body, answering 201 on success."""
        try:
            self.store.write(filename, request.body)
        except PathOutsideRootError as e:
            logger.warning(f"Path traversal attempt: {e.name!r}")
            return not_found()
        except OSError as e:
            logger.error(f"Error writing file {filename!r}: {e}")
            return internal_error()

        logger.debug(f"Wrote {len(request.body)} bytes to {filename!r}")
        return created()
