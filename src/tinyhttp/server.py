"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer ──accept──► Connection ──submit──► ThreadPool         │
    │                                                      │               │
    │                                                      ▼               │
    │                              _process_connection (worker thread)     │
    │                                                      │               │
    │        read_request() ─► RequestParser ─► LoggingMiddleware          │
    │                                                      │               │
    │                                                      ▼               │
    │                                     Router ─► handler ─► HTTPResponse│
    │                                                      │               │
    │                                  send_response(response.to_bytes())  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ERROR HANDLING
=============================================================================

    Where it fails                      What the client sees
    ──────────────                      ────────────────────
    malformed request line / headers    connection closed, no response
    read timeout, request too large     connection closed, no response
    handler raises                      500, empty body; connection stays open
    worker queue full                   connection closed, no response

A connection serves requests one after another until the client closes it
or sits idle longer than idle_timeout.

=============================================================================
"""

import logging
from typing import Callable, Optional

from .app import create_router
from .config import ServerConfig
from .core.connection import Connection, ConnectionState
from .core.socket_server import SocketServer
from .core.thread_pool import ThreadPool
from .handlers.files import FileStore
from .http.request import HTTPRequest, RequestParser, HTTPParseError
from .http.response import HTTPResponse, internal_error
from .http.router import Router
from .middleware.base import MiddlewarePipeline
from .middleware.logging import LoggingMiddleware


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    The HTTP server.

        server = HTTPServer(ServerConfig(data_directory="/tmp/data"))
        server.run()  # Blocks until Ctrl+C or shutdown()

    From another thread:

        thread = threading.Thread(target=server.run, daemon=True)
        thread.start()
        server.wait_until_ready()
        host, port = server.address
        ...
        server.shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Defaults serve the current directory.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
            queue_size=self.config.queue_size,
        )
        self._parser = RequestParser()

        self._file_store = FileStore(self.config.data_directory)
        self._router = create_router(self._file_store)

        self._middleware = MiddlewarePipeline()
        self._middleware.add(LoggingMiddleware(log_format=self.config.log_format))

        # Built in run(): middleware wrapped around router.handle
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None

        self._running = False

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self) -> tuple[str, int]:
        """Bound (host, port), once listening."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start serving. Blocks until shutdown() or SIGINT/SIGTERM.

        Raises:
            OSError: If the configured address cannot be bound.
        """
        self._running = True
        self._setup_logging()

        self._handler = self._middleware.wrap(self._router.handle)
        self._thread_pool.start()

        logger.info(
            f"Serving files from {self._file_store.root} "
            f"with {self.config.min_workers}-{self.config.max_workers} workers"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self):
        """Ask a running server to stop. Returns immediately."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server accepts connections. Returns False on timeout."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("tinyhttp").setLevel(level)

    def _shutdown(self):
        logger.info("Shutting down server...")
        self._running = False

        # In-flight connections finish their current request
        self._thread_pool.shutdown(wait=True, timeout=self.config.timeout)

        logger.info("Server stopped")

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Hand an accepted connection to the worker pool."""
        if not self._thread_pool.submit(self._process_connection, args=(conn,)):
            logger.warning(f"[{conn.id}] Worker queue full, dropping connection from {conn.client_ip}")
            conn.close()

    def _process_connection(self, conn: Connection):
        """Serve requests on one connection until the client closes it. Runs on a worker."""
        with conn:
            while self._running:
                try:
                    raw_request = conn.read_request()
                except TimeoutError:
                    logger.debug(f"[{conn.id}] Read timed out")
                    break
                except ValueError as e:
                    logger.warning(f"[{conn.id}] {e}")
                    break

                if raw_request is None:
                    break

                try:
                    request = self._parser.parse(raw_request, conn.address)
                except HTTPParseError as e:
                    logger.warning(f"[{conn.id}] Dropping malformed request from {conn.client_ip}: {e}")
                    break

                conn.state = ConnectionState.PROCESSING
                response = self._dispatch(conn, request)

                if not conn.send_response(response.to_bytes()):
                    break

    def _dispatch(self, conn: Connection, request: HTTPRequest) -> HTTPResponse:
        """Run the request through middleware and router; a raising handler becomes a 500."""
        try:
            return self._handler(request)
        except Exception as e:
            logger.exception(f"[{conn.id}] Handler error on {request}: {e}")
            return internal_error()
