"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All tunables in one dataclass, filled from CLI flags (__main__.py) or from
the environment (ServerConfig.from_env()).

=============================================================================
ENVIRONMENT VARIABLES
=============================================================================

    TINYHTTP_HOST          Host to bind              (default: localhost)
    TINYHTTP_PORT          Port to listen on         (default: 4221)
    TINYHTTP_WORKERS       Max worker threads        (default: 8)
    TINYHTTP_TIMEOUT       Read timeout, seconds     (default: 30)
    TINYHTTP_IDLE_TIMEOUT  Idle wait, seconds        (default: 5)
    TINYHTTP_DIRECTORY     Data directory            (default: current directory)
    TINYHTTP_LOG_LEVEL     Logging level             (default: INFO)

    TINYHTTP_PORT=8080 TINYHTTP_DIRECTORY=/tmp/data python -m tinyhttp

=============================================================================
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    Development:
        ServerConfig(data_directory="/tmp/data", log_level="DEBUG")

    Containers:
        ServerConfig(host="0.0.0.0", data_directory="/data")
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "localhost"
    port: int = 4221

    backlog: int = 128
    """Maximum number of queued connections before the OS refuses new ones."""

    buffer_size: int = 8192
    """Bytes requested per recv() call."""

    timeout: Optional[float] = 30.0
    """
    Socket read timeout in seconds.
    None = blocking (a silent client holds its worker forever).
    """

    idle_timeout: Optional[float] = 5.0
    """
    Seconds an open connection may sit between requests before it is
    closed, freeing its worker for other clients.
    """

    max_request_size: int = 10 * 1024 * 1024  # 10 MB
    """Largest request (headers + body) a connection will buffer."""

    # ─────────────────────────────────────────────────────────────────────
    # THREAD POOL SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    min_workers: int = 4
    max_workers: int = 8

    queue_size: int = 100
    """Connections waiting for a worker before new ones are turned away."""

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    data_directory: str = field(default_factory=os.getcwd)
    """Root directory for /files/ reads and writes."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    log_format: str = "text"
    """Access log format: 'text' or 'json'."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Create configuration from TINYHTTP_* environment variables."""
        max_workers = int(os.getenv("TINYHTTP_WORKERS", "8"))
        return cls(
            host=os.getenv("TINYHTTP_HOST", "localhost"),
            port=int(os.getenv("TINYHTTP_PORT", "4221")),
            min_workers=min(4, max_workers),
            max_workers=max_workers,
            timeout=float(os.getenv("TINYHTTP_TIMEOUT", "30")),
            idle_timeout=float(os.getenv("TINYHTTP_IDLE_TIMEOUT", "5")),
            data_directory=os.getenv("TINYHTTP_DIRECTORY", os.getcwd()),
            log_level=os.getenv("TINYHTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at server construction so mistakes surface at startup,
        not on the first request.

        Raises:
            ValueError: On the first invalid value found.
        """
        # Port 0 lets the OS pick a free port
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.min_workers < 1:
            raise ValueError("min_workers must be >= 1")

        if self.max_workers < self.min_workers:
            raise ValueError("max_workers must be >= min_workers")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.idle_timeout is not None and self.idle_timeout <= 0:
            raise ValueError("idle_timeout must be > 0")

        if not os.path.isdir(self.data_directory):
            raise ValueError(f"Data directory does not exist: {self.data_directory}")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"log_format must be 'text' or 'json', got {self.log_format!r}")
