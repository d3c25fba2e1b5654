"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    # Serve the current directory on localhost:4221
    python -m tinyhttp

    # Serve files from /tmp/data
    python -m tinyhttp --directory /tmp/data

    # Listen on all interfaces (for containers)
    python -m tinyhttp --host 0.0.0.0 --directory /data

Installed with pip, the same entry point is available as `tinyhttp`.

=============================================================================
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from . import __version__
from .config import ServerConfig
from .server import HTTPServer


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tinyhttp",
        description="Minimal HTTP/1.1 server with echo, user-agent and file routes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m tinyhttp                            # Serve the current directory
  python -m tinyhttp --directory /tmp/data      # Serve /tmp/data under /files/
  python -m tinyhttp --port 8080 --workers 8    # Custom port, more workers
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--directory",
        default=None,
        help="Directory that /files/ reads from and writes to (default: current directory)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default="localhost",
        help="Host to bind to (default: localhost, use 0.0.0.0 for containers)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=4221,
        help="Port to listen on (default: 4221)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # PERFORMANCE / LOGGING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=4,
        help="Number of worker threads (default: 4, max will be 2x this)"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"tinyhttp {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Translate parsed CLI arguments into a ServerConfig."""
    config = ServerConfig(
        host=args.host,
        port=args.port,
        min_workers=args.workers,
        max_workers=args.workers * 2,
        log_level=args.log_level,
    )
    if args.directory is not None:
        config.data_directory = args.directory
    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = config_from_args(args)

    try:
        server = HTTPServer(config)
    except ValueError as e:
        print(f"tinyhttp: {e}", file=sys.stderr)
        return 2

    try:
        server.run()
    except OSError as e:
        logger.error(f"Server failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
