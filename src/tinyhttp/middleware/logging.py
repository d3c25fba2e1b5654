"""
=============================================================================
ACCESS LOGGING MIDDLEWARE
=============================================================================

Writes one line per request to the "tinyhttp.access" logger.

    127.0.0.1 - - [18/Oct/2026:22:10:04 +0000] "GET /echo/abc" 200 3 0.41ms

With log_format="json" the same fields are emitted as a JSON object, for
log shippers that expect structured input.

Content length is the length of the body actually sent, so a gzip-encoded
echo logs its compressed size.

=============================================================================
"""

import time
import json
import logging
from dataclasses import dataclass, asdict

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("tinyhttp.access")


@dataclass
class RequestLog:
    """Structured log entry for a request."""

    method: str
    path: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        """Format in the style of the Apache common log."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

    Should be added first so its timing covers the whole chain.

        pipeline.add(LoggingMiddleware())                    # text
        pipeline.add(LoggingMiddleware(log_format="json"))   # JSON
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        """
        Args:
            log_format: "text" or "json".
            log_level: Level the access lines are logged at.
        """
        if log_format not in ("text", "json"):
            raise ValueError(f"Unknown log format: {log_format}")

        self.log_format = log_format
        self.log_level = log_level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        start_time = time.time()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000

        entry = RequestLog(
            method=request.method,
            path=request.path,
            client_ip=request.client_address[0] or "-",
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=response.content_length,
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())

        return response
