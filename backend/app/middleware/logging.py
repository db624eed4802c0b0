"""
MindScribe Backend — Request Logging Middleware
=================================================

What:  One access-log line per request: method, path, status, duration,
       request size, request ID and client IP.
How:   Level follows the status: 5xx → ERROR, 4xx → WARNING, else INFO.
       /health is skipped. Request bodies (audio, transcripts, notes) are
       never logged, only their declared Content-Length.

Example:
    2024-01-15T12:00:00 [INFO] mindscribe.access: POST /api/transcribe 200 (2.4MB in) 3120.5ms [a1b2c3d4] from 10.0.0.7
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("mindscribe.access")

UNLOGGED_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def _format_size(content_length: str) -> str:
    try:
        size = int(content_length)
    except ValueError:
        return "?"
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):.1f}MB"
    if size >= 1024:
        return f"{size / 1024:.1f}KB"
    return f"{size}B"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs the outcome and latency of each API request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in UNLOGGED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        rid = getattr(request.state, "request_id", "")
        client_ip = request.client.host if request.client else "unknown"
        content_length = request.headers.get("content-length")
        size_note = f" ({_format_size(content_length)} in)" if content_length else ""

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d%s %.1fms [%s] from %s",
            request.method,
            request.url.path,
            response.status_code,
            size_note,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
