"""
Bookmarks API — Request Logging Middleware
===========================================

What:  One access-log line per HTTP request.
How:   Times the downstream call and logs
       `METHOD /path STATUS DURATIONms [request-id] from IP`.

Level by status class:
    5xx           ERROR
    4xx           WARNING
    1xx/2xx/3xx   INFO

A request whose handler raises is logged as a 500 before the exception
continues to the server error handler. Request bodies are never logged.
"""

import logging
import time
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from bookmarks_api.middleware.request_id import request_id_var

logger = logging.getLogger("bookmarks_api.access")

ACCESS_LOG_FORMAT = "%s %s %d %.1fms [%s] from %s"

# Probes hit these every few seconds
QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access logging with request ID correlation."""

    def __init__(self, app, quiet_paths: Optional[Iterable[str]] = None, **kwargs):
        super().__init__(app, **kwargs)
        self.quiet_paths = frozenset(quiet_paths) if quiet_paths is not None else QUIET_PATHS

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.quiet_paths:
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._log(request, 500, started)
            raise

        self._log(request, response.status_code, started)
        return response

    @staticmethod
    def _log(request: Request, status: int, started: float) -> None:
        duration_ms = (time.perf_counter() - started) * 1000
        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"

        logger.log(
            level_for_status(status),
            ACCESS_LOG_FORMAT,
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
