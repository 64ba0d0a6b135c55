"""
StrToFile Backend — Request Logging Middleware
================================================

What:  One access log line per HTTP request: method, path, status, duration,
       request ID and client IP, plus the archive name and size for ZIP
       downloads.
How:   Times the downstream call with perf_counter and picks the log level
       from the status code (5xx ERROR, 4xx WARNING, otherwise INFO).

Request bodies are never logged: they carry user file contents.

Streaming downloads:
    For /api/download/download-zip-stream the duration covers building the
    archive but not sending it, and no size is known (no Content-Length).
"""

import logging
import re
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from strtofile.middleware.request_id import request_id_var

logger = logging.getLogger("strtofile.access")

_ATTACHMENT_NAME = re.compile(r'filename="([^"]+)"')


def _attachment_name(response: Response) -> Optional[str]:
    disposition = response.headers.get("content-disposition")
    if not disposition:
        return None
    match = _ATTACHMENT_NAME.search(disposition)
    return match.group(1) if match else None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log with per-request timing and download details."""

    QUIET_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        status = response.status_code
        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        fields = {
            "request_id": rid,
            "method": request.method,
            "path": request.url.path,
            "status": status,
            "duration_ms": round(elapsed_ms, 2),
            "client_ip": client_ip,
        }
        archive = _attachment_name(response)
        if archive:
            fields["archive"] = archive
            fields["archive_bytes"] = response.headers.get("content-length")

        logger.log(
            level,
            "%s %s %d %.1fms [%s] from %s%s",
            request.method,
            request.url.path,
            status,
            elapsed_ms,
            rid,
            client_ip,
            f" -> {archive}" if archive else "",
            extra=fields,
        )

        return response
