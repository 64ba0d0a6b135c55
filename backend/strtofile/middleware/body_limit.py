"""
StrToFile Backend — Request Body Size Limit Middleware
========================================================

What:  Rejects requests whose declared body is larger than
       settings.max_request_body_size (100MB by default).
How:   Checks the Content-Length header before the body is read and answers
       413 with the standard error JSON shape. Requests without a
       Content-Length (chunked uploads) pass through.
"""

import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from strtofile.config import settings
from strtofile.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Content-Length based request size guard."""

    def __init__(self, app, max_body_size: Optional[int] = None, **kwargs):
        super().__init__(app, **kwargs)
        self.max_body_size = max_body_size or settings.max_request_body_size

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        declared = request.headers.get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > self.max_body_size:
            max_mb = self.max_body_size / (1024 * 1024)
            logger.warning(
                "Request body too large: %s bytes (limit %d) on %s",
                declared,
                self.max_body_size,
                request.url.path,
            )
            return JSONResponse(
                status_code=413,
                content={
                    "error": "payload_too_large",
                    "message": f"Request body exceeds the maximum of {max_mb:.0f}MB.",
                    "details": {"max_bytes": self.max_body_size, "content_length": int(declared)},
                    "request_id": request_id_var.get(""),
                },
            )

        return await call_next(request)
