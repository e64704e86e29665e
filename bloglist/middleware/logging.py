"""
Bloglist Backend: Request Logging Middleware
=============================================

What:  One access-log line per HTTP request on the `bloglist.access` logger.
How:   Times the request and logs method, path, status, duration, request ID
       and client IP. Requests that target one blog (DELETE /api/blogs/{id})
       also carry the blog id, so a delete can be traced to its record
       without parsing the path.
When:  Runs inside RequestIDMiddleware, so the request ID is already set.

Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from bloglist.middleware.request_id import request_id_var

logger = logging.getLogger("bloglist.access")

# Load balancers poll these every few seconds
QUIET_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, everything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes the access log; level follows the response status."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        # The router fills path_params on the shared scope during call_next
        blog_id = request.scope.get("path_params", {}).get("blog_id")
        target = f" blog={blog_id}" if blog_id else ""

        record = {
            "request_id": request_id_var.get(""),
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(duration_ms, 2),
            "client_ip": request.client.host if request.client else "unknown",
            "blog_id": blog_id,
        }
        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms%s [%s] from %s",
            record["method"],
            record["path"],
            record["status"],
            duration_ms,
            target,
            record["request_id"],
            record["client_ip"],
            extra=record,
        )

        return response
