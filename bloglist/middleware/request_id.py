"""
Bloglist Backend: Request ID Middleware
========================================

What:  Assigns a short unique ID to each incoming request and returns it
       in the X-Request-ID response header.
How:   Reuses a client-supplied X-Request-ID when it is printable and at
       most MAX_REQUEST_ID_LENGTH characters, otherwise generates a UUID
       prefix. The ID lives in a ContextVar for loggers and error handlers.
When:  Every request.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64


def accept_request_id(supplied: Optional[str]) -> str:
    """
    Return the caller's request id if it is safe to echo and log,
    else a fresh 8-character id.
    """
    candidate = (supplied or "").strip()
    if candidate and len(candidate) <= MAX_REQUEST_ID_LENGTH and candidate.isprintable():
        return candidate
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags each request and its response with one ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accept_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
