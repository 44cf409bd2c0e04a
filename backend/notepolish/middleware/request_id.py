"""
NotePolish Backend - Request ID Middleware
============================================

What:  Tags every request with a short correlation id.
How:   Reuses an inbound `X-Request-ID` header when the client sends one,
       otherwise mints an 8-character id. The id is published through a
       ContextVar (for loggers and exception handlers), through
       `request.state.request_id` (for route handlers) and back to the client
       in the `X-Request-ID` response header.

Error bodies rendered in main.py carry the same id as `request_id`, so a
failed beautify or summarize call can be matched to its attempt logs.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local; concurrent requests share a thread.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns (or propagates) the per-request correlation id."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
