"""
NotePolish Backend - Rate Limiting Middleware
===============================================

What:  Per-IP sliding window limiter in front of every route.
How:   Each client IP keeps a deque of request timestamps. Timestamps older
       than the window are dropped on arrival; a full deque means 429 with a
       `Retry-After` header pointing at the moment the oldest entry expires.

The completion provider's free tier is the scarce resource here; beautify and
summarize each cost at least one upstream call, so limiting at the edge keeps
one client from starving the rest.

State is in-process only. Several uvicorn workers each keep their own window.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from notepolish.config import settings
from notepolish.exceptions import RateLimitExceededError
from notepolish.middleware.request_id import REQUEST_ID_HEADER, new_request_id

logger = logging.getLogger(__name__)

EXCLUDED_PATHS = frozenset({"/", "/health", "/docs", "/openapi.json", "/redoc"})

# Sweep idle IPs every N recorded requests.
_SWEEP_EVERY = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Sliding window limiter keyed by client IP.

    `max_requests` / `window_seconds` default to RATE_LIMIT_REQUESTS /
    RATE_LIMIT_WINDOW; `clock` is injectable so tests can move time.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(app)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._recorded = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = self._clock()
        hits = self._hits[client_ip]
        while hits and hits[0] <= now - self.window_seconds:
            hits.popleft()

        if len(hits) >= self.max_requests:
            retry_after = int(hits[0] + self.window_seconds - now) + 1
            logger.warning(
                "Rate limit exceeded for %s: %d requests in %ds",
                client_ip, len(hits), self.window_seconds,
            )
            # Runs outside RequestIDMiddleware, so the id is resolved here.
            rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": exc.message,
                    "details": exc.context,
                    "request_id": rid,
                },
                headers={"Retry-After": str(retry_after), REQUEST_ID_HEADER: rid},
            )

        hits.append(now)
        self._recorded += 1
        if self._recorded % _SWEEP_EVERY == 0:
            self._sweep(now)

        return await call_next(request)

    def _sweep(self, now: float) -> None:
        idle = [ip for ip, hits in self._hits.items() if not hits or hits[-1] <= now - self.window_seconds]
        for ip in idle:
            del self._hits[ip]
        if idle:
            logger.debug("Dropped %d idle rate-limit entries", len(idle))
