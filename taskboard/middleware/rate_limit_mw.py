"""RateLimitMiddleware: sliding window of request timestamps per client address.

State is process-local. Handlers run in a threadpool but dispatch runs on the
event loop, and the check-and-record below has no await in between.
"""

import time
from collections import deque
from collections.abc import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

log = structlog.get_logger()

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        max_requests: int,
        window_s: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        self.max_requests = max_requests
        self.window_s = window_s
        self.clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._next_sweep = clock() + window_s

    def _client_key(self, request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def _sweep(self, now: float) -> None:
        """Forget clients with no request inside the current window."""
        cutoff = now - self.window_s
        for key in [k for k, hits in self._hits.items() if hits[-1] <= cutoff]:
            del self._hits[key]
        self._next_sweep = now + self.window_s

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        key = self._client_key(request)
        now = self.clock()
        if now >= self._next_sweep:
            self._sweep(now)
        hits = self._hits.setdefault(key, deque())
        while hits and hits[0] <= now - self.window_s:
            hits.popleft()

        if len(hits) >= self.max_requests:
            retry_after = max(1, int(hits[0] + self.window_s - now))
            log.warning("rate_limited", client=key, hits=len(hits))
            return JSONResponse(
                status_code=429,
                content={"success": False, "message": RATE_LIMIT_MESSAGE},
                headers={
                    "Retry-After": str(retry_after),
                    "X-RateLimit-Limit": str(self.max_requests),
                    "X-RateLimit-Remaining": "0",
                },
            )

        hits.append(now)
        remaining = self.max_requests - len(hits)

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
