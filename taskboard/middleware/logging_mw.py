"""LoggingMiddleware: one request_id per HTTP request, bound to structlog contextvars."""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID


class LoggingMiddleware(BaseHTTPMiddleware):
    """Request-scoped logging with an X-Request-ID response header.

    request_completed carries the authenticated caller's id, which
    get_current_user leaves on request.state.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = str(ULID())
        started = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        log = structlog.get_logger()
        response = await call_next(request)

        await log.ainfo(
            "request_completed",
            status_code=response.status_code,
            user_id=getattr(request.state, "user_id", None),
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )

        response.headers["X-Request-ID"] = request_id
        return response
