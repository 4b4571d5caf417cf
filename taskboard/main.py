"""FastAPI application entry point."""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, load_settings
from .db import Database
from .errors import register_exception_handlers
from .middleware import (
    LoggingMiddleware,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
    setup_logging,
)
from .routers import auth, tasks, users

API_PREFIX = "/api/v1"

LOCALHOST_ORIGIN_REGEX = r"https?://(localhost|127\.0\.0\.1)(:\d+)?"

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize database on startup."""
    app.state.db.init_schema()
    log.info(
        "app_started",
        environment=app.state.settings.environment,
        db_path=str(app.state.db.path),
    )
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around one Settings object."""
    if settings is None:
        settings = load_settings()

    setup_logging(settings)

    app = FastAPI(
        title="Taskboard",
        description="Multi-user task tracking API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = Database(settings.db_path)
    app.state.started_at = time.monotonic()

    # Added innermost first: CORS ends up outermost, logging innermost
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.rate_limit_max,
        window_s=settings.rate_limit_window_s,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_origin_regex=None if settings.is_production else LOCALHOST_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept", "Origin"],
        expose_headers=["Authorization", "X-Request-ID"],
    )

    register_exception_handlers(app)

    app.include_router(auth.router, prefix=API_PREFIX)
    app.include_router(tasks.router, prefix=API_PREFIX)
    app.include_router(users.router, prefix=API_PREFIX)

    @app.get("/health", tags=["health"])
    def health(request: Request):
        """Liveness probe."""
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": time.monotonic() - request.app.state.started_at,
        }

    return app


def main():
    """Run the application with uvicorn."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "taskboard.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )


if __name__ == "__main__":
    main()
