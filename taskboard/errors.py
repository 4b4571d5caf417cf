"""Exception handlers rendering every failure into the response envelope."""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .models import ID_PATTERN

log = structlog.get_logger()


def error_response(
    status_code: int,
    message: str,
    errors: list | None = None,
    headers: dict | None = None,
    **extra,
) -> JSONResponse:
    content = {"success": False, "message": message}
    if errors is not None:
        content["errors"] = errors
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _format_validation_error(err: dict) -> dict:
    loc = [str(part) for part in err.get("loc", ())]
    location = loc[0] if loc else "body"
    field = ".".join(loc[1:]) or location

    message = err.get("msg", "Invalid value")
    if err.get("type") == "string_pattern_mismatch" and (
        err.get("ctx", {}).get("pattern") == ID_PATTERN
    ):
        message = "Invalid ID format"
    elif message.startswith("Value error, "):
        message = message.removeprefix("Value error, ")

    return {"field": field, "message": message, "location": location}


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [_format_validation_error(err) for err in exc.errors()]
    log.info("validation_failed", fields=[e["field"] for e in errors])
    return error_response(
        status.HTTP_400_BAD_REQUEST, "Validation failed", errors=errors
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = "Route not found"
    return error_response(
        exc.status_code, str(message), headers=getattr(exc, "headers", None)
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("unhandled_error", error=str(exc), exc_info=exc)
    extra = {}
    if request.app.state.settings.expose_errors:
        extra["error"] = str(exc)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", **extra
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
