"""
Global exception handlers for the API layer.

These handlers transform domain exceptions (from the core/service layer)
into HTTP responses, so endpoints don't need their own try/except blocks.
Every error body has the shape {"detail": "<message>"}.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import (
    RemoteSourceError,
    AppException,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _describe_request_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        msg = err.get("msg", "invalid request")
        ctx = err.get("ctx") or {}
        if err.get("type") == "json_invalid" and ctx.get("error"):
            # e.g. "JSON decode error: Expecting value"; loc is only a byte offset here
            parts.append(f"{msg}: {ctx['error']}")
            continue
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Malformed request body"


async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle bodies FastAPI could not parse or validate (bad JSON, wrong shape).
    Maps to HTTP 400 Bad Request instead of FastAPI's default 422.
    """
    message = _describe_request_error(exc)
    logger.info("rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": message},
    )


async def remote_source_exception_handler(
        request: Request, exc: RemoteSourceError
) -> JSONResponse:
    """
    Handle RemoteSourceError (remote blacklist unreachable or unusable).
    Maps to HTTP 500 with the underlying error text.
    """
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": exc.message},
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Fallback handler for any AppException that wasn't caught by more specific handlers.
    Maps to HTTP 500 Internal Server Error.
    """
    logger.error("unhandled application error on %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": exc.message},
    )


# Dictionary mapping exception types to their handlers
# Registered all at once in main.create_app()
EXCEPTION_HANDLERS = {
    RequestValidationError: request_validation_exception_handler,
    RemoteSourceError: remote_source_exception_handler,
    AppException: app_exception_handler,
}
