"""Global exception handlers for consistent error responses.

Every failure of a request ends here and becomes one of the documented
responses:

- RateLimitAppError  → 429 with reset time and X-RateLimit-*/Retry-After
- ValidationAppError → 400 with the offending fields
- PersistenceAppError → 500 with an opaque message
- Unexpected Exception → 500 (safety net, nothing leaked)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.errors import AppError, PersistenceAppError, RateLimitAppError, ValidationAppError
from app.core.logging import get_request_id
from app.core.rate_limit import rate_limit_headers
from app.utils.timestamps import to_iso8601

logger = logging.getLogger(__name__)


async def rate_limit_error_handler(request: Request, exc: RateLimitAppError) -> JSONResponse:
    """Render a rejected admission as HTTP 429."""
    decision = exc.decision
    content: dict = {
        "error": "Rate limit exceeded",
        "message": exc.message,
    }
    headers: dict[str, str] | None = None
    if decision is not None:
        content["resetAt"] = to_iso8601(decision.reset_at)
        headers = rate_limit_headers(decision)

    return JSONResponse(status_code=429, content=content, headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors.

    - ValidationAppError → 400 Bad Request, ``{"error", "fields"}``
    - PersistenceAppError → 500, ``{"error"}`` only
    - any other AppError → 400 Bad Request

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with appropriate status code and error body.
    """
    status_code = 500 if isinstance(exc, PersistenceAppError) else 400

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "status_code": status_code,
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )

    content: dict = {"error": exc.message}
    if isinstance(exc, ValidationAppError) and exc.details and "fields" in exc.details:
        content["fields"] = exc.details["fields"]

    return JSONResponse(status_code=status_code, content=content)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs the failure for debugging while returning a generic message, so no
    stack trace or exception text reaches the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Starlette picks the most specific handler along the exception's MRO, so
    RateLimitAppError wins over the AppError handler.
    """
    app.exception_handler(RateLimitAppError)(rate_limit_error_handler)
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
