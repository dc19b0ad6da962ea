"""Error Handlers — global exception handlers for the Users API.

Invariants:
    - UsersApiError → {success: false, error, message?} with its own status
    - RequestValidationError → 400 with the first validation message as error
    - HTTPException (unknown route, wrong method) → same envelope, its own status
    - Exception (catch-all) → 500, never leaks internal details
    - Every handled failure is logged before the response is built
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from users_api.core.errors import (
    ErrorSeverity, RequestValidationFailed, UsersApiError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_users_api_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_users_api_error_handler(app: FastAPI) -> None:

    @app.exception_handler(UsersApiError)
    async def users_api_error_handler(request: Request, exc: UsersApiError):
        """Handle all domain and store errors."""
        log = (
            logger.error if exc.severity == ErrorSeverity.CRITICAL
            else logger.warning
        )
        log(
            f"{type(exc).__name__}: {exc.message}"
            + (f" ({exc.detail})" if exc.detail else ""),
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic request validation errors."""
        failure = _to_validation_failure(exc)
        logger.warning(
            f"Validation error on {request.url.path}: {failure.message}",
            extra={"error_code": failure.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=failure.to_response(),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        """Render framework HTTP errors in the standard envelope."""
        logger.warning(
            f"HTTP {exc.status_code} on {request.method} {request.url.path}",
            extra={"status_code": exc.status_code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all; never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Internal server error"},
        )


def _to_validation_failure(
    exc: RequestValidationError,
) -> RequestValidationFailed:
    """First validation error as a RequestValidationFailed."""
    errors = exc.errors()
    if not errors:
        return RequestValidationFailed("Invalid request data")
    first = errors[0]
    field = ".".join(str(loc) for loc in first.get("loc", ()) if loc != "body")
    return RequestValidationFailed(first.get("msg", "Invalid request data"), field or None)
