"""Error Handlers: global exception handlers for the room API.

Invariants:
    - GuessoError -> {"error": reason, code, category, severity, context}
    - RequestValidationError -> 400 with a readable reason plus field-level details
    - Exception (catch-all) -> 500, never leaks internal details
    - Every response carries a top-level "error" string clients can show as-is

Design Decisions:
    - Three-layer handler: domain (GuessoError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py (ADR: import fan-out < 10)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from guesso.core.errors import ErrorSeverity, GuessoError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_guesso_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_guesso_error_handler(app: FastAPI) -> None:

    @app.exception_handler(GuessoError)
    async def guesso_error_handler(request: Request, exc: GuessoError):
        """Handle all room-engine domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.info
        log(
            f"GuessoError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "room_code": exc.context.room_code,
            },
        )
        headers = None
        if exc.context.retry_after_ms:
            headers = {"Retry-After": str(max(1, exc.context.retry_after_ms // 1000))}
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(), headers=headers,
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
                "category": "internal",
                "severity": ErrorSeverity.CRITICAL.value,
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"] if loc != "body"),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    first = details[0] if details else None
    reason = (
        f"Invalid request data: {first['field']}: {first['message']}"
        if first else "Invalid request data"
    )
    return {
        "error": reason,
        "code": "VALIDATION_ERROR",
        "category": "validation",
        "severity": ErrorSeverity.WARNING.value,
        "details": details,
    }
