"""Error Handlers: global exception handlers mapping every failure to a stable envelope.

Invariants:
    - CrudApiError -> its own http_status and to_response() body
    - RequestValidationError -> 400 VALIDATION_ERROR with field-level details
    - Exception (catch-all) -> 500 INTERNAL_ERROR, never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from crud_api.core.errors import CrudApiError, ErrorContext, ValidationError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(CrudApiError)
    async def crud_api_error_handler(request: Request, exc: CrudApiError):
        """Handle all domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.info
        log(
            f"CrudApiError: {exc.message}",
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
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return internal_error_response()


def internal_error_response() -> JSONResponse:
    """500 envelope shared by the catch-all handler and the request middleware."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": "internal",
                "severity": "critical",
            },
        },
    )


def build_validation_error_response(exc: RequestValidationError) -> dict:
    """Same envelope as core ValidationError, with per-field details."""
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    error = ValidationError(
        "Invalid request data", context=ErrorContext(details=details),
    )
    return error.to_response()
