"""Error Handlers — global exception handlers for the UserHub API.

Invariants:
    - UserHubError → its own http_status, to_response() envelope, severity log level
    - RequestValidationError → 400 with field-level details
    - Starlette HTTPException (unmatched route, wrong method) → envelope, same status
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Extracted from main.py so main only wires things together
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from userhub.api.responses import error_response
from userhub.core.errors import UserHubError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_userhub_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_exception_handler(app)
    _register_generic_error_handler(app)


def _register_userhub_error_handler(app: FastAPI) -> None:

    @app.exception_handler(UserHubError)
    async def userhub_error_handler(request: Request, exc: UserHubError):
        """Handle all UserHub domain/infrastructure errors."""
        logger.log(
            exc.log_level,
            f"UserHubError: {exc.message}",
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
        )
        return error_response(
            "Invalid request data",
            status.HTTP_400_BAD_REQUEST,
            details=_build_validation_details(exc),
        )


def _register_http_exception_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return error_response("Route not found", exc.status_code)
        return error_response(str(exc.detail), exc.status_code)


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return error_response("Internal server error")


def _build_validation_details(exc: RequestValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
