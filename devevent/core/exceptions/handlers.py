"""Exception handlers for the DevEvent API.

Every failure leaves the API as the same envelope::

    {"success": false, "error_code": ..., "message": ..., "error": ..., "detail": ..., "path": ...}

``error`` (technical reason) is only rendered outside production; ``None``
fields are omitted.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from devevent.main_config import get_settings

from .http_exceptions import AppError, ErrorResponse, InternalServerError

logger = logging.getLogger(__name__)


def _include_error() -> bool:
    return not get_settings().is_production


def _envelope(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render ``AppError`` and every domain error kind."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Request failed: %s (%s)", exc, exc.error, exc_info=exc.__cause__ is not None)
    else:
        logger.info("Request rejected: %s", exc)

    return _envelope(
        exc.status_code,
        exc.to_error_response(path=request.url.path, include_error=_include_error()),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body/path/query that does not fit the declared schema (422)."""
    return _envelope(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorResponse(
            error_code="ValidationError",
            message="Request validation failed",
            detail={"errors": jsonable_encoder(exc.errors())},
            path=request.url.path,
        ),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Constraint violation that escaped the record managers (409)."""
    logger.error("Database integrity error: %s", exc.orig)

    return _envelope(
        status.HTTP_409_CONFLICT,
        ErrorResponse(
            error_code="IntegrityError",
            message="Database constraint violation",
            error=str(exc.orig) if _include_error() else None,
            path=request.url.path,
        ),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected (500)."""
    logger.error("Unexpected error: %s", exc, exc_info=exc)

    internal = InternalServerError(message="An unexpected error occurred", error=str(exc))
    return _envelope(
        internal.status_code,
        internal.to_error_response(path=request.url.path, include_error=_include_error()),
    )


def register_exception_handlers(app: Any) -> None:
    """Register all exception handlers with FastAPI app."""
    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
