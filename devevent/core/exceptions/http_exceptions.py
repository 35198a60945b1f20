"""Custom HTTP exception hierarchy and standardized error responses.

Exception Hierarchy:
    AppError (HTTPException)
    ├── ClientError (4xx errors)
    │   ├── BadRequestError (400)
    │   ├── NotFoundError (404)
    │   ├── ConflictError (409)
    │   └── UnprocessableEntityError (422)
    └── ServerError (5xx errors)
        ├── InternalServerError (500)
        └── ServiceUnavailableError (503)

Every error renders to the same envelope (see ``ErrorResponse``). ``message``
is safe to show to visitors; ``error`` carries the technical reason and is
dropped from responses in production.

Usage:
    # Option 1: Pass individual parameters
    raise NotFoundError(
        message="Event not found.",
        detail={"slug": "pycon-2025"},
    )

    # Option 2: Pass ErrorResponse object directly
    error = ErrorResponse(
        error_code="EVENT_NOT_FOUND",
        message="Event not found.",
        detail={"slug": "pycon-2025"},
    )
    raise NotFoundError(error)
"""

from typing import Any

from fastapi import HTTPException, status
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standardized error response model."""

    success: bool = Field(default=False, description="Always False for errors")
    error_code: str = Field(description="Error code identifier")
    message: str = Field(description="Human-readable error message")
    error: str | None = Field(default=None, description="Technical reason (non-production only)")
    detail: dict[str, Any] | None = Field(default=None, description="Additional error details")
    path: str | None = Field(default=None, description="Request path where error occurred")


class AppError(HTTPException):
    """Base exception for all application HTTP errors.

    Subclasses only pick a status and a fallback message; ``error_code``
    defaults to the class name.
    """

    default_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An error occurred"

    def __init__(
        self,
        message: str | ErrorResponse | None = None,
        error_code: str | None = None,
        detail: dict[str, Any] | None = None,
        error: str | None = None,
        *,
        status_code: int | None = None,
    ) -> None:
        if isinstance(message, ErrorResponse):
            message, error_code, detail, error = (
                message.message,
                message.error_code,
                message.detail,
                message.error,
            )

        self.message = message or self.default_message
        super().__init__(status_code=status_code or self.default_status, detail=self.message)

        # HTTPException.__init__ stores the message in ``detail``; keep ours
        self.detail = detail
        self.error_code = error_code or self.__class__.__name__
        self.error = error

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"

    def to_error_response(self, path: str | None = None, include_error: bool = True) -> ErrorResponse:
        """Convert exception to ErrorResponse object.

        Args:
            path: Request path where error occurred
            include_error: Keep the technical ``error`` text (off in production)
        """
        return ErrorResponse(
            error_code=self.error_code,
            message=self.message,
            error=self.error if include_error else None,
            detail=self.detail,
            path=path,
        )


# ============================================================================
# Client Exceptions (4xx)
# ============================================================================


class ClientError(AppError):
    default_status = status.HTTP_400_BAD_REQUEST
    default_message = "Client error"


class BadRequestError(ClientError):
    """400 - malformed or incomplete input."""

    default_message = "Bad request"


class NotFoundError(ClientError):
    default_status = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(ClientError):
    """409 - the write collides with existing state."""

    default_status = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class UnprocessableEntityError(ClientError):
    """422 - well-formed request that cannot be applied."""

    default_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Unprocessable entity"


# ============================================================================
# Server Exceptions (5xx)
# ============================================================================


class ServerError(AppError):
    default_message = "Server error"


class InternalServerError(ServerError):
    default_message = "Internal server error"


class ServiceUnavailableError(ServerError):
    default_status = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service unavailable"
