"""Exception handling package for the DevEvent API.

Provides the HTTP exception hierarchy, the domain error kinds built on top of
it, and the handlers that render both as standardized error responses.
"""

from .domain_exceptions import (
    DanglingReferenceError,
    DuplicateSlugError,
    FieldValidationError,
    InvalidDateError,
    InvalidImageError,
    InvalidSlugError,
    InvalidTimeError,
    SlugDerivationError,
    StoreUnavailableError,
    UploadFailedError,
)
from .handlers import register_exception_handlers
from .http_exceptions import (
    AppError,
    BadRequestError,
    ClientError,
    ConflictError,
    ErrorResponse,
    InternalServerError,
    NotFoundError,
    ServerError,
    ServiceUnavailableError,
    UnprocessableEntityError,
)

__all__ = [
    # Base exceptions
    "AppError",
    # Client exceptions (4xx)
    "BadRequestError",
    "ClientError",
    "ConflictError",
    # Domain errors
    "DanglingReferenceError",
    "DuplicateSlugError",
    # Models
    "ErrorResponse",
    "FieldValidationError",
    # Server Error (5xx)
    "InternalServerError",
    "InvalidDateError",
    "InvalidImageError",
    "InvalidSlugError",
    "InvalidTimeError",
    "NotFoundError",
    "ServerError",
    "ServiceUnavailableError",
    "SlugDerivationError",
    "StoreUnavailableError",
    "UnprocessableEntityError",
    "UploadFailedError",
    # Handlers
    "register_exception_handlers",
]
