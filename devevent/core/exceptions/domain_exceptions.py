"""Domain error kinds raised by the normalization layer and record managers.

Each kind is an ``AppError`` so routes can let it propagate untouched; the
``error_code`` carries the kind name clients match on.

    FieldValidationError (400, "ValidationError")
    ├── InvalidDateError (400, "InvalidDate")
    ├── InvalidTimeError (400, "InvalidTime")
    ├── SlugDerivationError (400, "SlugDerivationFailed")
    ├── InvalidSlugError (400, "InvalidSlug")
    └── InvalidImageError (400, "InvalidImage")
    DuplicateSlugError (409, "DuplicateSlug")
    DanglingReferenceError (422, "DanglingReference")
    UploadFailedError (502, "UploadFailed")
    StoreUnavailableError (503, "ConnectionError")
"""

from typing import Any

from fastapi import status

from .http_exceptions import (
    BadRequestError,
    ConflictError,
    ServerError,
    ServiceUnavailableError,
    UnprocessableEntityError,
)


class FieldValidationError(BadRequestError):
    """A required field is missing, blank, or malformed."""

    default_code = "ValidationError"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        error: str | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        if detail is None and field is not None:
            detail = {"field": field}
        super().__init__(message, self.default_code, detail, error)
        self.field = field


class InvalidDateError(FieldValidationError):
    default_code = "InvalidDate"

    def __init__(self, value: Any, error: str | None = None) -> None:
        super().__init__("Invalid date format.", field="date", error=error or f"Unparseable date: {value!r}")
        self.value = value


class InvalidTimeError(FieldValidationError):
    default_code = "InvalidTime"

    def __init__(self, value: Any, error: str | None = None) -> None:
        super().__init__(
            "Invalid time format. Expected HH:MM or h:mm AM/PM.",
            field="time",
            error=error or f"Unparseable time: {value!r}",
        )
        self.value = value


class SlugDerivationError(FieldValidationError):
    default_code = "SlugDerivationFailed"

    def __init__(self, title: str) -> None:
        super().__init__(
            "Unable to generate slug from title.",
            field="title",
            error=f"Title {title!r} has no alphanumeric characters",
        )


class InvalidSlugError(FieldValidationError):
    default_code = "InvalidSlug"

    def __init__(self, slug: str) -> None:
        super().__init__("Invalid slug format.", field="slug", error=f"Rejected slug: {slug!r}")


class InvalidImageError(FieldValidationError):
    default_code = "InvalidImage"

    def __init__(self, message: str, error: str | None = None) -> None:
        super().__init__(message, field="image", error=error)


class DuplicateSlugError(ConflictError):
    """Another event already owns the derived slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(
            "An event with this title already exists.",
            "DuplicateSlug",
            {"slug": slug},
            f"Slug {slug!r} is already taken",
        )
        self.slug = slug


class DanglingReferenceError(UnprocessableEntityError):
    """A booking points at an event that does not exist."""

    def __init__(self, event_id: Any) -> None:
        super().__init__(
            "Referenced event does not exist.",
            "DanglingReference",
            {"event_id": event_id},
            f"No event with id {event_id!r}",
        )
        self.event_id = event_id


class UploadFailedError(ServerError):
    """The image host rejected or failed the upload."""

    default_status = status.HTTP_502_BAD_GATEWAY

    def __init__(self, error: str | None = None) -> None:
        super().__init__("Image upload failed.", "UploadFailed", None, error)


class StoreUnavailableError(ServiceUnavailableError):
    """The database could not be reached."""

    def __init__(self, error: str | None = None) -> None:
        super().__init__("Database is unavailable.", "ConnectionError", None, error)
