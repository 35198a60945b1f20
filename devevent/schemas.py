"""Typed request drafts and response envelopes.

Drafts are the only shapes the record managers accept: loosely typed form or
JSON input is parsed into one of them first, and unknown keys are rejected.
Non-emptiness is deliberately *not* enforced here; the record managers run
the field predicates so every write path reports the same errors.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from devevent.core.exceptions import FieldValidationError
from devevent.core.normalization import parse_string_array

EVENT_STRING_FIELDS: tuple[str, ...] = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "organizer",
)
EVENT_ARRAY_FIELDS: tuple[str, ...] = ("agenda", "tags")

# Largest id an INTEGER key column can hold.
MAX_RECORD_ID = 2**31 - 1


class EventDraft(BaseModel):
    """Unvalidated data for a new event."""

    model_config = ConfigDict(extra="forbid")

    title: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    agenda: list[str]
    organizer: str
    tags: list[str]


class EventPatch(BaseModel):
    """Partial event update. Only fields explicitly sent count as changed.

    ``agenda`` and ``tags`` also accept a JSON array string or a
    comma/newline separated string.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    overview: str | None = None
    image: str | None = None
    venue: str | None = None
    location: str | None = None
    date: str | None = None
    time: str | None = None
    mode: str | None = None
    audience: str | None = None
    agenda: list[str] | None = None
    organizer: str | None = None
    tags: list[str] | None = None

    @field_validator("agenda", "tags", mode="before")
    @classmethod
    def _expand_string_form(cls, value: Any, info) -> Any:
        if not isinstance(value, str):
            return value
        try:
            return parse_string_array([value], info.field_name)
        except FieldValidationError as exc:
            raise ValueError(exc.message) from exc

    def changed_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class BookingCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    event_id: int = Field(..., ge=1, le=MAX_RECORD_ID, description="Event being booked")
    email: str = Field(..., description="Visitor email")


class BookingPatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    event_id: int | None = Field(None, ge=1, le=MAX_RECORD_ID)
    email: str | None = None

    def changed_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


# =============================================================================
# Responses
# =============================================================================


class EventSummaryResponse(BaseModel):
    """Card-sized view of an event."""

    id: int
    title: str
    slug: str
    image: str
    location: str
    date: str
    time: str
    mode: str
    tags: list[str]


class EventResponse(EventSummaryResponse):
    description: str
    overview: str
    venue: str
    audience: str
    agenda: list[str]
    organizer: str
    created_at: str | None = None
    updated_at: str | None = None


class BookingResponse(BaseModel):
    id: int
    event_id: int
    slug: str
    email: str
    created_at: str | None = None
    updated_at: str | None = None


class EventEnvelope(BaseModel):
    message: str
    event: EventResponse


class EventDetailEnvelope(EventEnvelope):
    bookings: int = Field(..., description="Spots already booked")


class EventListEnvelope(BaseModel):
    message: str
    events: list[EventSummaryResponse]


class BookingEnvelope(BaseModel):
    message: str
    booking: BookingResponse
