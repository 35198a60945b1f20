"""Booking record manager.

A booking holds a back-reference to an event. The reference is checked
against the events table when the booking is created and whenever the
reference itself changes; edits to other fields skip the check.
"""

from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from devevent.core.exceptions import (
    BadRequestError,
    DanglingReferenceError,
    FieldValidationError,
    NotFoundError,
)
from devevent.core.validation import is_valid_email
from devevent.models.booking import Booking
from devevent.models.event import Event
from devevent.repository.booking_repository import BookingRepository
from devevent.repository.event_repository import EventRepository
from devevent.schemas import MAX_RECORD_ID, BookingPatch

__all__ = ["BookingManager", "normalize_email"]

logger = structlog.get_logger(__name__)


def normalize_email(value: Any) -> str:
    """Trimmed, lowercased email.

    Raises:
        FieldValidationError: Blank or not shaped like ``local@domain.tld``
    """
    if not is_valid_email(value):
        raise FieldValidationError("Invalid email format.", field="email")
    return value.strip().lower()


class BookingManager:
    """Create and edit bookings while keeping ``event_id`` resolvable."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.bookings = BookingRepository(session)
        self.events = EventRepository(session)

    async def _referenced_event(self, event_id: Any) -> Event:
        if event_id is None:
            raise FieldValidationError("event_id is required.", field="event_id")
        event = await self.events.get_by_id(event_id) if 1 <= event_id <= MAX_RECORD_ID else None
        if event is None:
            raise DanglingReferenceError(event_id)
        return event

    async def create(self, event_id: int, email: str) -> Booking:
        """Book a spot.

        Raises:
            FieldValidationError: Invalid email
            DanglingReferenceError: No event with ``event_id``
        """
        normalized_email = normalize_email(email)
        event = await self._referenced_event(event_id)

        booking = await self.bookings.create(event_id=event.id, slug=event.slug, email=normalized_email)
        logger.info("booking_created", booking_id=booking.id, event_id=event.id)
        return booking

    async def update(self, booking_id: int, patch: BookingPatch) -> Booking:
        """Apply a partial update.

        Raises:
            NotFoundError: Unknown booking
            BadRequestError: Empty patch
            FieldValidationError: Invalid email
            DanglingReferenceError: New ``event_id`` does not resolve
        """
        booking = await self.bookings.get_by_id(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found.", detail={"booking_id": booking_id})

        changes = patch.changed_fields()
        if not changes:
            raise BadRequestError("No fields to update")

        values: dict[str, Any] = {}
        if "email" in changes:
            values["email"] = normalize_email(changes["email"])

        if "event_id" in changes and changes["event_id"] != booking.event_id:
            event = await self._referenced_event(changes["event_id"])
            values.update(event_id=event.id, slug=event.slug)

        updated = await self.bookings.update(booking.id, **values)
        logger.info("booking_updated", booking_id=booking.id, changed=sorted(values))
        return updated

    async def update_event_reference(self, booking_id: int, new_event_id: int) -> Booking:
        """Point a booking at another event (existence is re-checked)."""
        return await self.update(booking_id, BookingPatch(event_id=new_event_id))

    async def count_for_event(self, event_id: int) -> int:
        return await self.bookings.count_for_event(event_id)
