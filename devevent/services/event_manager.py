"""Event record manager.

Owns the Event lifecycle: every write goes through ``validate_and_normalize``
before it reaches the repository, so stored rows always have

- non-empty trimmed strings and non-empty agenda/tags lists
- a slug consistent with the last title that was written
- ``YYYY-MM-DD`` dates and ``HH:MM`` times

Slug uniqueness is enforced twice: a lookup before the write gives a clean
error, and the unique index catches concurrent writers. Both surface as
``DuplicateSlugError``.
"""

from typing import Any

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from devevent.core.exceptions import (
    DuplicateSlugError,
    FieldValidationError,
    InvalidSlugError,
    NotFoundError,
    SlugDerivationError,
)
from devevent.core.normalization import (
    derive_slug,
    expand_legacy_array,
    is_valid_slug,
    normalize_date,
    normalize_time,
)
from devevent.core.validation import is_non_empty_string, is_non_empty_string_array
from devevent.models.event import Event
from devevent.repository.event_repository import EventRepository
from devevent.schemas import EVENT_ARRAY_FIELDS, EVENT_STRING_FIELDS, EventDraft, EventPatch

__all__ = ["EventManager", "validate_and_normalize"]

logger = structlog.get_logger(__name__)


def _carried_array(values: Any) -> list[str]:
    """Stored agenda/tags as written; only a legacy JSON blob or a malformed row is expanded."""
    if is_non_empty_string_array(values) and not (len(values) == 1 and values[0].lstrip().startswith("[")):
        return list(values)
    return expand_legacy_array(values)


def validate_and_normalize(fields: dict[str, Any], *, title_changed: bool) -> dict[str, Any]:
    """Validate a full set of event fields and return their canonical form.

    Checks run in order and stop at the first failure: required strings,
    agenda/tags, slug, date, time.

    Args:
        fields: Every event field; ``slug`` is required unless ``title_changed``
        title_changed: Re-derive the slug from the title

    Raises:
        FieldValidationError: Missing or blank field
        SlugDerivationError: Title yields an empty slug
        InvalidDateError: Unparseable date
        InvalidTimeError: Unparseable or out-of-range time
    """
    normalized = dict(fields)

    for name in EVENT_STRING_FIELDS:
        value = fields.get(name)
        if not is_non_empty_string(value):
            raise FieldValidationError(f"{name} is required.", field=name)
        normalized[name] = value.strip()

    for name in EVENT_ARRAY_FIELDS:
        value = fields.get(name)
        if not is_non_empty_string_array(value):
            raise FieldValidationError(
                f"{name} is required and must contain at least one item.", field=name
            )
        normalized[name] = [item.strip() for item in value]

    if title_changed:
        slug = derive_slug(normalized["title"])
        if not slug:
            raise SlugDerivationError(normalized["title"])
        normalized["slug"] = slug
    elif not is_non_empty_string(fields.get("slug")):
        raise FieldValidationError("slug is required.", field="slug")

    normalized["date"] = normalize_date(normalized["date"])
    normalized["time"] = normalize_time(normalized["time"])
    return normalized


class EventManager:
    """Create, update and look up events."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.events = EventRepository(session)

    async def create(self, draft: EventDraft) -> Event:
        """Validate, normalize and insert a new event.

        Raises:
            FieldValidationError: (or a subclass) on invalid input
            DuplicateSlugError: If the derived slug belongs to another event
        """
        fields = validate_and_normalize(draft.model_dump(), title_changed=True)
        slug = fields["slug"]

        if await self.events.slug_taken(slug):
            raise DuplicateSlugError(slug)

        try:
            event = await self.events.create(**fields)
        except IntegrityError as exc:
            raise DuplicateSlugError(slug) from exc

        logger.info("event_created", event_id=event.id, slug=event.slug)
        return event

    async def update(self, event_id: int, patch: EventPatch) -> Event:
        """Apply a partial update.

        The slug is re-derived only when ``title`` is part of the patch. Date,
        time and legacy JSON agenda/tags are re-normalized on every save.

        Raises:
            NotFoundError: Unknown event
            FieldValidationError: (or a subclass) on invalid input
            DuplicateSlugError: If a new title collides with another event
        """
        event = await self.events.get_by_id(event_id)
        if event is None:
            raise NotFoundError("Event not found.", detail={"event_id": event_id})

        changes = patch.changed_fields()
        current: dict[str, Any] = {name: getattr(event, name) for name in EVENT_STRING_FIELDS}
        current.update(slug=event.slug, agenda=_carried_array(event.agenda), tags=_carried_array(event.tags))

        title_changed = "title" in changes
        fields = validate_and_normalize({**current, **changes}, title_changed=title_changed)
        slug = fields["slug"]

        if title_changed and await self.events.slug_taken(slug, exclude_id=event.id):
            raise DuplicateSlugError(slug)

        try:
            updated = await self.events.update(event.id, **fields)
        except IntegrityError as exc:
            raise DuplicateSlugError(slug) from exc

        logger.info("event_updated", event_id=event.id, slug=slug, changed=sorted(changes))
        return updated

    async def find_by_slug(self, slug: str) -> Event | None:
        """Look up an event by canonical slug.

        The slug shape is checked first; malformed input never reaches storage.

        Raises:
            FieldValidationError: Blank slug
            InvalidSlugError: Not a canonical slug
        """
        raw = slug.strip() if is_non_empty_string(slug) else ""
        if not raw:
            raise FieldValidationError("Missing slug parameter.", field="slug")
        if not is_valid_slug(raw):
            raise InvalidSlugError(raw)
        return await self.events.get_by_slug(raw)

    async def list_events(self, limit: int | None = None, offset: int | None = None) -> list[Event]:
        """All events, newest first."""
        return await self.events.list_newest(limit=limit, offset=offset)
