"""Event routes: listing, creation (multipart), detail, similar and update."""

from fastapi import APIRouter, Depends, Path, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from devevent.core.dependencies import get_db, get_image_uploader
from devevent.core.exceptions import InvalidImageError, NotFoundError
from devevent.core.normalization import parse_string_array
from devevent.schemas import (
    EVENT_ARRAY_FIELDS,
    EVENT_STRING_FIELDS,
    MAX_RECORD_ID,
    EventDetailEnvelope,
    EventDraft,
    EventEnvelope,
    EventListEnvelope,
    EventPatch,
)
from devevent.services.booking_manager import BookingManager
from devevent.services.event_manager import EventManager
from devevent.services.image_upload import ImageUploader, validate_image
from devevent.services.similarity import find_similar_events

router = APIRouter(
    prefix="/api/events",
    tags=["events"],
)


async def _read_image(form) -> tuple[bytes, UploadFile]:
    image = form.get("image")
    if not isinstance(image, UploadFile):
        raise InvalidImageError("Image file is required.")
    data = await image.read()
    validate_image(image.content_type, len(data))
    return data, image


@router.get("", response_model=EventListEnvelope)
async def list_events(
    limit: int | None = Query(None, ge=1, le=100),
    offset: int | None = Query(None, ge=0),
    session: AsyncSession = Depends(get_db),
):
    """All events, newest first."""
    events = await EventManager(session).list_events(limit=limit, offset=offset)
    return {
        "message": "Events fetched successfully",
        "events": [event.to_summary_dict() for event in events],
    }


@router.post("", response_model=EventEnvelope, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: Request,
    session: AsyncSession = Depends(get_db),
    uploader: ImageUploader = Depends(get_image_uploader),
):
    """Create an event from a multipart form with a banner image.

    ``agenda`` and ``tags`` may be sent as repeated fields, a JSON array
    string, or a comma/newline separated string.
    """
    form = await request.form()

    data, image = await _read_image(form)

    fields: dict = {}
    for name in EVENT_STRING_FIELDS:
        if name == "image":
            continue
        value = form.get(name)
        fields[name] = value if isinstance(value, str) else ""
    for name in EVENT_ARRAY_FIELDS:
        fields[name] = parse_string_array(form.getlist(name), name)

    fields["image"] = await uploader.upload(
        data,
        filename=image.filename or "banner",
        content_type=image.content_type or "application/octet-stream",
    )

    event = await EventManager(session).create(EventDraft(**fields))
    await session.commit()

    return {"message": "Successfully created event", "event": event.to_dict()}


@router.get("/{slug}", response_model=EventDetailEnvelope)
async def get_event(slug: str, session: AsyncSession = Depends(get_db)):
    """Event detail with the number of bookings so far."""
    event = await EventManager(session).find_by_slug(slug)
    if event is None:
        raise NotFoundError("Event not found.", detail={"slug": slug.strip()})

    bookings = await BookingManager(session).count_for_event(event.id)
    return {"message": "Event fetched successfully", "event": event.to_dict(), "bookings": bookings}


@router.get("/{slug}/similar", response_model=EventListEnvelope)
async def similar_events(slug: str, session: AsyncSession = Depends(get_db)):
    """Other events sharing a tag; empty for unknown slugs."""
    events = await find_similar_events(session, slug)
    return {
        "message": "Similar events fetched successfully",
        "events": [event.to_summary_dict() for event in events],
    }


@router.patch("/{event_id}", response_model=EventEnvelope)
async def update_event(
    patch: EventPatch,
    event_id: int = Path(..., ge=1, le=MAX_RECORD_ID),
    session: AsyncSession = Depends(get_db),
):
    event = await EventManager(session).update(event_id, patch)
    await session.commit()
    return {"message": "Event updated successfully", "event": event.to_dict()}
