"""Tests for the event record manager."""

import pytest
from sqlalchemy import Text

from devevent.core.exceptions import (
    DuplicateSlugError,
    FieldValidationError,
    InvalidDateError,
    InvalidSlugError,
    InvalidTimeError,
    NotFoundError,
    SlugDerivationError,
)
from devevent.models import Event
from devevent.repository import EventRepository
from devevent.schemas import EventPatch
from devevent.services.event_manager import EventManager, validate_and_normalize

# =============================================================================
# validate_and_normalize
# =============================================================================


def test_validate_and_normalize_canonicalizes(event_fields) -> None:
    fields = validate_and_normalize(
        event_fields(title="  Go Conf  ", date="Jan 5, 2025", time="2:30 PM", tags=[" go ", "infra"]),
        title_changed=True,
    )

    assert fields["title"] == "Go Conf"
    assert fields["slug"] == "go-conf"
    assert fields["date"] == "2025-01-05"
    assert fields["time"] == "14:30"
    assert fields["tags"] == ["go", "infra"]


def test_validate_and_normalize_stops_at_first_failure(event_fields) -> None:
    # Blank organizer is reported before the bad date and time
    with pytest.raises(FieldValidationError) as exc_info:
        validate_and_normalize(event_fields(organizer="  ", date="nope", time="nope"), title_changed=True)

    assert type(exc_info.value) is FieldValidationError
    assert exc_info.value.message == "organizer is required."


def test_validate_and_normalize_checks_arrays_before_slug(event_fields) -> None:
    with pytest.raises(FieldValidationError) as exc_info:
        validate_and_normalize(event_fields(title="!!!", agenda=[]), title_changed=True)

    assert exc_info.value.detail == {"field": "agenda"}


def test_validate_and_normalize_keeps_slug_without_title_change(event_fields) -> None:
    fields = validate_and_normalize(event_fields(slug="kept-slug", title="Renamed"), title_changed=False)

    assert fields["slug"] == "kept-slug"


# =============================================================================
# create
# =============================================================================


async def test_create_persists_normalized_event(session, make_draft) -> None:
    event = await EventManager(session).create(make_draft())
    await session.commit()

    assert event.id is not None
    assert event.slug == "pycon-berlin-2025"
    assert event.time == "09:00"
    assert event.agenda_items == ["Keynote", "Talks", "Sprints"]
    assert event.created_at is not None


async def test_create_with_blank_organizer_writes_nothing(session, make_draft) -> None:
    with pytest.raises(FieldValidationError):
        await EventManager(session).create(make_draft(organizer=""))

    assert await EventRepository(session).count() == 0


async def test_create_rejects_unsluggable_title(session, make_draft) -> None:
    with pytest.raises(SlugDerivationError) as exc_info:
        await EventManager(session).create(make_draft(title="???"))

    assert exc_info.value.error_code == "SlugDerivationFailed"


async def test_create_rejects_bad_date_and_time(session, make_draft) -> None:
    manager = EventManager(session)

    with pytest.raises(InvalidDateError):
        await manager.create(make_draft(date="2025-13-40"))
    with pytest.raises(InvalidTimeError):
        await manager.create(make_draft(time="13:00 PM"))


async def test_create_duplicate_slug(session, make_draft) -> None:
    manager = EventManager(session)
    await manager.create(make_draft())
    await session.commit()

    with pytest.raises(DuplicateSlugError) as exc_info:
        await manager.create(make_draft(title="PyCon  Berlin  2025!"))

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == {"slug": "pycon-berlin-2025"}
    assert await EventRepository(session).count() == 1


async def test_create_accepts_long_free_text(session, make_draft) -> None:
    title = "x" * 300

    event = await EventManager(session).create(make_draft(title=title, venue="v" * 400, location="l" * 600))
    await session.commit()

    assert event.title == title
    assert event.slug == "x" * 200
    for name in ("title", "image", "venue", "location", "mode", "audience"):
        assert isinstance(Event.__table__.c[name].type, Text)


# =============================================================================
# update
# =============================================================================


async def test_update_title_regenerates_slug(session, make_draft) -> None:
    manager = EventManager(session)
    event = await manager.create(make_draft())
    await session.commit()

    updated = await manager.update(event.id, EventPatch(title="PyCon Berlin 2026"))
    await session.commit()

    assert updated.slug == "pycon-berlin-2026"
    assert updated.title == "PyCon Berlin 2026"


async def test_update_without_title_keeps_slug_and_normalizes(session, make_draft) -> None:
    manager = EventManager(session)
    event = await manager.create(make_draft())
    await session.commit()

    updated = await manager.update(event.id, EventPatch(time="6:15 pm", tags="ml, data"))
    await session.commit()

    assert updated.slug == "pycon-berlin-2025"
    assert updated.time == "18:15"
    assert updated.tag_items == ["ml", "data"]
    assert updated.updated_at is not None


async def test_update_title_collision(session, make_draft) -> None:
    manager = EventManager(session)
    await manager.create(make_draft(title="Go Conf"))
    other = await manager.create(make_draft(title="Rust Conf"))
    await session.commit()

    with pytest.raises(DuplicateSlugError):
        await manager.update(other.id, EventPatch(title="go conf"))


async def test_update_rejects_explicit_null(session, make_draft) -> None:
    manager = EventManager(session)
    event = await manager.create(make_draft())
    await session.commit()

    with pytest.raises(FieldValidationError) as exc_info:
        await manager.update(event.id, EventPatch(venue=None))

    assert exc_info.value.message == "venue is required."


async def test_update_unknown_event(session) -> None:
    with pytest.raises(NotFoundError):
        await EventManager(session).update(404, EventPatch(title="Anything"))


async def test_update_expands_legacy_rows(session, make_draft) -> None:
    # Rows written before array parsing existed hold one JSON element
    session.add(Event(**{**make_draft().model_dump(), "slug": "legacy", "tags": ['["go", "infra"]']}))
    await session.commit()
    event = await EventRepository(session).get_by_slug("legacy")

    updated = await EventManager(session).update(event.id, EventPatch(audience="Gophers"))
    await session.commit()

    assert updated.tags == ["go", "infra"]


async def test_update_keeps_stored_items_with_commas(session, make_draft) -> None:
    manager = EventManager(session)
    event = await manager.create(make_draft(agenda=["Intro, welcome"], tags=["python", "data, ml"]))
    await session.commit()

    updated = await manager.update(event.id, EventPatch(audience="Data folks"))
    await session.commit()

    assert updated.agenda == ["Intro, welcome"]
    assert updated.tags == ["python", "data, ml"]
    assert updated.audience == "Data folks"


# =============================================================================
# find_by_slug / list_events
# =============================================================================


async def test_find_by_slug(session, make_draft) -> None:
    manager = EventManager(session)
    await manager.create(make_draft())
    await session.commit()

    found = await manager.find_by_slug(" pycon-berlin-2025 ")

    assert found is not None
    assert found.title == "PyCon Berlin 2025"
    assert await manager.find_by_slug("unknown-event") is None


async def test_find_by_slug_rejects_blank_and_malformed(session) -> None:
    manager = EventManager(session)

    with pytest.raises(FieldValidationError) as blank:
        await manager.find_by_slug("   ")
    with pytest.raises(InvalidSlugError) as malformed:
        await manager.find_by_slug("Not_A_Slug")

    assert blank.value.message == "Missing slug parameter."
    assert malformed.value.error_code == "InvalidSlug"


async def test_list_events_newest_first(session, make_draft) -> None:
    manager = EventManager(session)
    for title in ("First", "Second", "Third"):
        await manager.create(make_draft(title=title))
    await session.commit()

    events = await manager.list_events()
    page = await manager.list_events(limit=1, offset=1)

    assert [e.slug for e in events] == ["third", "second", "first"]
    assert [e.slug for e in page] == ["second"]
