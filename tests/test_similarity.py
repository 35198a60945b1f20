"""Tests for similar-event recommendations."""

from devevent.models import Event
from devevent.services.event_manager import EventManager
from devevent.services.similarity import find_similar_events


async def test_find_similar_by_shared_tag(session, make_draft) -> None:
    manager = EventManager(session)
    await manager.create(make_draft(title="Go Conf", tags=["go", "infra"]))
    await manager.create(make_draft(title="Infra Day", tags=["infra"]))
    await manager.create(make_draft(title="Art Fair", tags=["art"]))
    await manager.create(make_draft(title="Cloud Summit", tags=["cloud", "go"]))
    await session.commit()

    similar = await find_similar_events(session, "go-conf")

    assert [e.slug for e in similar] == ["cloud-summit", "infra-day"]


async def test_find_similar_matches_legacy_tags(session, make_draft) -> None:
    await EventManager(session).create(make_draft(title="Go Conf", tags=["go"]))
    session.add(Event(**{**make_draft().model_dump(), "slug": "old-gophers", "tags": ["go, infra"]}))
    await session.commit()

    similar = await find_similar_events(session, "go-conf")

    assert [e.slug for e in similar] == ["old-gophers"]


async def test_find_similar_unknown_or_malformed_slug(session, make_draft) -> None:
    await EventManager(session).create(make_draft(title="Go Conf", tags=["go"]))
    await session.commit()

    assert await find_similar_events(session, "no-such-event") == []
    assert await find_similar_events(session, "Bad Slug!") == []
    assert await find_similar_events(session, "") == []


async def test_find_similar_swallows_store_errors(session, monkeypatch) -> None:
    async def broken(*_args, **_kwargs):
        raise RuntimeError("store exploded")

    monkeypatch.setattr("devevent.repository.event_repository.EventRepository.get_by_slug", broken)

    assert await find_similar_events(session, "go-conf") == []
