"""Similar-event recommendations based on shared tags."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from devevent.core.normalization import is_valid_slug
from devevent.core.validation import is_non_empty_string
from devevent.models.event import Event
from devevent.repository.event_repository import EventRepository

__all__ = ["find_similar_events"]

logger = structlog.get_logger(__name__)


async def find_similar_events(session: AsyncSession, slug: str) -> list[Event]:
    """Other events sharing at least one tag with the event at ``slug``.

    Results are newest first. This backs a best-effort recommendation strip,
    so an unknown or malformed slug, and any failure while querying, yield an
    empty list instead of an error.
    """
    try:
        if not is_non_empty_string(slug) or not is_valid_slug(slug.strip()):
            return []

        events = EventRepository(session)
        event = await events.get_by_slug(slug.strip())
        if event is None:
            return []
        return await events.list_sharing_tags(event)
    except Exception:
        logger.exception("similar_events_failed", slug=slug)
        return []
