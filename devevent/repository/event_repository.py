"""Event repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from devevent.core.base_repository import BaseRepository
from devevent.models.event import Event


class EventRepository(BaseRepository[Event, int]):
    """Repository for Event entity operations.

    Listing queries return newest events first; ``id`` breaks ties between
    rows created in the same instant so the order is stable.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize EventRepository with database session.

        Args:
            session: Async SQLAlchemy session
        """
        super().__init__(Event, session)

    def _newest_first(self):
        return select(self.model).order_by(self.model.created_at.desc(), self.model.id.desc())

    async def get_by_slug(self, slug: str) -> Event | None:
        """Exact match on the canonical slug."""
        return await self.get_by(slug=slug)

    async def slug_taken(self, slug: str, exclude_id: int | None = None) -> bool:
        """Check whether another event already owns ``slug``.

        Args:
            slug: Canonical slug
            exclude_id: Event allowed to own it (the one being updated)
        """
        query = select(self.model.id).where(self.model.slug == slug)
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def list_newest(self, limit: int | None = None, offset: int | None = None) -> list[Event]:
        """List events, newest first.

        Args:
            limit: Maximum number of results to return
            offset: Number of records to skip
        """
        query = self._newest_first()
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_sharing_tags(self, event: Event) -> list[Event]:
        """Other events with at least one tag in common with ``event``, newest first.

        Tags are compared after legacy expansion, so a row still holding a
        single "go, infra" element matches on both tags. Matching happens in
        Python to stay portable across the JSON column dialects.
        """
        wanted = set(event.tag_items)
        if not wanted:
            return []

        result = await self.session.execute(self._newest_first().where(self.model.id != event.id))
        return [other for other in result.scalars().all() if wanted.intersection(other.tag_items)]
