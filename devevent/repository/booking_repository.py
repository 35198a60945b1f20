"""Booking repository for database operations."""

from sqlalchemy.ext.asyncio import AsyncSession

from devevent.core.base_repository import BaseRepository
from devevent.models.booking import Booking


class BookingRepository(BaseRepository[Booking, int]):
    """Repository for Booking entity operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Booking, session)

    async def count_for_event(self, event_id: int) -> int:
        return await self.count(event_id=event_id)
