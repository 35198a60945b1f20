"""
Generic repository base class for SQLAlchemy models with async CRUD operations.

Features:
    - Type-safe operations: BaseRepository[ModelType, IDType]
    - Create, read, update and count (records are never deleted by this service)
    - Rollback on failed writes

Repositories only flush; committing is left to the caller so a request's
writes land together.

Usage:
    class BookingRepository(BaseRepository[Booking, int]):
        async def count_for_event(self, event_id: int) -> int:
            return await self.count(event_id=event_id)

    async with pool.session() as session:
        repo = BookingRepository(session)
        booking = await repo.create(event_id=1, slug="pycon", email="a@b.co")
        await session.commit()
"""

from abc import ABC
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from devevent.models.base import utc_now

__all__ = ["BaseRepository"]

ModelType = TypeVar("ModelType")
IDType = TypeVar("IDType", int, str)


class BaseRepository(Generic[ModelType, IDType], ABC):
    """Base repository with async CRUD operations for SQLAlchemy models."""

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        self.model = model
        self.session = session

    async def create(self, **kwargs: Any) -> ModelType:
        """Insert a row and return it with store-assigned columns loaded.

        Raises:
            IntegrityError: On constraint violations (after rollback)
        """
        try:
            instance = self.model(**kwargs)
            self.session.add(instance)
            await self.session.flush()
            await self.session.refresh(instance)
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        return instance

    async def get_by_id(self, id_: IDType, *, fresh: bool = False) -> ModelType | None:
        """Get record by primary key.

        Args:
            id_: Primary key
            fresh: Overwrite any copy already held by the session
        """
        query = select(self.model).where(self.model.id == id_)
        if fresh:
            query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by(self, **filters: Any) -> ModelType | None:
        """Single record matching every ``field=value`` pair, or None."""
        query = select(self.model).filter_by(**filters)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def update(self, id_: IDType, **kwargs: Any) -> ModelType | None:
        """Update record by ID and return the refreshed instance.

        ``updated_at`` is always bumped, even when the values are unchanged.

        Returns:
            Updated instance or None when no row matched
        """
        kwargs.setdefault("updated_at", utc_now())
        try:
            result = await self.session.execute(
                update(self.model).where(self.model.id == id_).values(**kwargs)
            )
            await self.session.flush()
        except SQLAlchemyError:
            await self.session.rollback()
            raise

        if result.rowcount == 0:
            return None
        return await self.get_by_id(id_, fresh=True)

    async def count(self, **filters: Any) -> int:
        """Number of records matching every ``field=value`` pair."""
        query = select(func.count()).select_from(self.model).filter_by(**filters)
        result = await self.session.execute(query)
        return result.scalar_one()
