"""
FastAPI dependency injection functions for database sessions and services.

Both collaborators live on ``app.state`` (set by the application factory),
so tests swap them by passing their own instances to ``create_app`` or via
``app.dependency_overrides``.

Usage in FastAPI Routes:
    from fastapi import Depends
    from sqlalchemy.ext.asyncio import AsyncSession
    from devevent.core.dependencies import get_db

    @router.get("/events")
    async def list_events(db: AsyncSession = Depends(get_db)):
        result = await db.execute(select(Event))
        return result.scalars().all()

Design Notes:
    - The first request that needs a session opens the store (single-flight)
    - Automatic rollback on exceptions
    - Session cleanup guaranteed via context manager
"""

from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from devevent.core.database import AsyncDBPool
from devevent.services.image_upload import ImageUploader


def get_db_pool(request: Request) -> AsyncDBPool:
    return request.app.state.db_pool


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency for async database session.

    Raises:
        StoreUnavailableError: If the store cannot be reached (503)
    """
    async with get_db_pool(request).session() as session:
        yield session


def get_image_uploader(request: Request) -> ImageUploader:
    """Configured image upload collaborator."""
    return request.app.state.image_uploader
