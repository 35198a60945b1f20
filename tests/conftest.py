"""Shared fixtures: in-memory SQLite store, sessions, fake uploader, API client."""

from collections.abc import Callable
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from devevent.core.database import AsyncDBPool
from devevent.main import create_app
from devevent.main_config import DatabaseConfig
from devevent.schemas import EventDraft

SQLITE_URL = "sqlite+aiosqlite://"


def sqlite_engine(config: DatabaseConfig) -> AsyncEngine:
    """One shared in-memory connection, so every session sees the same tables."""
    return create_async_engine(
        config.dsn,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


class FakeUploader:
    """Records uploads and hands back a predictable URL."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    async def upload(
        self, data: bytes, *, filename: str, content_type: str, folder: str | None = None
    ) -> str:
        self.calls.append({"size": len(data), "filename": filename, "content_type": content_type})
        return f"https://images.test/{filename}"


@pytest.fixture
def db_config() -> DatabaseConfig:
    return DatabaseConfig(url=SQLITE_URL, create_schema=True)


@pytest.fixture
async def db_pool(db_config: DatabaseConfig):
    pool = AsyncDBPool(db_config, engine_factory=sqlite_engine)
    yield pool
    await pool.dispose()


@pytest.fixture
async def session(db_pool: AsyncDBPool):
    async with db_pool.session() as session:
        yield session


@pytest.fixture
def event_fields() -> Callable[..., dict[str, Any]]:
    """Valid raw event fields; keyword arguments override individual fields."""

    def _make(**overrides: Any) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "title": "PyCon Berlin 2025",
            "description": "Three days of Python talks.",
            "overview": "Talks, sprints and workshops for the Python community.",
            "image": "https://images.test/pycon.png",
            "venue": "bcc Berlin Congress Center",
            "location": "Berlin, Germany",
            "date": "2025-06-12",
            "time": "9:00",
            "mode": "offline",
            "audience": "Developers",
            "agenda": ["Keynote", "Talks", "Sprints"],
            "organizer": "Python Software Verband",
            "tags": ["python", "community"],
        }
        fields.update(overrides)
        return fields

    return _make


@pytest.fixture
def make_draft(event_fields) -> Callable[..., EventDraft]:
    def _make(**overrides: Any) -> EventDraft:
        return EventDraft(**event_fields(**overrides))

    return _make


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def client(db_config: DatabaseConfig, uploader: FakeUploader):
    """API client over a fresh in-memory store.

    The store connects lazily on the client's own event loop.
    """
    app = create_app(
        db_pool=AsyncDBPool(db_config, engine_factory=sqlite_engine),
        image_uploader=uploader,
    )
    with TestClient(app) as test_client:
        yield test_client
