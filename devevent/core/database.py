"""
Async SQLAlchemy store handle and database session management.

The application factory constructs one ``AsyncDBPool`` and stores it on
``app.state``; nothing is connected at import or startup time.

Key Features:
    - Lazy connection: the first session request opens the engine
    - Single-flight initialization: concurrent callers await the same attempt
    - A failed attempt is discarded so the next caller retries cleanly
    - Connection-class failures inside a session reset the handle
    - Automatic rollback on exceptions

Usage:
    pool = AsyncDBPool(database_config)

    async with pool.session() as session:
        result = await session.execute(select(Event))
        events = result.scalars().all()
        await session.commit()

    # Cleanup at shutdown (in lifespan)
    await pool.dispose()
"""

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

import structlog
from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from devevent.core.exceptions import StoreUnavailableError
from devevent.main_config import DatabaseConfig
from devevent.models import Base

__all__ = ["AsyncDBPool", "EngineFactory", "build_engine"]

logger = structlog.get_logger(__name__)

EngineFactory = Callable[[DatabaseConfig], AsyncEngine]

# Errors that mean "the store is unreachable", as opposed to a bad statement.
_CONNECTION_ERRORS = (OperationalError, InterfaceError, OSError)


def build_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create the async engine described by ``config``.

    Pool sizing only applies to server databases; SQLite uses SQLAlchemy's
    default pool for the driver.
    """
    if config.is_sqlite:
        return create_async_engine(config.dsn, echo=config.echo)

    return create_async_engine(
        config.dsn,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_recycle=config.pool_recycle,
        pool_pre_ping=config.pool_pre_ping,
        echo=config.echo,
    )


class AsyncDBPool:
    """Async SQLAlchemy engine + session manager with lazy, single-flight connect."""

    def __init__(self, config: DatabaseConfig, engine_factory: EngineFactory | None = None) -> None:
        """Create an unconnected handle.

        Args:
            config: DatabaseConfig instance with credentials and pool settings
            engine_factory: Builds the engine; defaults to ``build_engine``
        """
        self.config = config
        self._engine_factory = engine_factory or build_engine
        self._engine: AsyncEngine | None = None
        self._maker: async_sessionmaker[AsyncSession] | None = None
        self._pending: asyncio.Future[AsyncEngine] | None = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    async def connect(self) -> AsyncEngine:
        """Return the connected engine, opening it on first use.

        Raises:
            StoreUnavailableError: If the store cannot be reached
        """
        if self._engine is not None:
            return self._engine

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._open())
            self._pending.add_done_callback(self._discard_attempt)

        # shield: a cancelled caller must not cancel the shared attempt
        return await asyncio.shield(self._pending)

    def _discard_attempt(self, attempt: "asyncio.Future[AsyncEngine]") -> None:
        if self._pending is attempt:
            self._pending = None
        if attempt.cancelled() or attempt.exception() is not None:
            logger.warning("store_connect_discarded", dsn_driver=self.config.dsn.split(":", 1)[0])

    async def _open(self) -> AsyncEngine:
        engine = self._engine_factory(self.config)
        try:
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if self.config.create_schema:
                    await conn.run_sync(Base.metadata.create_all)
        except _CONNECTION_ERRORS as exc:
            await engine.dispose()
            logger.error("store_connect_failed", error=str(exc))
            raise StoreUnavailableError(error=str(exc)) from exc
        except Exception:
            await engine.dispose()
            raise

        self._engine = engine
        self._maker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
        logger.info("store_connected")
        return engine

    async def reset(self) -> None:
        """Drop the cached engine so the next caller reconnects."""
        engine, self._engine, self._maker = self._engine, None, None
        if engine is not None:
            await engine.dispose()
            logger.warning("store_handle_reset")

    async def dispose(self) -> None:
        """Dispose engine and clear session maker.

        Should be called during application shutdown to cleanly close
        all database connections.
        """
        await self.reset()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session; rollback on exceptions.

        Usage:
            async with pool.session() as session:
                await session.execute(...)
                await session.commit()

        Raises:
            StoreUnavailableError: If the store is (or becomes) unreachable
        """
        await self.connect()
        assert self._maker is not None

        async with self._maker() as session:
            try:
                yield session
            except _CONNECTION_ERRORS as exc:
                await self.reset()
                raise StoreUnavailableError(error=str(exc)) from exc
            except Exception:
                await session.rollback()
                raise
