"""
Application lifespan management for FastAPI.

Startup does not touch the store: the handle on ``app.state`` connects on
first use. Shutdown releases the engine and the shared HTTP client.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from devevent.core.rest_api import HttpxRestClientPool

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events.

    Shutdown:
        - Dispose the store handle
        - Close the HTTP client pool
    """
    logger.info("app_startup", title=app.title)

    yield

    await app.state.db_pool.dispose()
    await HttpxRestClientPool.dispose()
    logger.info("app_shutdown")
