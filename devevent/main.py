"""
FastAPI application entry point.

``create_app`` wires:
- Structured logging with request correlation IDs
- The lazily connecting store handle (``app.state.db_pool``)
- The image upload collaborator (``app.state.image_uploader``)
- CORS middleware
- Exception handlers and the API routers
- A lifespan that releases the store and HTTP clients on shutdown

Tests build their own app with an in-memory store and a fake uploader:
    app = create_app(db_pool=AsyncDBPool(sqlite_config), image_uploader=FakeUploader())
"""

import uuid

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from devevent.core.database import AsyncDBPool
from devevent.core.exceptions import register_exception_handlers
from devevent.core.lifespan import app_lifespan
from devevent.core.logging_config import setup_logging
from devevent.main_config import (
    cors_config,
    database_config,
    fastapi_config,
    get_cloudinary_config,
    settings,
)
from devevent.routes import ROUTERS
from devevent.services.image_upload import CloudinaryImageUploader, ImageUploader


def create_app(db_pool: AsyncDBPool | None = None, image_uploader: ImageUploader | None = None) -> FastAPI:
    """Build the API with its collaborators; nothing connects until first use."""
    app = FastAPI(
        title=fastapi_config.title,
        description=fastapi_config.description,
        version=fastapi_config.version,
        docs_url=fastapi_config.docs_url,
        redoc_url=fastapi_config.redoc_url,
        openapi_url=fastapi_config.openapi_url,
        lifespan=app_lifespan,
        debug=fastapi_config.debug,
    )

    app.state.db_pool = db_pool or AsyncDBPool(database_config)
    app.state.image_uploader = image_uploader or CloudinaryImageUploader(get_cloudinary_config())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_config.origins_list,
        allow_credentials=cors_config.allow_credentials,
        allow_methods=cors_config.methods_list,
        allow_headers=cors_config.headers_list,
    )

    # Outermost, so every log line of the request carries the id
    app.add_middleware(
        CorrelationIdMiddleware,
        header_name="X-Request-ID",
        generator=lambda: uuid.uuid4().hex[:16],
    )

    register_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router)

    return app


setup_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "devevent.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None,  # keep the structlog setup
    )
