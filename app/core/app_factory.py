from __future__ import annotations

"""Application factory for FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers, media
serving) so tests can build a fresh instance per module.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.api.dependencies import close_clients
from app.api.routes import (
    fabrics_router,
    gallery_router,
    generate_router,
    health_router,
    rate_limit_router,
    upload_router,
)
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release adapter clients (KV HTTP pool) on shutdown."""
    yield
    await close_clients()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Sofa Visualizer API",
        description=(
            "Upload a photo of a sofa, pick a fabric from the catalog and get an "
            "AI-rendered preview of the sofa re-upholstered in that fabric. "
            "Anonymous visitors are identified by cookie, limited to a daily "
            "number of generations and can keep a small gallery of results. "
            "Catalog writes require the X-Admin-Key header."
        ),
        version="0.1.0",
        debug=settings.app.debug,
        lifespan=lifespan,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(fabrics_router, prefix="/api")
    app.include_router(upload_router, prefix="/api")
    app.include_router(generate_router, prefix="/api")
    app.include_router(gallery_router, prefix="/api")
    app.include_router(rate_limit_router, prefix="/api")
    app.include_router(health_router)

    # Uploaded and generated images
    media_root = Path(settings.media.root_dir)
    media_root.mkdir(parents=True, exist_ok=True)
    app.mount(settings.media.base_url, StaticFiles(directory=media_root), name="media")

    # OpenAPI customizations (security scheme, tags)
    apply_openapi_customizations(app)

    logger.info(
        "app.created",
        extra={
            "app_env": settings.app_env,
            "kv_backend": settings.kv.backend,
            "daily_limit": settings.app.daily_limit,
        },
    )
    return app
