from __future__ import annotations

from app.api.routes.fabrics import router as fabrics_router
from app.api.routes.gallery import router as gallery_router
from app.api.routes.generate import router as generate_router
from app.api.routes.health import router as health_router
from app.api.routes.rate_limit import router as rate_limit_router
from app.api.routes.upload import router as upload_router

__all__ = [
    "fabrics_router",
    "gallery_router",
    "generate_router",
    "health_router",
    "rate_limit_router",
    "upload_router",
]
