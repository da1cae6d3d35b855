"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from shortlinks.api.routes import health, links, redirect
from shortlinks.core.config import settings

# Create root router
api_router = APIRouter()

# Include link routes with API prefix
api_router.include_router(
    links.router,
    prefix=settings.API_PREFIX
)

# Include health check routes with API prefix
api_router.include_router(
    health.router,
    prefix=settings.API_PREFIX
)

# Include redirect routes at the root path (no prefix)
# This makes short URLs available directly at /{code}
api_router.include_router(
    redirect.router
)

__all__ = ["api_router"]
