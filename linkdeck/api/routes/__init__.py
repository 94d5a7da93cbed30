"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from linkdeck.api.routes import collections, frontend, health, shortcuts
from linkdeck.core.config import settings

# Create root router
api_router = APIRouter()

# Versioned resource routes, e.g. /api/v1/shortcuts
api_router.include_router(
    shortcuts.router,
    prefix=f"{settings.API_PREFIX}{settings.API_VERSION_PREFIX}"
)
api_router.include_router(
    collections.router,
    prefix=f"{settings.API_PREFIX}{settings.API_VERSION_PREFIX}"
)

# Health check routes with API prefix
api_router.include_router(
    health.router,
    prefix=settings.API_PREFIX
)

# Shortcut/collection pages and crawler files at the root path (no prefix)
api_router.include_router(
    frontend.router
)

__all__ = ["api_router"]
