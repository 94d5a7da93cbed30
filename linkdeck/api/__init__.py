"""API package for the shortcut manager.

This package contains the API layer components including routes,
request/response schemas, and dependency providers.
"""

from linkdeck.api.routes import api_router

__all__ = ["api_router"]
