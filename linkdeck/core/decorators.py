"""Decorators for the shortcut manager.

This module contains reusable decorators for common functionality
across the application.
"""

import functools

from fastapi import Request

from linkdeck.core.access_logger import log_page_access


def log_page_access_decorator(kind: str, name_param: str):
    """Page access logging decorator that preserves route function signature.

    Args:
        kind: Entity kind recorded in the access log
        name_param: Name of the route parameter holding the entity name

    Returns:
        callable: Decorator function
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(request: Request, *args, **kwargs):
            ip_address = request.client.host if request.client else "unknown"
            user_agent = request.headers.get("user-agent", "")

            log_page_access(
                kind=kind,
                name=kwargs.get(name_param, ""),
                ip_address=ip_address,
                user_agent=user_agent
            )

            return await func(request, *args, **kwargs)
        return wrapper
    return decorator
