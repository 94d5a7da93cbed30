"""HTTP middleware for request logging and tracing."""

from linkdeck.middleware.logging import RequestLoggingMiddleware, request_id_var
from linkdeck.middleware.tracing import TracingMiddleware

__all__ = ["RequestLoggingMiddleware", "TracingMiddleware", "request_id_var"]
