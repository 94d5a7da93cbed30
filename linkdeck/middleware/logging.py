"""
Request logging middleware for FastAPI using Loguru.

Every request is logged at the custom REQUEST level with its method, path,
status, duration and client address. The request id is exposed to the
rest of the request through a context variable and echoed to the client in
the X-Request-ID header.
"""

import time
import uuid
from contextvars import ContextVar

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from linkdeck.api.dependencies import get_client_ip

REQUEST_ID_HEADER = "X-Request-ID"

# Context variable to store request ID across async context
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one structured record per HTTP request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        log_record = {
            "request_id": request_id,
            "client_ip": get_client_ip(request) or "unknown",
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
        }
        if request.query_params:
            log_record["query_params"] = dict(request.query_params)

        logger.log("REQUEST", "{method} {path} {status_code} {process_time_ms}ms", **log_record)
        return response
