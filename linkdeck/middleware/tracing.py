"""Custom tracing middleware recording a span and request metrics per request."""

import time

from fastapi import Request
from opentelemetry.trace import SpanKind
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from linkdeck.core.telemetry import get_meter, get_tracer

tracer = get_tracer("linkdeck.middleware")
meter = get_meter("linkdeck.middleware")

request_counter = meter.create_counter(
    name="linkdeck.http.requests",
    description="Number of HTTP requests",
    unit="1",
)

request_duration = meter.create_histogram(
    name="linkdeck.http.duration",
    description="Duration of HTTP requests",
    unit="ms",
)


class TracingMiddleware(BaseHTTPMiddleware):
    """Middleware that adds a server span and request metrics for each request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        attributes = {
            "http.method": method,
            "http.path": path,
            "http.flavor": request.scope.get("http_version", ""),
            "http.host": request.headers.get("host", ""),
        }
        with tracer.start_as_current_span(
            f"{method} {path}",
            attributes=attributes,
            kind=SpanKind.SERVER,
        ) as span:
            response = await call_next(request)
            span.set_attribute("http.status_code", response.status_code)

        # Raw paths carry entity names; keep metric cardinality to the method and status
        metric_attributes = {"http.method": method, "http.status_code": response.status_code}
        request_counter.add(1, metric_attributes)
        request_duration.record((time.perf_counter() - start_time) * 1000, metric_attributes)
        return response
