"""
Prometheus metrics middleware for HTTP request tracking.

Records duration and status code per request, labelled by the matched
route template so ids and tokens don't explode label cardinality.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..monitoring.prometheus_metrics import prometheus_metrics

METRICS_PATH = "/metrics"


def _endpoint_label(request: Request) -> str:
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    if template:
        return str(template)
    return "unmatched"


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for HTTP requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == METRICS_PATH:
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        prometheus_metrics.record_http_request(
            method=request.method,
            endpoint=_endpoint_label(request),
            duration=time.time() - start_time,
            status_code=response.status_code,
        )
        return response
