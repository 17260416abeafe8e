"""
Prometheus metrics endpoint for monitoring infrastructure.

Public (no authentication) as is standard for scrape targets. Exposes the
metrics collected by the HTTP middleware and @measure_operation.
"""

from fastapi import APIRouter, Response

from app.monitoring.prometheus_metrics import prometheus_metrics

router = APIRouter(tags=["monitoring"])


@router.get("", include_in_schema=False, response_class=Response, response_model=None)
def get_prometheus_metrics() -> Response:
    """Expose Prometheus metrics in the text exposition format."""
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
        headers={
            "Cache-Control": "no-cache, no-store, must-revalidate",
            "Pragma": "no-cache",
            "Expires": "0",
        },
    )
