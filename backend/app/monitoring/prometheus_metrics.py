"""
Prometheus metrics for CoachConnect.

Service timings come from the @measure_operation decorator on BaseService;
domain counters track booking transitions, invite outcomes, review writes
and notification delivery.
"""

from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Custom registry so repeated app construction in tests doesn't collide with defaults
REGISTRY = CollectorRegistry()

http_request_duration_seconds = Histogram(
    "coachconnect_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

service_operation_duration_seconds = Histogram(
    "coachconnect_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "coachconnect_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "coachconnect_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

booking_transitions_total = Counter(
    "coachconnect_booking_transitions_total",
    "Booking status transitions that were applied",
    ["to_status"],
    registry=REGISTRY,
)

review_invite_outcomes_total = Counter(
    "coachconnect_review_invite_outcomes_total",
    "Review invites leaving the pending state, by outcome",
    ["outcome"],  # accepted | declined | expired
    registry=REGISTRY,
)

reviews_submitted_total = Counter(
    "coachconnect_reviews_submitted_total",
    "Reviews written",
    ["source"],  # invite | direct | session
    registry=REGISTRY,
)

notifications_total = Counter(
    "coachconnect_notifications_total",
    "Notification dispatch attempts by kind and result",
    ["kind", "status"],  # status: sent | failed
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Manages Prometheus metrics collection and exposure."""

    @staticmethod
    def record_http_request(method: str, endpoint: str, duration: float, status_code: int) -> None:
        labels = {"method": method, "endpoint": endpoint, "status_code": str(status_code)}
        http_request_duration_seconds.labels(**labels).observe(duration)

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'BookingService')
            operation: Operation/method name (e.g., 'accept_booking')
            duration: Operation duration in seconds
            status: Operation status ('success' or 'error')
            error_type: Type of error if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(duration)
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def inc_booking_transition(to_status: str) -> None:
        booking_transitions_total.labels(to_status=to_status).inc()

    @staticmethod
    def inc_invite_outcome(outcome: str) -> None:
        review_invite_outcomes_total.labels(outcome=outcome).inc()

    @staticmethod
    def inc_review_submitted(source: str) -> None:
        reviews_submitted_total.labels(source=source).inc()

    @staticmethod
    def inc_notification(kind: str, status: str) -> None:
        notifications_total.labels(kind=kind, status=status).inc()

    @staticmethod
    def get_metrics() -> bytes:
        """Generate Prometheus metrics in exposition format."""
        return cast(bytes, generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        return cast(str, CONTENT_TYPE_LATEST)


# Singleton instance
prometheus_metrics = PrometheusMetrics()
