"""
Prometheus metrics for the Courtside platform.

Service operation timings are fed by ``BaseService.measure_operation``;
booking and resource-lock outcomes are recorded by the booking coordinator
and the lock manager.
"""

from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Own registry so a re-imported app never registers a collector twice
REGISTRY = CollectorRegistry()

OPERATION_BUCKETS = (0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)

service_operation_seconds = Histogram(
    "courtside_service_operation_duration_seconds",
    "Wall time of one service call",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=OPERATION_BUCKETS,
)

service_calls = Counter(
    "courtside_service_operations_total",
    "Service calls by result",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

service_errors = Counter(
    "courtside_errors_total",
    "Failed service calls by exception class",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

lock_events = Counter(
    "courtside_resource_lock_total",
    "Resource lock acquire/release attempts",
    ["action", "outcome"],
    registry=REGISTRY,
)

booking_outcomes = Counter(
    "courtside_booking_outcomes_total",
    "Results of booking create and cancel requests",
    ["operation", "outcome"],
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Thin recording facade over the module collectors."""

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record one measured service call.

        Args:
            service: Service class name, e.g. ``BookingService``
            operation: Method name, e.g. ``create_booking``
            duration: Elapsed seconds
            status: ``success`` or ``error``
            error_type: Exception class name when the call failed
        """
        service_operation_seconds.labels(service=service, operation=operation).observe(duration)
        service_calls.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            service_errors.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def record_resource_lock(action: str, outcome: str) -> None:
        lock_events.labels(action=action, outcome=outcome).inc()

    @staticmethod
    def record_booking_outcome(operation: str, outcome: str) -> None:
        booking_outcomes.labels(operation=operation, outcome=outcome).inc()

    @staticmethod
    def get_metrics() -> bytes:
        """Render the registry in the text exposition format."""
        return cast(bytes, generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        return cast(str, CONTENT_TYPE_LATEST)


prometheus_metrics = PrometheusMetrics()
