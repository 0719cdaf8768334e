"""Prometheus metric definitions for the checkout function."""

from fastapi import Response
from prometheus_client import Counter, Histogram, generate_latest


checkout_requests_total = Counter("checkout_requests_total", "Total checkout requests", ["service"])
checkout_success_total = Counter("checkout_success_total", "Total charges created", ["service"])
checkout_failure_total = Counter(
    "checkout_failure_total",
    "Total failed checkouts by error kind",
    ["service", "reason"],
)
checkout_latency_seconds = Histogram("checkout_latency_seconds", "Checkout latency seconds", ["service"])
provider_request_duration_seconds = Histogram(
    "provider_request_duration_seconds",
    "Provider API call duration seconds",
    ["service", "operation", "status_code"],
)
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
