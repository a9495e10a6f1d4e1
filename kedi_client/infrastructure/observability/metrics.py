"""Prometheus metrics for RevenueCat calls and overview aggregation"""

from prometheus_client import Counter, Histogram

# Dispatch metrics
api_request_counter = Counter(
    "revenuecat_requests_total",
    "Total RevenueCat API calls dispatched",
    ["endpoint", "outcome"],  # success | transport | service | decoding
)

api_latency_histogram = Histogram(
    "revenuecat_request_latency_seconds",
    "RevenueCat API response time",
    ["endpoint"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

api_service_error_counter = Counter(
    "revenuecat_service_errors_total",
    "RevenueCat calls answered with an error status",
    ["endpoint", "status"],
)

# Aggregation metrics
overview_section_failures_counter = Counter(
    "overview_section_failures_total",
    "Overview sections whose sub-call failed",
    ["section"],  # summary | chart name
)


def record_dispatch(endpoint: str, outcome: str, duration_seconds: float, status_code: int | None = None) -> None:
    """Record one dispatched call"""
    api_request_counter.labels(endpoint=endpoint, outcome=outcome).inc()
    api_latency_histogram.labels(endpoint=endpoint).observe(duration_seconds)

    if outcome == "service" and status_code is not None:
        api_service_error_counter.labels(endpoint=endpoint, status=str(status_code)).inc()
