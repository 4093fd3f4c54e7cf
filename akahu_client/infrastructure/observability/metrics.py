"""Prometheus metrics for Akahu API latency, failures and retries"""

from prometheus_client import Counter, Gauge, Histogram

# Request metrics
request_latency_histogram = Histogram(
    "akahu_request_duration_seconds",
    "Akahu API response time",
    ["method", "status"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

response_counter = Counter(
    "akahu_responses_total",
    "Akahu API responses by status class",
    ["method", "status_class"],  # 2xx | 4xx | 5xx
)

transport_failure_counter = Counter(
    "akahu_transport_failures_total",
    "Akahu API calls that produced no HTTP response",
    ["method"],
)

# Middleware metrics
retry_counter = Counter(
    "akahu_retries_total",
    "Akahu API calls retried after a failure",
)

in_flight_gauge = Gauge(
    "akahu_requests_in_flight",
    "Akahu API calls currently admitted by the concurrency limit",
)


def status_class(status_code: int) -> str:
    return f"{status_code // 100}xx"


def record_response(method: str, status_code: int, duration_seconds: float) -> None:
    """Record one completed Akahu API call"""
    request_latency_histogram.labels(method=method, status=str(status_code)).observe(duration_seconds)
    response_counter.labels(method=method, status_class=status_class(status_code)).inc()


def record_transport_failure(method: str) -> None:
    transport_failure_counter.labels(method=method).inc()
