"""
Prometheus metrics for the device license service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Device license metrics
device_renewals_total = Counter(
    "device_renewals_total",
    "Total device renewals",
    ["operation"],
)

grace_tokens_issued_total = Counter(
    "grace_tokens_issued_total",
    "Total grace tokens issued by operators",
)

lifecycle_sweep_transitions_total = Counter(
    "lifecycle_sweep_transitions_total",
    "Devices changed by the lifecycle sweep",
    ["rule"],
)

lifecycle_sweep_runs_total = Counter(
    "lifecycle_sweep_runs_total",
    "Total committed lifecycle sweeps",
)

# Renewal request metrics
renewal_request_transitions_total = Counter(
    "renewal_request_transitions_total",
    "Renewal request status transitions",
    ["status"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
