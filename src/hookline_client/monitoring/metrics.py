"""Custom Prometheus metrics for the backend client.

Alert rules should be configured for:
- client_failures_total (calls surfacing an error to the user)
- client_retries_total (high retry rate indicates backend instability)
"""

from prometheus_client import Counter, Histogram

# === Attempt Metrics ===

client_attempts_total = Counter(
    "client_attempts_total",
    "Total transport attempts by operation",
    ["operation"],
)

client_retries_total = Counter(
    "client_retries_total",
    "Total retries scheduled by operation and error kind",
    ["operation", "kind"],
)
"""
Retries scheduled after a failed attempt.

Labels:
- operation: Logical operation name (e.g., users.get_profile)
- kind: ErrorKind value that triggered the retry

Alert thresholds:
- WARN: retry rate > 10% of attempts
- CRITICAL: retry rate > 30% of attempts
"""

# === Outcome Metrics ===

client_recoveries_total = Counter(
    "client_recoveries_total",
    "Calls that succeeded after at least one retry",
    ["operation"],
)

client_failures_total = Counter(
    "client_failures_total",
    "Calls that surfaced a CanonicalError by operation and error kind",
    ["operation", "kind"],
)

client_call_latency_seconds = Histogram(
    "client_call_latency_seconds",
    "Logical call latency in seconds, including backoff delays",
    ["operation", "outcome"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 180.0],
)
"""
Logical call latency histogram.

Labels:
- operation: Logical operation name
- outcome: success, failed

Buckets span a fast read up to a Critical call exhausting its attempts.
"""
