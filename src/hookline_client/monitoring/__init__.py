"""Monitoring and metrics instrumentation for the backend client.

Exports Prometheus metrics and the best-effort call observer.
"""

from hookline_client.monitoring.events import CallObserver
from hookline_client.monitoring.metrics import (
    client_attempts_total,
    client_call_latency_seconds,
    client_failures_total,
    client_recoveries_total,
    client_retries_total,
)

__all__ = [
    "CallObserver",
    "client_attempts_total",
    "client_call_latency_seconds",
    "client_failures_total",
    "client_recoveries_total",
    "client_retries_total",
]
