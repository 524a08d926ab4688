"""
Best-effort observability for backend calls.

Every event is written to structlog and, when enabled, to Prometheus.
Emission is isolated from the call: an exception raised while emitting is
classified and reported once, and is never propagated to the retry loop.
"""

from typing import Callable

import structlog

from hookline_client.errors.canonical import CanonicalError
from hookline_client.errors.classifier import classify
from hookline_client.errors.signals import UnrecognizedFailure
from hookline_client.monitoring.metrics import (
    client_attempts_total,
    client_call_latency_seconds,
    client_failures_total,
    client_recoveries_total,
    client_retries_total,
)

logger = structlog.get_logger(__name__)


class CallObserver:
    """
    Emits call lifecycle events.

    Attributes:
        metrics_enabled: Whether Prometheus metrics are recorded
    """

    def __init__(self, metrics_enabled: bool = True):
        self.metrics_enabled = metrics_enabled

    def _emit(self, event: str, emit: Callable[[], None]) -> None:
        try:
            emit()
        except Exception as e:
            self._report_emit_failure(event, classify(UnrecognizedFailure(str(e), cause=e)))

    def _report_emit_failure(self, event: str, error: CanonicalError) -> None:
        try:
            logger.warning(
                "Observability event dropped",
                event_name=event,
                kind=error.kind.value,
                raw_message=error.raw_message,
            )
        except Exception:
            # Reported once only; a broken logger must not reach the caller.
            return

    def attempt_started(self, operation: str, attempt: int, max_attempts: int) -> None:
        def emit():
            logger.debug(
                "Sending request",
                operation=operation,
                attempt=attempt,
                max_attempts=max_attempts,
            )
            if self.metrics_enabled:
                client_attempts_total.labels(operation=operation).inc()

        self._emit("attempt_started", emit)

    def attempt_failed(
        self, operation: str, attempt: int, max_attempts: int, error: CanonicalError
    ) -> None:
        def emit():
            logger.warning(
                "Request attempt failed",
                operation=operation,
                attempt=attempt,
                max_attempts=max_attempts,
                kind=error.kind.value,
                retryable=error.retryable,
                retry_after_seconds=error.retry_after_seconds,
                raw_message=error.raw_message,
            )

        self._emit("attempt_failed", emit)

    def retry_scheduled(
        self, operation: str, attempt: int, delay_ms: int, error: CanonicalError
    ) -> None:
        def emit():
            logger.info(
                f"Retrying in {delay_ms}ms",
                operation=operation,
                next_attempt=attempt + 1,
                delay_ms=delay_ms,
                kind=error.kind.value,
            )
            if self.metrics_enabled:
                client_retries_total.labels(operation=operation, kind=error.kind.value).inc()

        self._emit("retry_scheduled", emit)

    def call_succeeded(self, operation: str, attempts: int, latency_s: float) -> None:
        def emit():
            if attempts > 1:
                logger.info(
                    "Request recovered after retry",
                    operation=operation,
                    attempts=attempts,
                    latency_ms=int(latency_s * 1000),
                )
            if self.metrics_enabled:
                if attempts > 1:
                    client_recoveries_total.labels(operation=operation).inc()
                client_call_latency_seconds.labels(
                    operation=operation, outcome="success"
                ).observe(latency_s)

        self._emit("call_succeeded", emit)

    def call_failed(
        self, operation: str, attempts: int, latency_s: float, error: CanonicalError
    ) -> None:
        def emit():
            logger.error(
                "Request failed",
                operation=operation,
                attempts=attempts,
                latency_ms=int(latency_s * 1000),
                kind=error.kind.value,
                retryable=error.retryable,
                user_message=error.user_message,
            )
            if self.metrics_enabled:
                client_failures_total.labels(operation=operation, kind=error.kind.value).inc()
                client_call_latency_seconds.labels(
                    operation=operation, outcome="failed"
                ).observe(latency_s)

        self._emit("call_failed", emit)
