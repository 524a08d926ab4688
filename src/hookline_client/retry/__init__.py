"""
Retry policies and call state machine.

Components:
    - RetryPolicy: attempt count and backoff parameters (STANDARD, CRITICAL, ADVISORY)
    - should_retry / compute_delay: pure retry decision and jittered backoff
    - AttemptContext / next_transition: per-call state machine

Usage:
    >>> from hookline_client.retry import CRITICAL, AttemptContext, next_transition
    >>> context = AttemptContext(policy=CRITICAL)
    >>> transition = next_transition(context, error)
"""

from hookline_client.retry.policy import (
    ADVISORY,
    CRITICAL,
    STANDARD,
    RetryPolicy,
    compute_delay,
    should_retry,
)
from hookline_client.retry.state import (
    AttemptContext,
    CallState,
    Transition,
    next_transition,
)

__all__ = [
    "ADVISORY",
    "CRITICAL",
    "STANDARD",
    "RetryPolicy",
    "compute_delay",
    "should_retry",
    "AttemptContext",
    "CallState",
    "Transition",
    "next_transition",
]
