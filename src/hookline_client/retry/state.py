"""
State machine for one logical call.

    Attempting(n) -> Success
    Attempting(n) -> Classifying -> Retrying(delay) -> Attempting(n+1)
    Attempting(n) -> Classifying -> Failed

The transition out of Classifying is a pure function of the attempt
context and the classified error, so the retry decision can be tested
without any transport.
"""

import random
from dataclasses import dataclass
from enum import Enum

from hookline_client.errors.canonical import CanonicalError
from hookline_client.retry.policy import RetryPolicy, compute_delay, should_retry


class CallState(str, Enum):
    """States of a logical call."""

    ATTEMPTING = "attempting"
    CLASSIFYING = "classifying"
    RETRYING = "retrying"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (CallState.SUCCESS, CallState.FAILED)


@dataclass
class AttemptContext:
    """
    Mutable per-call context, created once per logical call.

    Attributes:
        policy: Retry policy governing this call
        attempt_number: 1-based number of the current attempt
        previous_error: Error from the last failed attempt, if any
    """

    policy: RetryPolicy
    attempt_number: int = 1
    previous_error: CanonicalError | None = None

    def __post_init__(self) -> None:
        if self.attempt_number < 1:
            raise ValueError("attempt_number must be >= 1")

    @property
    def is_retry(self) -> bool:
        return self.attempt_number > 1

    def record_failure(self, error: CanonicalError) -> None:
        self.previous_error = error

    def advance(self) -> None:
        self.attempt_number += 1


@dataclass(frozen=True)
class Transition:
    """Outcome of classifying a failed attempt."""

    state: CallState
    error: CanonicalError
    delay_ms: int = 0


def next_transition(
    context: AttemptContext,
    error: CanonicalError,
    rng: random.Random | None = None,
) -> Transition:
    """
    Decide what follows a failed attempt.

    Args:
        context: Context of the attempt that just failed (not mutated)
        error: Classified error of that attempt
        rng: Random source for backoff jitter

    Returns:
        RETRYING with the backoff delay, or FAILED with a zero delay
    """
    if should_retry(error, context.attempt_number, context.policy):
        return Transition(
            state=CallState.RETRYING,
            error=error,
            delay_ms=compute_delay(context.attempt_number, context.policy, rng),
        )
    return Transition(state=CallState.FAILED, error=error)
