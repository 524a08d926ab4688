"""
Retry policies and backoff math.

A RetryPolicy bounds how many attempts one logical call may make and how
long it waits between them:

    delay(n) = min(base * multiplier^(n-1), max) + U[0, 0.1 * that]

Three named policies cover the call sites:
    - STANDARD: ordinary reads (3 attempts, 1s base)
    - CRITICAL: calls that block a user-visible workflow (5 attempts, 2s base, 60s cap)
    - ADVISORY: non-essential status checks (2 attempts)
"""

import math
import random

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hookline_client.config import Settings
from hookline_client.errors.canonical import CanonicalError
from hookline_client.errors.kinds import RETRYABLE_KINDS, ErrorKind

JITTER_RATIO = 0.1


class RetryPolicy(BaseModel):
    """
    Attempt count and delay parameters for one logical call.

    Frozen so a named policy can be shared by every call site; use
    ``with_overrides`` to derive a variant.
    """
    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1, description="Total attempts, including the first")
    base_delay_ms: int = Field(default=1000, ge=0, description="Delay before the second attempt")
    max_delay_ms: int = Field(default=30000, ge=0, description="Ceiling for the exponential delay")
    backoff_multiplier: float = Field(default=2.0, ge=1.0, description="Growth factor per attempt")
    retryable_kinds: frozenset[ErrorKind] = Field(
        default=RETRYABLE_KINDS,
        description="Kinds this policy is willing to retry",
    )

    @model_validator(mode="after")
    def _check_delays(self) -> "RetryPolicy":
        if self.base_delay_ms > self.max_delay_ms:
            raise ValueError("base_delay_ms must be <= max_delay_ms")
        return self

    def with_overrides(self, **overrides) -> "RetryPolicy":
        """Return a copy with the given fields replaced (re-validated)."""
        return RetryPolicy(**{**self.model_dump(), **overrides})

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        """Build the standard policy from configuration."""
        return cls(
            max_attempts=settings.RETRY_MAX_ATTEMPTS,
            base_delay_ms=settings.RETRY_BASE_DELAY_MS,
            max_delay_ms=settings.RETRY_MAX_DELAY_MS,
            backoff_multiplier=settings.RETRY_BACKOFF_MULTIPLIER,
        )


STANDARD = RetryPolicy()
CRITICAL = RetryPolicy(max_attempts=5, base_delay_ms=2000, max_delay_ms=60000)
ADVISORY = RetryPolicy(max_attempts=2, base_delay_ms=1000)


def should_retry(error: CanonicalError, attempt_number: int, policy: RetryPolicy) -> bool:
    """
    Decide whether a failed attempt may be followed by another one.

    Args:
        error: Classified error from the attempt that just failed
        attempt_number: 1-based number of that attempt
        policy: Active retry policy

    Returns:
        True only if attempts remain and the error is retryable under the policy
    """
    return (
        attempt_number < policy.max_attempts
        and error.retryable
        and error.kind in policy.retryable_kinds
    )


def compute_delay(
    attempt_number: int, policy: RetryPolicy, rng: random.Random | None = None
) -> int:
    """
    Backoff delay in milliseconds after the given attempt failed.

    Args:
        attempt_number: 1-based number of the attempt that failed
        policy: Active retry policy
        rng: Random source for jitter (module-level random when None)

    Returns:
        Delay in whole milliseconds, at most ``max_delay_ms * 1.1``
    """
    exponent = max(attempt_number - 1, 0)
    try:
        raw = policy.base_delay_ms * policy.backoff_multiplier ** exponent
    except OverflowError:
        raw = math.inf
    delay = min(raw, policy.max_delay_ms)

    uniform = rng.uniform if rng is not None else random.uniform
    jitter = uniform(0, JITTER_RATIO * delay)
    return math.floor(delay + jitter)
