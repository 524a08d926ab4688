"""
Canonical error raised to callers of the backend client.

Whatever produced a failure (dropped connection, HTTP status, identity
provider sub-code), callers only ever see a CanonicalError: one kind, a
display-ready message and an ordered list of remediation steps.
"""

from typing import Any, Iterable

from hookline_client.errors.kinds import CREDENTIAL_KINDS, RETRYABLE_KINDS, ErrorKind


def dedupe(steps: Iterable[str]) -> tuple[str, ...]:
    """Drop repeated steps, keeping first occurrences in order."""
    return tuple(dict.fromkeys(steps))


class CanonicalError(Exception):
    """
    Unified representation of a failed backend call.

    Attributes:
        kind: Canonical error kind
        raw_message: Message taken from the raw failure (for logs)
        user_message: Fixed, display-ready message (never empty)
        retryable: Whether the failure may succeed on a later attempt
        retry_after_seconds: Hint for how long to wait before retrying
        remediation_steps: Ordered, deduplicated steps for the user
        cause: The raw signal or exception this error was built from
    """

    def __init__(
        self,
        kind: ErrorKind,
        user_message: str,
        raw_message: str = "",
        retryable: bool = False,
        retry_after_seconds: int | None = None,
        remediation_steps: Iterable[str] = (),
        cause: Any = None,
    ) -> None:
        if not user_message:
            raise ValueError("user_message must not be empty")
        if retryable and kind not in RETRYABLE_KINDS:
            raise ValueError(f"{kind.value} cannot be retryable")
        if retry_after_seconds is not None and retry_after_seconds < 0:
            raise ValueError("retry_after_seconds must be >= 0")

        self.kind = kind
        self.raw_message = raw_message
        self.user_message = user_message
        self.retryable = retryable
        self.retry_after_seconds = retry_after_seconds
        self.remediation_steps = dedupe(remediation_steps)
        self.cause = cause

        super().__init__(f"[{kind.value}] {raw_message or user_message}")

    @property
    def is_credential_error(self) -> bool:
        """True for credential-lifecycle kinds (expired, invalid, revoked, missing)."""
        return self.kind in CREDENTIAL_KINDS

    @property
    def requires_sign_in(self) -> bool:
        """True when the only way forward is a fresh sign-in."""
        return self.is_credential_error and not self.retryable

    def to_dict(self) -> dict[str, Any]:
        """Serializable view, without the opaque cause."""
        return {
            "kind": self.kind.value,
            "raw_message": self.raw_message,
            "user_message": self.user_message,
            "retryable": self.retryable,
            "retry_after_seconds": self.retry_after_seconds,
            "remediation_steps": list(self.remediation_steps),
        }

    def _key(self) -> tuple:
        return (
            self.kind,
            self.raw_message,
            self.user_message,
            self.retryable,
            self.retry_after_seconds,
            self.remediation_steps,
        )

    def __eq__(self, other: object) -> bool:
        # Value equality over the public fields; the cause is not compared.
        if not isinstance(other, CanonicalError):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return (
            f"CanonicalError(kind={self.kind.value}, "
            f"retryable={self.retryable}, "
            f"retry_after_seconds={self.retry_after_seconds})"
        )
