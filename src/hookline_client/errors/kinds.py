"""
Error taxonomy for outbound backend calls.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class ErrorFamily(str, Enum):
    """High-level grouping of error kinds."""

    CREDENTIAL = "credential"
    TRANSPORT = "transport"
    UPSTREAM = "upstream"
    IDENTITY_PROVIDER = "identity_provider"
    RATE_LIMITED = "rate_limited"
    UNKNOWN = "unknown"


class ErrorKind(str, Enum):
    """
    Canonical kind of a failed backend call.

    Every raw failure (no response, HTTP status, identity-provider sub-code)
    is reduced to exactly one of these values by the classifier.
    """

    # Credential lifecycle
    CREDENTIAL_EXPIRED = "credential_expired"
    CREDENTIAL_INVALID = "credential_invalid"
    CREDENTIAL_REVOKED = "credential_revoked"
    CREDENTIAL_MISSING = "credential_missing"

    # Transport
    NETWORK_UNREACHABLE = "network_unreachable"
    TIMED_OUT = "timed_out"

    # Upstream
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    PERSISTENCE_FAILURE = "persistence_failure"
    USER_NOT_FOUND = "user_not_found"
    USER_SYNC_FAILED = "user_sync_failed"

    # Identity provider
    IDENTITY_UNAVAILABLE = "identity_unavailable"
    IDENTITY_MISCONFIGURED = "identity_misconfigured"
    IDENTITY_QUOTA_EXCEEDED = "identity_quota_exceeded"
    ACCOUNT_DISABLED = "account_disabled"

    RATE_LIMITED = "rate_limited"
    UNKNOWN = "unknown"

    @property
    def family(self) -> ErrorFamily:
        """Family this kind belongs to."""
        return _FAMILIES[self]


_FAMILIES: dict[ErrorKind, ErrorFamily] = {
    ErrorKind.CREDENTIAL_EXPIRED: ErrorFamily.CREDENTIAL,
    ErrorKind.CREDENTIAL_INVALID: ErrorFamily.CREDENTIAL,
    ErrorKind.CREDENTIAL_REVOKED: ErrorFamily.CREDENTIAL,
    ErrorKind.CREDENTIAL_MISSING: ErrorFamily.CREDENTIAL,
    ErrorKind.NETWORK_UNREACHABLE: ErrorFamily.TRANSPORT,
    ErrorKind.TIMED_OUT: ErrorFamily.TRANSPORT,
    ErrorKind.UPSTREAM_UNAVAILABLE: ErrorFamily.UPSTREAM,
    ErrorKind.PERSISTENCE_FAILURE: ErrorFamily.UPSTREAM,
    ErrorKind.USER_NOT_FOUND: ErrorFamily.UPSTREAM,
    ErrorKind.USER_SYNC_FAILED: ErrorFamily.UPSTREAM,
    ErrorKind.IDENTITY_UNAVAILABLE: ErrorFamily.IDENTITY_PROVIDER,
    ErrorKind.IDENTITY_MISCONFIGURED: ErrorFamily.IDENTITY_PROVIDER,
    ErrorKind.IDENTITY_QUOTA_EXCEEDED: ErrorFamily.IDENTITY_PROVIDER,
    ErrorKind.ACCOUNT_DISABLED: ErrorFamily.IDENTITY_PROVIDER,
    ErrorKind.RATE_LIMITED: ErrorFamily.RATE_LIMITED,
    ErrorKind.UNKNOWN: ErrorFamily.UNKNOWN,
}

CREDENTIAL_KINDS: frozenset[ErrorKind] = frozenset(
    kind for kind, family in _FAMILIES.items() if family is ErrorFamily.CREDENTIAL
)

# The only kinds a CanonicalError may flag as retryable.
RETRYABLE_KINDS: frozenset[ErrorKind] = frozenset(
    {
        ErrorKind.NETWORK_UNREACHABLE,
        ErrorKind.TIMED_OUT,
        ErrorKind.UPSTREAM_UNAVAILABLE,
        ErrorKind.PERSISTENCE_FAILURE,
        ErrorKind.USER_SYNC_FAILED,
        ErrorKind.IDENTITY_UNAVAILABLE,
        ErrorKind.IDENTITY_QUOTA_EXCEEDED,
        ErrorKind.RATE_LIMITED,
        ErrorKind.UNKNOWN,
    }
)
