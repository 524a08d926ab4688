"""
Error classifier for backend calls.

Maps one raw failure signal to one CanonicalError. Rules are evaluated in
order and the first match wins:

    1. Local deadline aborted the attempt   -> timed_out (retry after 10s)
    2. No connection established            -> network_unreachable (5s)
    3. HTTP status dispatch                 -> 401 / 429 / 500 / 502-504
    4. Identity-provider or backend sub-code
    5. Fallback                             -> unknown (30s)

The classifier is pure: it performs no logging or I/O and never raises,
so the same signal always yields an equal CanonicalError.
"""

from typing import Any

from hookline_client.errors.canonical import CanonicalError, dedupe
from hookline_client.errors.kinds import ErrorKind
from hookline_client.errors.signals import (
    FailureSignal,
    ProviderError,
    StatusResponse,
    TransportFailure,
    TransportFailureReason,
    UnrecognizedFailure,
)

SIGN_IN_AGAIN = "Sign in again"

_EXPIRY_MARKERS = ("expired", "token")
_PERSISTENCE_MARKERS = ("database", "connection")
_UPSTREAM_STATUSES = (502, 503, 504)


# (kind, user_message, remediation_steps, retry_after_seconds or None)
_SUB_CODES: dict[str, tuple[ErrorKind, str, tuple[str, ...], int | None]] = {
    "auth/id-token-expired": (
        ErrorKind.CREDENTIAL_EXPIRED,
        "Your session has expired. Please sign in again.",
        (SIGN_IN_AGAIN,),
        None,
    ),
    "auth/id-token-revoked": (
        ErrorKind.CREDENTIAL_REVOKED,
        "Your session has been revoked. Please sign in again.",
        (SIGN_IN_AGAIN,),
        None,
    ),
    "auth/invalid-id-token": (
        ErrorKind.CREDENTIAL_INVALID,
        "Invalid authentication. Please sign in again.",
        (SIGN_IN_AGAIN,),
        None,
    ),
    "auth/argument-error": (
        ErrorKind.CREDENTIAL_INVALID,
        "Invalid authentication. Please sign in again.",
        (SIGN_IN_AGAIN,),
        None,
    ),
    "auth/project-not-found": (
        ErrorKind.IDENTITY_MISCONFIGURED,
        "Authentication service configuration error. Please contact support.",
        ("Contact support",),
        None,
    ),
    "auth/app-not-authorized": (
        ErrorKind.IDENTITY_MISCONFIGURED,
        "Authentication service configuration error. Please contact support.",
        ("Contact support",),
        None,
    ),
    "auth/invalid-api-key": (
        ErrorKind.IDENTITY_MISCONFIGURED,
        "Authentication service configuration error. Please contact support.",
        ("Contact support",),
        None,
    ),
    "auth/quota-exceeded": (
        ErrorKind.IDENTITY_QUOTA_EXCEEDED,
        "Authentication service is temporarily overloaded. Please try again later.",
        ("Try again in a few minutes",),
        300,
    ),
    "auth/internal-error": (
        ErrorKind.IDENTITY_UNAVAILABLE,
        "Authentication service is temporarily unavailable. Please try again shortly.",
        ("Try again in a few minutes",),
        30,
    ),
    "auth/user-disabled": (
        ErrorKind.ACCOUNT_DISABLED,
        "This account has been disabled. Please contact support.",
        ("Contact support",),
        None,
    ),
    "auth/user-not-found": (
        ErrorKind.USER_NOT_FOUND,
        "We couldn't find your account. Please sign in again or create an account.",
        (SIGN_IN_AGAIN, "Create an account"),
        None,
    ),
    "USER_NOT_FOUND": (
        ErrorKind.USER_NOT_FOUND,
        "We couldn't find your account. Please sign in again or create an account.",
        (SIGN_IN_AGAIN, "Create an account"),
        None,
    ),
    "USER_SYNC_FAILED": (
        ErrorKind.USER_SYNC_FAILED,
        "We couldn't sync your account. Please try again shortly.",
        ("Try again in a few moments", "Contact support if issue persists"),
        30,
    ),
}

_NETWORK_GUIDANCE = (
    "Refresh the page",
    "Check if other websites are working",
    "Try switching between WiFi and mobile data",
)
_CREDENTIAL_GUIDANCE = (
    "Clear your browser cache",
    "Try signing in from a different device",
    "Contact support if you continue having issues",
)
_OUTAGE_GUIDANCE = (
    "Check our status page for updates",
    "Try again in a few minutes",
    "Follow us on social media for service updates",
)

# General guidance appended by recovery_instructions(). Kinds not listed
# (timeouts, missing credential, persistence failures) get none.
_KIND_GUIDANCE: dict[ErrorKind, tuple[str, ...]] = {
    ErrorKind.NETWORK_UNREACHABLE: _NETWORK_GUIDANCE,
    ErrorKind.CREDENTIAL_EXPIRED: _CREDENTIAL_GUIDANCE,
    ErrorKind.CREDENTIAL_INVALID: _CREDENTIAL_GUIDANCE,
    ErrorKind.CREDENTIAL_REVOKED: _CREDENTIAL_GUIDANCE,
    ErrorKind.UPSTREAM_UNAVAILABLE: _OUTAGE_GUIDANCE,
}


def _error(
    kind: ErrorKind,
    user_message: str,
    raw_message: str,
    steps: tuple[str, ...],
    retry_after_seconds: int | None,
    cause: Any,
) -> CanonicalError:
    # retryable is derived from the hint so the two can never disagree
    return CanonicalError(
        kind=kind,
        user_message=user_message,
        raw_message=raw_message,
        retryable=retry_after_seconds is not None,
        retry_after_seconds=retry_after_seconds,
        remediation_steps=steps,
        cause=cause,
    )


def _contains(message: str, markers: tuple[str, ...]) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in markers)


def _classify_transport(signal: TransportFailure) -> CanonicalError:
    if signal.reason is TransportFailureReason.DEADLINE_EXCEEDED:
        return _error(
            ErrorKind.TIMED_OUT,
            "The request took too long to complete. Please try again.",
            signal.message or "Request timeout",
            ("Try again", "Check your connection speed"),
            10,
            signal,
        )
    return _error(
        ErrorKind.NETWORK_UNREACHABLE,
        "Unable to connect to our servers. Please check your internet connection.",
        signal.message or "Network connection failed",
        ("Check your internet connection", "Try again in a few moments"),
        5,
        signal,
    )


def _classify_status(signal: StatusResponse) -> CanonicalError | None:
    status = signal.status
    message = signal.message

    if status == 401:
        if not signal.credential_present:
            return _error(
                ErrorKind.CREDENTIAL_MISSING,
                "You need to sign in to continue.",
                message,
                (SIGN_IN_AGAIN,),
                None,
                signal,
            )
        if _contains(message, _EXPIRY_MARKERS):
            return _error(
                ErrorKind.CREDENTIAL_EXPIRED,
                "Your session has expired. Please sign in again.",
                message,
                (SIGN_IN_AGAIN,),
                None,
                signal,
            )
        return _error(
            ErrorKind.CREDENTIAL_INVALID,
            "Authentication failed. Please sign in again.",
            message,
            (SIGN_IN_AGAIN,),
            None,
            signal,
        )

    if status == 429:
        return _error(
            ErrorKind.RATE_LIMITED,
            "Too many attempts. Please wait before trying again.",
            message,
            ("Wait a moment", "Try again later"),
            60,
            signal,
        )

    if status == 500:
        if _contains(message, _PERSISTENCE_MARKERS):
            return _error(
                ErrorKind.PERSISTENCE_FAILURE,
                "Our servers are experiencing issues. Please try again shortly.",
                message,
                ("Try again in a few minutes", "Contact support if issue persists"),
                30,
                signal,
            )
        return _error(
            ErrorKind.UPSTREAM_UNAVAILABLE,
            "Our servers are temporarily unavailable. Please try again shortly.",
            message,
            ("Try again in a few minutes",),
            30,
            signal,
        )

    if status in _UPSTREAM_STATUSES:
        return _error(
            ErrorKind.UPSTREAM_UNAVAILABLE,
            "Our services are temporarily unavailable. Please try again shortly.",
            message,
            ("Try again in a few minutes", "Check our status page"),
            60,
            signal,
        )

    return None


def _classify_sub_code(code: str | None, message: str, cause: Any) -> CanonicalError | None:
    if not code or code not in _SUB_CODES:
        return None
    kind, user_message, steps, retry_after = _SUB_CODES[code]
    return _error(kind, user_message, message or code, steps, retry_after, cause)


def _unknown(message: str, cause: Any) -> CanonicalError:
    return _error(
        ErrorKind.UNKNOWN,
        "An unexpected error occurred. Please try again or contact support.",
        message or "Unknown error",
        ("Try again", "Contact support if issue persists"),
        30,
        cause,
    )


def classify(signal: FailureSignal) -> CanonicalError:
    """
    Classify a raw failure signal into a CanonicalError.

    Args:
        signal: One of TransportFailure, StatusResponse, ProviderError,
            UnrecognizedFailure. Any other object falls through to unknown.

    Returns:
        CanonicalError with kind, display message, remediation steps and
        retry hint set. Never raises.
    """
    if isinstance(signal, TransportFailure):
        return _classify_transport(signal)

    if isinstance(signal, StatusResponse):
        classified = _classify_status(signal)
        if classified is None:
            classified = _classify_sub_code(signal.provider_code, signal.message, signal)
        return classified or _unknown(signal.message, signal)

    if isinstance(signal, ProviderError):
        classified = _classify_sub_code(signal.code, signal.message, signal)
        return classified or _unknown(signal.message, signal)

    if isinstance(signal, UnrecognizedFailure):
        return _unknown(signal.message, signal)

    return _unknown(repr(signal), signal)


def recovery_instructions(error: CanonicalError) -> list[str]:
    """
    Remediation steps extended with general guidance for the error kind.

    Returns:
        Deduplicated list, the error's own steps first.
    """
    guidance = _KIND_GUIDANCE.get(error.kind, ())
    return list(dedupe(error.remediation_steps + guidance))


def is_credential_error(error: CanonicalError) -> bool:
    """True for credential-lifecycle errors."""
    return error.is_credential_error


def requires_sign_in(error: CanonicalError) -> bool:
    """True when the user must sign in again before the call can succeed."""
    return error.requires_sign_in
