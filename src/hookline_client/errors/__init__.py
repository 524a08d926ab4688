"""
Error taxonomy and classification for backend calls.

Components:
- ErrorKind / ErrorFamily: closed taxonomy of failure kinds
- Failure signals: TransportFailure, StatusResponse, ProviderError, UnrecognizedFailure
- CanonicalError: the only exception callers receive
- classify: pure mapping from signal to CanonicalError
"""

from hookline_client.errors.canonical import CanonicalError
from hookline_client.errors.classifier import (
    classify,
    is_credential_error,
    recovery_instructions,
    requires_sign_in,
)
from hookline_client.errors.kinds import (
    CREDENTIAL_KINDS,
    RETRYABLE_KINDS,
    ErrorFamily,
    ErrorKind,
)
from hookline_client.errors.signals import (
    FailureSignal,
    ProviderError,
    StatusResponse,
    TransportFailure,
    TransportFailureReason,
    UnrecognizedFailure,
    signal_from_exception,
    status_response_from_body,
)

__all__ = [
    "CanonicalError",
    "classify",
    "is_credential_error",
    "recovery_instructions",
    "requires_sign_in",
    "CREDENTIAL_KINDS",
    "RETRYABLE_KINDS",
    "ErrorFamily",
    "ErrorKind",
    "FailureSignal",
    "ProviderError",
    "StatusResponse",
    "TransportFailure",
    "TransportFailureReason",
    "UnrecognizedFailure",
    "signal_from_exception",
    "status_response_from_body",
]
