"""
Raw failure signals accepted by the classifier.

Each failed attempt is described by exactly one of the variants below.
The classifier dispatches on the variant type, so a new failure shape
means a new variant here and a new branch in ``classify``.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from hookline_client.transport.exceptions import (
    TransportError,
    TransportTimeoutError,
)


class TransportFailureReason(str, Enum):
    """Why no response was received."""

    DEADLINE_EXCEEDED = "deadline_exceeded"
    CONNECTION_FAILED = "connection_failed"


@dataclass(frozen=True)
class TransportFailure:
    """The attempt produced no response at all."""

    reason: TransportFailureReason
    message: str = ""
    cause: Any = None


@dataclass(frozen=True)
class StatusResponse:
    """
    The backend answered with a failure status.

    Attributes:
        status: HTTP status code
        message: Error text from the payload (or the reason phrase)
        provider_code: Identity-provider or backend sub-code, if present
        payload: Decoded JSON payload (empty when the body was not JSON)
        credential_present: Whether a bearer credential was sent
    """

    status: int
    message: str = ""
    provider_code: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    credential_present: bool = True


@dataclass(frozen=True)
class ProviderError:
    """Identity-provider failure carrying a sub-code and no HTTP status."""

    code: str
    message: str = ""
    cause: Any = None


@dataclass(frozen=True)
class UnrecognizedFailure:
    """Anything else: decode errors, unexpected exceptions."""

    message: str = ""
    cause: Any = None


FailureSignal = Union[TransportFailure, StatusResponse, ProviderError, UnrecognizedFailure]


def status_response_from_body(
    status: int, body: bytes, reason: str = "", credential_present: bool = True
) -> StatusResponse:
    """
    Build a StatusResponse from a raw failure response.

    The backend reports errors as ``{"error": "...", "code": "..."}``; a body
    that is not a JSON object yields an empty payload and the reason phrase.
    """
    payload: dict[str, Any] = {}
    if body:
        try:
            decoded = json.loads(body)
        except (ValueError, UnicodeDecodeError):
            decoded = None
        if isinstance(decoded, dict):
            payload = decoded

    message = payload.get("error") or payload.get("message") or reason
    code = payload.get("code")

    return StatusResponse(
        status=status,
        message=str(message),
        provider_code=str(code) if code else None,
        payload=payload,
        credential_present=credential_present,
    )


def signal_from_exception(exc: BaseException) -> FailureSignal:
    """Convert an exception raised during an attempt into a signal."""
    if isinstance(exc, TransportTimeoutError):
        return TransportFailure(
            reason=TransportFailureReason.DEADLINE_EXCEEDED,
            message=exc.message,
            cause=exc,
        )
    if isinstance(exc, TransportError):
        return TransportFailure(
            reason=TransportFailureReason.CONNECTION_FAILED,
            message=exc.message,
            cause=exc,
        )
    return UnrecognizedFailure(message=str(exc) or type(exc).__name__, cause=exc)
