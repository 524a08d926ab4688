"""
Custom exceptions for the transport layer.

A transport raises these only when no response was received. A response
with a failure status is returned to the caller, never raised.
"""


class TransportError(Exception):
    """
    Base exception for all transport errors.

    Carries a short message plus free-form details for logging.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TransportConnectionError(TransportError):
    """
    Raised when no connection to the backend could be established.

    Includes refused connections, DNS failures and dropped sockets.
    """
    pass


class TransportTimeoutError(TransportConnectionError):
    """
    Raised when the request was aborted by its deadline.

    Separate from generic connection errors so the classifier can tell
    a slow backend from an unreachable one.
    """
    pass
