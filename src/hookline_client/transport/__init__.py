"""
Transport abstraction and implementations.

Components:
- BaseTransport: Abstract base class for transports
- HttpxTransport: Implementation on httpx.AsyncClient
- TransportResponse: Raw response model
- exceptions: Transport-level exceptions
"""

from hookline_client.transport.base import BaseTransport, TransportResponse
from hookline_client.transport.exceptions import (
    TransportConnectionError,
    TransportError,
    TransportTimeoutError,
)
from hookline_client.transport.httpx_transport import HttpxTransport

__all__ = [
    "BaseTransport",
    "TransportResponse",
    "HttpxTransport",
    "TransportError",
    "TransportConnectionError",
    "TransportTimeoutError",
]
