"""
Abstract transport for backend calls.

Defines the interface every transport (httpx, test doubles) must adhere
to. A transport performs exactly one request: no retries, no
classification, no credential handling.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field

logger = structlog.get_logger(__name__)


class TransportResponse(BaseModel):
    """Raw response received from the backend, whatever its status."""
    model_config = ConfigDict(frozen=True)

    status: int = Field(..., ge=100, le=599, description="HTTP status code")
    body: bytes = Field(default=b"", description="Raw response body")
    reason: str = Field(default="", description="HTTP reason phrase")
    headers: Dict[str, str] = Field(default_factory=dict, description="Response headers")

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class BaseTransport(ABC):
    """
    Abstract base class for transports.

    Responsibilities:
    - Send one request and return the response, including failure statuses
    - Raise TransportTimeoutError when the deadline aborts the request
    - Raise TransportConnectionError when no connection could be made

    Does NOT handle:
    - Retries or backoff (that's ResilientClient's job)
    - Error classification (that's classify's job)
    - Credential lookup (that's TokenStore's job)
    """

    @abstractmethod
    async def send(
        self,
        url: str,
        method: str,
        headers: Dict[str, str],
        body: Optional[Any],
        deadline_ms: int,
    ) -> TransportResponse:
        """
        Send one request.

        Args:
            url: Absolute URL including query string
            method: HTTP method
            headers: Request headers (authorization already injected)
            body: Encoded request body, or None
            deadline_ms: Deadline for this single request

        Returns:
            TransportResponse for any status received

        Raises:
            TransportTimeoutError: Deadline exceeded
            TransportConnectionError: No connection established
        """
        pass

    async def close(self):
        """Release pooled connections. Default implementation does nothing."""
        logger.debug("Closing transport", transport_class=self.__class__.__name__)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
