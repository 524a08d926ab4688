"""
httpx transport implementation.

Communicates with the backend using a persistent httpx AsyncClient with
connection pooling. Maps httpx failures onto the transport exceptions:
- httpx.TimeoutException -> TransportTimeoutError
- httpx.TransportError (connect, read, protocol) -> TransportConnectionError
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from hookline_client.config import Settings
from hookline_client.transport.base import BaseTransport, TransportResponse
from hookline_client.transport.exceptions import (
    TransportConnectionError,
    TransportTimeoutError,
)

logger = structlog.get_logger(__name__)


class HttpxTransport(BaseTransport):
    """
    Transport backed by httpx.AsyncClient.

    Features:
    - Connection pooling via persistent AsyncClient (created lazily)
    - Per-request timeout derived from the attempt deadline
    - Failure statuses are returned, never raised
    """

    def __init__(
        self,
        connection_limits: Optional[httpx.Limits] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize transport.

        Args:
            connection_limits: httpx connection pool limits (default: 10 max connections)
            client: Pre-built AsyncClient (tests pass one with a MockTransport)
        """
        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0
            )

        self._connection_limits = connection_limits
        self._client: Optional[httpx.AsyncClient] = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpxTransport":
        return cls(
            connection_limits=httpx.Limits(
                max_keepalive_connections=settings.HTTP_MAX_KEEPALIVE,
                max_connections=settings.HTTP_MAX_CONNECTIONS,
                keepalive_expiry=30.0
            )
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                limits=self._connection_limits,
                follow_redirects=True
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client

    async def send(
        self,
        url: str,
        method: str,
        headers: Dict[str, str],
        body: Optional[Any],
        deadline_ms: int,
    ) -> TransportResponse:
        timeout = deadline_ms / 1000.0
        client = await self._get_client()

        try:
            response = await client.request(
                method,
                url,
                headers=headers,
                content=body,
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(
                f"Request timeout after {timeout}s",
                details={"url": url, "method": method, "error_type": type(e).__name__}
            ) from e
        except httpx.TransportError as e:
            raise TransportConnectionError(
                f"Network error: {str(e) or type(e).__name__}",
                details={"url": url, "method": method, "error_type": type(e).__name__}
            ) from e

        return TransportResponse(
            status=response.status_code,
            body=response.content,
            reason=response.reason_phrase,
            headers=dict(response.headers),
        )

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed httpx client connection")
