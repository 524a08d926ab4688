"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without external dependencies.
"""

from typing import Any, Dict, Optional
from unittest.mock import AsyncMock

import pytest

from hookline_client.auth.token_store import TokenStore
from hookline_client.client import ResilientClient
from hookline_client.monitoring.events import CallObserver
from hookline_client.transport.base import BaseTransport, TransportResponse


class ScriptedTransport(BaseTransport):
    """Transport double that replays a scripted list of outcomes.

    Each outcome is either a TransportResponse, an int status code (empty
    body), or an exception instance to raise. Every call is recorded.
    """

    def __init__(self, *outcomes: Any):
        self.outcomes = list(outcomes)
        self.calls: list[Dict[str, Any]] = []

    async def send(
        self,
        url: str,
        method: str,
        headers: Dict[str, str],
        body: Optional[Any],
        deadline_ms: int,
    ) -> TransportResponse:
        self.calls.append(
            {
                "url": url,
                "method": method,
                "headers": dict(headers),
                "body": body,
                "deadline_ms": deadline_ms,
            }
        )
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, int):
            return TransportResponse(status=outcome)
        return outcome


@pytest.fixture
def mock_async_redis():
    """Mock AsyncRedis client for unit tests (async)."""
    mock = AsyncMock()
    mock.set = AsyncMock(return_value=True)
    mock.get = AsyncMock(return_value=None)
    mock.delete = AsyncMock(return_value=1)
    return mock


@pytest.fixture
def mock_token_storage():
    """Mock durable token storage holding "stored-token"."""
    mock = AsyncMock()
    mock.read_token = AsyncMock(return_value="stored-token")
    mock.write_token = AsyncMock(return_value=None)
    mock.clear_token = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def token_store(mock_token_storage) -> TokenStore:
    return TokenStore(mock_token_storage)


@pytest.fixture
def mock_sleep():
    """Backoff sleep that returns immediately and records delays (seconds)."""
    return AsyncMock(return_value=None)


@pytest.fixture
def make_client(token_store, mock_sleep):
    """Factory fixture building a ResilientClient around a ScriptedTransport.

    Usage:
        def test_something(make_client):
            client, transport = make_client(503, 200)
    """
    def _create(*outcomes: Any, **kwargs: Any):
        transport = ScriptedTransport(*outcomes)
        client = ResilientClient(
            transport,
            kwargs.pop("store", token_store),
            base_url="http://backend.test/api",
            observer=kwargs.pop("observer", CallObserver(metrics_enabled=False)),
            sleep=mock_sleep,
            **kwargs,
        )
        return client, transport

    return _create


@pytest.fixture
def make_transport():
    """Factory fixture for ScriptedTransport."""
    return ScriptedTransport
