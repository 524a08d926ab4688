"""Integration test fixtures (service checks and mock backends).

Provides fixtures for checking if external services are available.
Tests needing a real service are skipped if it is not running.
"""

import json

import httpx
import pytest
import pytest_asyncio
from redis.asyncio import Redis as AsyncRedis

from hookline_client.auth.token_store import TokenStore
from hookline_client.client import ResilientClient
from hookline_client.monitoring.events import CallObserver
from hookline_client.persistence.token_storage import RedisTokenStorage
from hookline_client.transport.httpx_transport import HttpxTransport


class InMemoryTokenStorage:
    """TokenStorage backed by a dict, counting durable reads."""

    def __init__(self, token=None):
        self.value = token
        self.reads = 0

    async def read_token(self):
        self.reads += 1
        return self.value

    async def write_token(self, token):
        self.value = token

    async def clear_token(self):
        self.value = None


class MockBackend:
    """Scripted backend served through httpx.MockTransport.

    Each route maps to a list of (status, payload) replies consumed in
    order; the last reply repeats. Every request is recorded.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def reply(self, method, path, *replies):
        self.routes[(method, path)] = list(replies)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        replies = self.routes.get((request.method, request.url.path))
        if not replies:
            return httpx.Response(404, json={"error": "Not found"})
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if isinstance(reply, Exception):
            raise reply
        status, payload = reply
        return httpx.Response(status, content=json.dumps(payload).encode() if payload is not None else b"")


@pytest.fixture
def backend():
    return MockBackend()


@pytest.fixture
def storage():
    return InMemoryTokenStorage("stored-token")


@pytest_asyncio.fixture
async def http_client(backend, storage):
    """ResilientClient over a real HttpxTransport talking to MockBackend."""
    transport = HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(backend)))

    async def no_sleep(_seconds):
        return None

    client = ResilientClient(
        transport,
        TokenStore(storage),
        base_url="http://backend.test/api",
        observer=CallObserver(metrics_enabled=False),
        sleep=no_sleep,
    )
    yield client
    await transport.close()


@pytest_asyncio.fixture
async def real_redis_storage():
    """RedisTokenStorage against localhost Redis, on a throwaway key.

    Skips tests if Redis is not reachable.
    """
    client = AsyncRedis.from_url("redis://localhost:6379/0", decode_responses=True)
    try:
        await client.ping()
    except Exception as e:
        await client.aclose()
        pytest.skip(f"Redis not available: {e}")

    storage = RedisTokenStorage(client, key="hookline_client:test:auth_token")
    yield storage
    await storage.clear_token()
    await client.aclose()
