"""
Integration tests for the full call path.

ResilientClient -> HttpxTransport -> httpx.MockTransport backend, with a
real TokenStore. Redis-backed tests require a running Redis.
"""

import httpx
import pytest

from hookline_client.auth.token_store import TokenStore
from hookline_client.client import Operation
from hookline_client.errors import CanonicalError, ErrorKind, recovery_instructions
from hookline_client.resources import BackendApi
from hookline_client.retry.policy import CRITICAL, STANDARD


@pytest.mark.asyncio
async def test_profile_recovers_from_outage(http_client, backend):
    backend.reply(
        "GET",
        "/api/users/profile",
        (503, {"error": "maintenance"}),
        (502, None),
        (200, {"id": "user-1", "plan": "pro"}),
    )

    result = await http_client.execute(Operation(path="/users/profile"), policy=CRITICAL)

    assert result == {"id": "user-1", "plan": "pro"}
    assert len(backend.requests) == 3
    assert all(r.headers["authorization"] == "Bearer stored-token" for r in backend.requests)


@pytest.mark.asyncio
async def test_expired_session_surfaces_sign_in(http_client, backend):
    backend.reply("GET", "/api/users/profile", (401, {"error": "Token expired"}))

    with pytest.raises(CanonicalError) as exc_info:
        await http_client.execute(Operation(path="/users/profile"), policy=CRITICAL)

    error = exc_info.value
    assert error.kind is ErrorKind.CREDENTIAL_EXPIRED
    assert error.requires_sign_in
    assert "Sign in again" in recovery_instructions(error)
    assert len(backend.requests) == 1


@pytest.mark.asyncio
async def test_unreachable_backend(http_client, backend):
    backend.reply("GET", "/api/health", httpx.ConnectError("connection refused"))

    with pytest.raises(CanonicalError) as exc_info:
        await http_client.execute(Operation(path="/health"), policy=STANDARD)

    assert exc_info.value.kind is ErrorKind.NETWORK_UNREACHABLE
    assert exc_info.value.retry_after_seconds == 5
    assert len(backend.requests) == 3


@pytest.mark.asyncio
async def test_identity_sub_code_from_backend(http_client, backend):
    backend.reply(
        "POST",
        "/api/auth/verify",
        (400, {"error": "Firebase: user disabled", "code": "auth/user-disabled"}),
    )

    with pytest.raises(CanonicalError) as exc_info:
        await http_client.execute(Operation(path="/auth/verify", method="POST"), policy=CRITICAL)

    assert exc_info.value.kind is ErrorKind.ACCOUNT_DISABLED
    assert len(backend.requests) == 1


@pytest.mark.asyncio
async def test_storage_hydrated_once_across_calls(http_client, backend, storage):
    backend.reply("GET", "/api/health", (200, {"status": "ok"}))

    for _ in range(3):
        assert await http_client.execute(Operation(path="/health")) == {"status": "ok"}

    assert storage.reads == 1


@pytest.mark.asyncio
async def test_refresh_then_calls_use_new_token(http_client, backend, storage):
    api = BackendApi(http_client, http_client.token_store)
    backend.reply("POST", "/api/auth/refresh", (200, {"token": "fresh-token"}))
    backend.reply("GET", "/api/users/usage", (200, {"used": 3}))

    assert await api.auth.refresh_token() == "fresh-token"
    assert await api.user.get_usage() == {"used": 3}

    assert backend.requests[-1].headers["authorization"] == "Bearer fresh-token"
    assert storage.value == "fresh-token"


@pytest.mark.asyncio
async def test_sign_out_clears_storage(http_client, backend, storage):
    api = BackendApi(http_client, http_client.token_store)
    backend.reply("POST", "/api/auth/signout", (200, {"success": True}))
    backend.reply("GET", "/api/users/profile", (401, {"error": "No token provided"}))

    await api.auth.sign_out()

    assert storage.value is None
    with pytest.raises(CanonicalError) as exc_info:
        await api.user.get_profile()
    assert exc_info.value.kind is ErrorKind.CREDENTIAL_MISSING
    assert "authorization" not in backend.requests[-1].headers


@pytest.mark.integration
@pytest.mark.asyncio
async def test_token_round_trip_through_redis(real_redis_storage):
    store = TokenStore(real_redis_storage)
    await store.set("redis-token")

    fresh = TokenStore(real_redis_storage)
    assert await fresh.get() == "redis-token"

    await fresh.clear()
    assert await TokenStore(real_redis_storage).get() is None
