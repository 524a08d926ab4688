"""
Unit tests for RedisTokenStorage and its shared connection pool.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from hookline_client.persistence.token_storage import RedisTokenStorage


@pytest.fixture(autouse=True)
def reset_pool():
    """Reset the shared pool before and after each test."""
    RedisTokenStorage._pool = None
    yield
    RedisTokenStorage._pool = None


@pytest.mark.asyncio
async def test_read_token_returns_stored_value(mock_async_redis):
    mock_async_redis.get = AsyncMock(return_value="stored-token")
    storage = RedisTokenStorage(mock_async_redis)

    assert await storage.read_token() == "stored-token"
    mock_async_redis.get.assert_awaited_once_with("auth_token")


@pytest.mark.asyncio
async def test_read_token_decodes_bytes(mock_async_redis):
    mock_async_redis.get = AsyncMock(return_value=b"stored-token")
    storage = RedisTokenStorage(mock_async_redis)

    assert await storage.read_token() == "stored-token"


@pytest.mark.asyncio
async def test_read_token_missing(mock_async_redis):
    storage = RedisTokenStorage(mock_async_redis)

    assert await storage.read_token() is None


@pytest.mark.asyncio
async def test_write_and_clear_use_configured_key(mock_async_redis, test_settings):
    test_settings.TOKEN_STORAGE_KEY = "hookline:token"
    storage = RedisTokenStorage.from_settings(test_settings, redis_client=mock_async_redis)

    await storage.write_token("fresh-token")
    await storage.clear_token()

    mock_async_redis.set.assert_awaited_once_with("hookline:token", "fresh-token")
    mock_async_redis.delete.assert_awaited_once_with("hookline:token")


@pytest.mark.asyncio
async def test_redis_errors_propagate(mock_async_redis):
    mock_async_redis.set = AsyncMock(side_effect=ConnectionError("redis down"))
    storage = RedisTokenStorage(mock_async_redis)

    with pytest.raises(ConnectionError):
        await storage.write_token("fresh-token")


def test_from_settings_shares_one_pool(test_settings):
    with patch("hookline_client.persistence.token_storage.AsyncConnectionPool") as mock_pool, patch(
        "hookline_client.persistence.token_storage.AsyncRedis"
    ) as mock_redis:
        mock_pool.from_url.return_value = MagicMock()

        first = RedisTokenStorage.from_settings(test_settings)
        second = RedisTokenStorage.from_settings(test_settings)

    mock_pool.from_url.assert_called_once_with(
        test_settings.REDIS_URL,
        max_connections=test_settings.REDIS_MAX_CONNECTIONS,
        decode_responses=True,
        socket_timeout=test_settings.REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=test_settings.REDIS_SOCKET_TIMEOUT,
    )
    assert mock_redis.call_count == 2
    mock_redis.assert_called_with(connection_pool=mock_pool.from_url.return_value)
    assert first.key == second.key == test_settings.TOKEN_STORAGE_KEY


@pytest.mark.asyncio
async def test_close_pool():
    """Closing disconnects and forgets the pool."""
    mock_pool = MagicMock()
    mock_pool.disconnect = AsyncMock(return_value=None)
    RedisTokenStorage._pool = mock_pool

    await RedisTokenStorage.close_pool()

    mock_pool.disconnect.assert_awaited_once()
    assert RedisTokenStorage._pool is None


@pytest.mark.asyncio
async def test_close_pool_without_pool_is_noop():
    await RedisTokenStorage.close_pool()

    assert RedisTokenStorage._pool is None
