"""
Durable credential storage backed by Redis.

Storage Strategy:
- One string key (default "auth_token") holding the current bearer credential
- No TTL: the credential lives until it is replaced or cleared
- One connection pool per process, shared by every storage built from settings
"""

from typing import Optional

import structlog
from redis.asyncio import ConnectionPool as AsyncConnectionPool
from redis.asyncio import Redis as AsyncRedis

from hookline_client.config import Settings

logger = structlog.get_logger(__name__)


class RedisTokenStorage:
    """
    Durable key-value store for the bearer credential.

    Implements the TokenStorage protocol consumed by TokenStore.
    Redis errors propagate to the caller.
    """

    _pool: Optional[AsyncConnectionPool] = None

    def __init__(self, redis_client: AsyncRedis, key: str = "auth_token"):
        """
        Initialize storage.

        Args:
            redis_client: AsyncRedis client instance
            key: Redis key holding the credential
        """
        self.redis = redis_client
        self.key = key

    @classmethod
    def _shared_pool(cls, settings: Settings) -> AsyncConnectionPool:
        if cls._pool is None:
            cls._pool = AsyncConnectionPool.from_url(
                settings.REDIS_URL,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                decode_responses=True,
                socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
                socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
            )
            logger.info(
                "Created Redis pool for credential storage",
                max_connections=settings.REDIS_MAX_CONNECTIONS,
            )
        return cls._pool

    @classmethod
    def from_settings(
        cls, settings: Settings, redis_client: Optional[AsyncRedis] = None
    ) -> "RedisTokenStorage":
        """
        Build storage for the configured key.

        Without an explicit client, one is bound to the process-wide pool.
        """
        if redis_client is None:
            redis_client = AsyncRedis(connection_pool=cls._shared_pool(settings))
        return cls(redis_client, key=settings.TOKEN_STORAGE_KEY)

    @classmethod
    async def close_pool(cls) -> None:
        """Disconnect the shared pool (shutdown)."""
        if cls._pool is not None:
            await cls._pool.disconnect()
            cls._pool = None
            logger.info("Closed Redis pool for credential storage")

    async def read_token(self) -> Optional[str]:
        """Read the stored credential, or None if nothing is stored."""
        token = await self.redis.get(self.key)
        if isinstance(token, bytes):
            token = token.decode("utf-8")
        logger.debug("Read credential from storage", key=self.key, present=token is not None)
        return token or None

    async def write_token(self, token: str) -> None:
        """Persist the credential, replacing any previous value."""
        await self.redis.set(self.key, token)
        logger.debug("Wrote credential to storage", key=self.key)

    async def clear_token(self) -> None:
        """Remove the stored credential."""
        await self.redis.delete(self.key)
        logger.debug("Cleared credential from storage", key=self.key)
