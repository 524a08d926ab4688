"""
Redis persistence layer.

- token_storage.py: durable storage for the bearer credential, on a
  process-wide redis.asyncio connection pool
"""

from hookline_client.persistence.token_storage import RedisTokenStorage

__all__ = [
    "RedisTokenStorage",
]
