"""
Redis Token Store - Redis-backed token persistence.
"""

import logging
from typing import Optional
from auth_session.ports.token_store_port import TokenStorePort

logger = logging.getLogger(__name__)


class RedisTokenStore(TokenStorePort):
    """
    Redis-backed token storage.

    The token is stored as a plain string under a single key, with an
    optional TTL so abandoned sessions expire on their own.
    """

    def __init__(
        self,
        redis_client=None,
        redis_url: str = "redis://localhost:6379/0",
        key: str = "auth_session:token",
        ttl: Optional[int] = None,
    ):
        """
        Initialize Redis token store.

        Args:
            redis_client: redis.asyncio.Redis instance (created lazily if None)
            redis_url: URL used when no client is given
            key: Key holding the token
            ttl: Expiry in seconds (None = no expiry)
        """
        self._redis = redis_client
        self._owns_client = redis_client is None
        self._redis_url = redis_url
        self._key = key
        self._ttl = ttl

    def _get_redis(self):
        """Lazy load Redis client."""
        if self._redis is None:
            try:
                import redis.asyncio as redis
            except ImportError:
                raise ImportError("redis package required: pip install redis")
            self._redis = redis.Redis.from_url(self._redis_url, decode_responses=True)
        return self._redis

    async def save(self, token: str) -> None:
        redis = self._get_redis()
        if self._ttl:
            await redis.set(self._key, token, ex=self._ttl)
        else:
            await redis.set(self._key, token)
        logger.debug("Token stored under %s", self._key)

    async def load(self) -> Optional[str]:
        redis = self._get_redis()
        token = await redis.get(self._key)
        if isinstance(token, bytes):
            token = token.decode()
        return token

    async def clear(self) -> bool:
        redis = self._get_redis()
        deleted = await redis.delete(self._key)
        return deleted > 0

    async def aclose(self) -> None:
        """Close the Redis connection if this store created it."""
        if self._redis is not None and self._owns_client:
            await self._redis.aclose()
            self._redis = None
