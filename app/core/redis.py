from typing import Optional
from redis.asyncio import Redis, ConnectionPool

from app.config.settings import settings
from app.utils.logging import get_logger

logger = get_logger(__name__)


class RedisManager:
    """
    Redis connection manager with connection pooling.
    The response cache is optional: an unreachable server disables it instead of failing startup.
    """

    def __init__(self):
        self.pool: Optional[ConnectionPool] = None
        self.redis: Optional[Redis] = None

    @property
    def is_connected(self) -> bool:
        return self.redis is not None

    async def connect(self) -> None:
        """
        Initialize Redis connection pool.
        """
        if not settings.CACHE_ENABLED:
            logger.info("Response cache disabled by configuration, skipping Redis connection")
            return

        try:
            self.pool = ConnectionPool.from_url(
                settings.redis_url,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
                socket_connect_timeout=settings.REDIS_SOCKET_CONNECT_TIMEOUT,
                decode_responses=True,
                encoding="utf-8",
            )

            redis = Redis(connection_pool=self.pool)
            await redis.ping()
            self.redis = redis

            logger.info("Redis connection pool initialized successfully")

        except Exception as e:
            logger.warning(f"Redis unavailable, response cache disabled: {e}")
            await self.disconnect()

    async def disconnect(self) -> None:
        """
        Close Redis connections.
        """
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            logger.info("Redis connection closed")

        if self.pool:
            await self.pool.disconnect()
            self.pool = None
            logger.info("Redis connection pool closed")

    def get_redis(self) -> Redis:
        """
        Get Redis client instance.

        Returns:
            Redis: Redis client

        Raises:
            RuntimeError: If Redis not initialized
        """
        if not self.redis:
            raise RuntimeError("Redis not initialized. Call connect() first.")
        return self.redis


redis_manager = RedisManager()
