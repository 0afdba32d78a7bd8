from typing import Optional, Any
import json
from redis.asyncio import Redis

from app.config.settings import settings
from app.common.constants import CACHE_WILDCARD, REDIS_GLOB_SPECIAL_CHARS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CacheService:
    """
    Redis-backed response cache.

    Every operation is best effort: backend errors are logged and turned into
    a miss or a falsy result, never raised. Without a Redis client (backend
    unreachable at startup) the cache behaves as permanently empty.
    """

    def __init__(self, redis: Optional[Redis]):
        self.redis = redis

    @property
    def enabled(self) -> bool:
        return self.redis is not None and settings.CACHE_ENABLED

    @staticmethod
    def to_match_pattern(pattern: str) -> str:
        """
        Translate a trailing-wildcard pattern into a Redis MATCH pattern.

        Only a final `*` acts as a wildcard; glob metacharacters in the literal
        prefix (ids, query strings) are escaped so they match themselves.

        Args:
            pattern: Key pattern (e.g., "cache:/api/posts*")

        Returns:
            Pattern safe to pass to SCAN MATCH
        """
        if pattern.endswith(CACHE_WILDCARD):
            literal, suffix = pattern[:-1], CACHE_WILDCARD
        else:
            literal, suffix = pattern, ""

        escaped = "".join(
            f"\\{char}" if char in REDIS_GLOB_SPECIAL_CHARS else char
            for char in literal
        )
        return f"{escaped}{suffix}"

    async def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Deserialized value or None on miss
        """
        if not self.enabled:
            return None

        try:
            value = await self.redis.get(key)
            if value is None:
                return None
            return json.loads(value)

        except Exception as e:
            logger.error(f"Cache get error for key {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Set value in cache.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl: Time to live in seconds (default: CACHE_DEFAULT_TTL)

        Returns:
            True if stored, False otherwise (including a non-positive ttl)
        """
        if not self.enabled:
            return False

        cache_ttl = settings.CACHE_DEFAULT_TTL if ttl is None else ttl
        if cache_ttl <= 0:
            logger.error(f"Cache set rejected for key {key}: ttl must be positive, got {cache_ttl}")
            return False

        try:
            serialized_value = json.dumps(value, ensure_ascii=False, default=str)
            await self.redis.setex(key, cache_ttl, serialized_value)
            return True

        except Exception as e:
            logger.error(f"Cache set error for key {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        """
        Delete key from cache.

        Args:
            key: Cache key

        Returns:
            True if the delete was issued, False otherwise
        """
        if self.redis is None:
            return False

        try:
            await self.redis.delete(key)
            return True
        except Exception as e:
            logger.error(f"Cache delete error for key {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching pattern.

        Args:
            pattern: Key pattern; a trailing "*" matches any key sharing the prefix

        Returns:
            Number of keys deleted
        """
        if self.redis is None:
            return 0

        match = self.to_match_pattern(pattern)

        try:
            cursor = 0
            deleted_count = 0

            while True:
                cursor, keys = await self.redis.scan(
                    cursor=cursor,
                    match=match,
                    count=settings.CACHE_SCAN_COUNT
                )

                if keys:
                    deleted_count += await self.redis.delete(*keys)

                if cursor == 0:
                    break

            logger.debug(f"Deleted {deleted_count} keys matching pattern: {pattern}")
            return deleted_count

        except Exception as e:
            logger.error(
                f"Cache delete pattern error for {pattern}: {e}",
                extra={"cache_pattern": pattern}
            )
            return 0

    async def exists(self, key: str) -> bool:
        """
        Check if key exists in cache.

        Args:
            key: Cache key

        Returns:
            True if exists, False otherwise
        """
        if self.redis is None:
            return False

        try:
            return await self.redis.exists(key) > 0
        except Exception as e:
            logger.error(f"Cache exists check error for key {key}: {e}")
            return False

    async def ttl(self, key: str) -> int:
        """
        Get remaining TTL for key.

        Args:
            key: Cache key

        Returns:
            Remaining TTL in seconds, -1 if no expiration, -2 if key doesn't exist
        """
        if self.redis is None:
            return -2

        try:
            return await self.redis.ttl(key)
        except Exception as e:
            logger.error(f"Cache TTL check error for key {key}: {e}")
            return -2
