"""
Cache invalidation rules per blog resource.
Defines which cache key patterns need to be purged when resources are modified.
"""

import asyncio
from typing import Optional, Set

from app.cache.keys import CacheKeys
from app.cache.service import CacheService
from app.common.enums import ResourceType
from app.common.types import InvalidationEvent
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CacheInvalidation:
    """
    Cache invalidation logic for posts, comments and categories.

    Invalidation is advisory: deletions go through CacheService, which logs
    and swallows backend errors, so a failed purge never fails the write that
    triggered it. Entries missed here expire with their TTL.
    """

    def __init__(self, cache: CacheService):
        self.cache = cache
        self._pending: Set[asyncio.Task] = set()

    async def invalidate_post(self, post_id: Optional[str] = None) -> int:
        """
        Invalidate post-related cache.

        List views do not carry a single id, so they are always purged.

        Args:
            post_id: Optional post id for detail views

        Returns:
            Number of keys deleted
        """
        deleted = await self.cache.delete_pattern(CacheKeys.posts_pattern())

        if post_id:
            deleted += await self.cache.delete_pattern(CacheKeys.post_pattern(post_id))

        logger.info(f"Invalidated post cache{f' for post: {post_id}' if post_id else ''} ({deleted} keys)")
        return deleted

    async def invalidate_comments(self, post_id: Optional[str]) -> int:
        """
        Invalidate the comment views of a post.

        Args:
            post_id: Post the comments belong to; nothing happens when empty

        Returns:
            Number of keys deleted
        """
        if not post_id:
            return 0

        deleted = await self.cache.delete_pattern(CacheKeys.post_comments_pattern(post_id))
        logger.info(f"Invalidated comments cache for post: {post_id} ({deleted} keys)")
        return deleted

    async def invalidate_category(self) -> int:
        """
        Invalidate category cache.
        Post lists can be filtered by category, so they are purged as well.

        Returns:
            Number of keys deleted
        """
        deleted = await self.cache.delete_pattern(CacheKeys.categories_pattern())
        deleted += await self.cache.delete_pattern(CacheKeys.posts_pattern())

        logger.info(f"Invalidated category cache ({deleted} keys)")
        return deleted

    async def handle(self, event: InvalidationEvent) -> int:
        """
        Run the invalidation matching a completed write.

        Args:
            event: Resource type and optional id of the written resource

        Returns:
            Number of keys deleted, 0 if the invalidation failed
        """
        try:
            if event.resource_type == ResourceType.POST:
                return await self.invalidate_post(event.resource_id)
            if event.resource_type == ResourceType.COMMENT:
                return await self.invalidate_comments(event.resource_id)
            return await self.invalidate_category()

        except Exception as e:
            logger.error(f"Cache invalidation failed for {event!r}: {e}", exc_info=True)
            return 0

    def schedule(self, event: InvalidationEvent) -> asyncio.Task:
        """
        Run an invalidation in the background without blocking the caller.

        Args:
            event: Resource type and optional id of the written resource

        Returns:
            The background task; awaiting it is optional
        """
        task = asyncio.create_task(self.handle(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """
        Wait for every scheduled invalidation to finish.
        """
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
