"""
Cache key generators and naming conventions.
Centralized key management for the response cache.
"""
from typing import Optional

from app.common.constants import CachePrefix, CACHE_WILDCARD


class CacheKeys:
    """
    Cache key generators following consistent naming patterns.

    Every response key is `cache:` followed by the request path, so patterns
    are namespaced by resource type and, where one applies, by resource id.
    """

    @staticmethod
    def request(path: str, query: Optional[str] = None) -> str:
        """Cache key for a GET response, built from path and query string."""
        query_key = f"?{query}" if query else ""
        return f"{CachePrefix.RESPONSE}{path}{query_key}"

    @staticmethod
    def posts_pattern() -> str:
        """Pattern for every post list, pagination and detail view."""
        return f"{CachePrefix.RESPONSE}{CachePrefix.POSTS}{CACHE_WILDCARD}"

    @staticmethod
    def post_pattern(post_id: str) -> str:
        """Pattern for the detail views of a single post."""
        return f"{CachePrefix.RESPONSE}{CachePrefix.POSTS}/{post_id}{CACHE_WILDCARD}"

    @staticmethod
    def post_comments_pattern(post_id: str) -> str:
        """Pattern for the comment views of a single post."""
        return f"{CachePrefix.RESPONSE}{CachePrefix.POST_COMMENTS}/{post_id}{CACHE_WILDCARD}"

    @staticmethod
    def categories_pattern() -> str:
        """Pattern for every category view."""
        return f"{CachePrefix.RESPONSE}{CachePrefix.CATEGORIES}{CACHE_WILDCARD}"
