"""
Common constants used across the application.
Note: Enums are in enums.py, not here. This file only contains static values.
"""


# ============================================================================
# Cache Constants
# ============================================================================

class CachePrefix:
    """Cache key namespaces for consistent key naming"""
    RESPONSE = "cache:"
    POSTS = "/api/posts"
    POST_COMMENTS = "/api/comments/post"
    CATEGORIES = "/api/categories"


CACHE_WILDCARD = "*"
CACHE_HEADER = "X-Cache"

# Characters with special meaning in Redis glob-style MATCH patterns
REDIS_GLOB_SPECIAL_CHARS = ("\\", "*", "?", "[", "]")
