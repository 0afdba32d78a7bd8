from app.cache.service import CacheService
from app.cache.keys import CacheKeys
from app.cache.invalidation import CacheInvalidation

__all__ = ["CacheService", "CacheKeys", "CacheInvalidation"]
