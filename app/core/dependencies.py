from fastapi import Request

from app.cache.invalidation import CacheInvalidation
from app.cache.service import CacheService


def get_cache_service(request: Request) -> CacheService:
    """
    Dependency for getting the response cache built at startup.

    Usage:
        @router.get("/stats")
        async def stats(cache: CacheService = Depends(get_cache_service)):
            ...
    """
    return request.app.state.cache


def get_cache_invalidation(request: Request) -> CacheInvalidation:
    """
    Dependency for write-path handlers that must purge cached views.

    Usage:
        @router.put("/posts/{post_id}")
        async def update_post(
            post_id: str,
            invalidation: CacheInvalidation = Depends(get_cache_invalidation)
        ):
            ...
            await invalidation.invalidate_post(post_id)
    """
    return request.app.state.cache_invalidation
