"""
Common utilities, constants, and shared code
"""
# Enums (centralized)
from app.common.enums import (
    Environment,
    ResourceType,
    CacheStatus,
)

# Constants (static values)
from app.common.constants import (
    CachePrefix,
    CACHE_WILDCARD,
    CACHE_HEADER,
)

# Types (data classes)
from app.common.types import InvalidationEvent

__all__ = [
    # Enums
    "Environment",
    "ResourceType",
    "CacheStatus",

    # Cache
    "CachePrefix",
    "CACHE_WILDCARD",
    "CACHE_HEADER",

    # Types
    "InvalidationEvent",
]
