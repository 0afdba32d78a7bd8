"""
Centralized enumerations used across the cache layer and the API.
"""
from enum import Enum


# ============================================================================
# Environment Enums
# ============================================================================

class Environment(str, Enum):
    """Deployment environment enumeration"""
    DEVELOPMENT = "dev"
    STAGING = "stg"
    PRODUCTION = "prod"


# ============================================================================
# Cache Enums
# ============================================================================

class ResourceType(str, Enum):
    """Blog resources whose cached views are invalidated after writes"""
    POST = "post"
    COMMENT = "comment"
    CATEGORY = "category"


class CacheStatus(str, Enum):
    """Value of the X-Cache response header"""
    HIT = "HIT"
    MISS = "MISS"
