"""Shared fixtures for the blog API tests."""
from __future__ import annotations

import os
import re

os.environ.setdefault("ENV", "test")
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest

from app.cache.invalidation import CacheInvalidation
from app.cache.service import CacheService


def _glob_to_regex(pattern: str) -> re.Pattern:
    """Translate the subset of Redis glob syntax the cache layer emits."""
    parts = []
    escaped = False
    for char in pattern:
        if escaped:
            parts.append(re.escape(char))
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts) + r"\Z", re.DOTALL)


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis with decode_responses=True."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.scan_patterns: list[str] = []

    async def ping(self) -> bool:
        return True

    async def get(self, key: str):
        return self.store.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, *keys: str) -> int:
        deleted = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                self.ttls.pop(key, None)
                deleted += 1
        return deleted

    async def scan(self, cursor: int = 0, match: str = "*", count: int = 10):
        self.scan_patterns.append(match)
        regex = _glob_to_regex(match)
        return 0, [key for key in self.store if regex.match(key)]

    async def exists(self, key: str) -> int:
        return 1 if key in self.store else 0

    async def ttl(self, key: str) -> int:
        if key not in self.store:
            return -2
        return self.ttls.get(key, -1)

    async def aclose(self) -> None:
        return None


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def cache_service(fake_redis) -> CacheService:
    return CacheService(fake_redis)


@pytest.fixture
def cache_invalidation(cache_service) -> CacheInvalidation:
    return CacheInvalidation(cache_service)


@pytest.fixture
def seed_cache(fake_redis):
    """Populate the fake store with raw keys (values are irrelevant to invalidation)."""

    def _seed(*keys: str) -> None:
        for key in keys:
            fake_redis.store[key] = "{}"

    return _seed
