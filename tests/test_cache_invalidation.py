"""Tests for the post/comment/category invalidation rules."""
from __future__ import annotations

import asyncio
import logging
from unittest.mock import AsyncMock, call

import pytest

from app.cache.invalidation import CacheInvalidation
from app.cache.service import CacheService
from app.common.enums import ResourceType
from app.common.types import InvalidationEvent


@pytest.fixture
def recording_cache() -> AsyncMock:
    cache = AsyncMock(spec=CacheService)
    cache.delete_pattern.return_value = 0
    return cache


@pytest.fixture
def recording_invalidation(recording_cache) -> CacheInvalidation:
    return CacheInvalidation(recording_cache)


@pytest.mark.asyncio
async def test_invalidate_post_without_id_purges_lists_only(recording_invalidation, recording_cache):
    await recording_invalidation.invalidate_post()

    assert recording_cache.delete_pattern.await_args_list == [call("cache:/api/posts*")]


@pytest.mark.asyncio
@pytest.mark.parametrize("post_id", ["abc123", "64f1c2e9a7b3d5e8f0a1b2c3"])
async def test_invalidate_post_with_id_purges_lists_and_detail(recording_invalidation, recording_cache, post_id):
    await recording_invalidation.invalidate_post(post_id)

    assert recording_cache.delete_pattern.await_args_list == [
        call("cache:/api/posts*"),
        call(f"cache:/api/posts/{post_id}*"),
    ]


@pytest.mark.asyncio
async def test_invalidate_post_with_empty_id_purges_lists_only(recording_invalidation, recording_cache):
    await recording_invalidation.invalidate_post("")

    assert recording_cache.delete_pattern.await_args_list == [call("cache:/api/posts*")]


@pytest.mark.asyncio
@pytest.mark.parametrize("post_id", ["", None])
async def test_invalidate_comments_without_post_is_noop(recording_invalidation, recording_cache, post_id):
    deleted = await recording_invalidation.invalidate_comments(post_id)

    assert deleted == 0
    recording_cache.delete_pattern.assert_not_awaited()


@pytest.mark.asyncio
async def test_invalidate_comments_purges_post_comment_views(recording_invalidation, recording_cache):
    await recording_invalidation.invalidate_comments("abc123")

    assert recording_cache.delete_pattern.await_args_list == [call("cache:/api/comments/post/abc123*")]


@pytest.mark.asyncio
async def test_invalidate_category_purges_categories_and_posts(recording_invalidation, recording_cache):
    await recording_invalidation.invalidate_category()

    assert recording_cache.delete_pattern.await_args_list == [
        call("cache:/api/categories*"),
        call("cache:/api/posts*"),
    ]


@pytest.mark.asyncio
async def test_repeated_calls_issue_identical_deletions(recording_invalidation, recording_cache):
    await recording_invalidation.invalidate_post("abc123")
    first = list(recording_cache.delete_pattern.await_args_list)
    recording_cache.delete_pattern.reset_mock()

    await recording_invalidation.invalidate_post("abc123")

    assert recording_cache.delete_pattern.await_args_list == first


@pytest.mark.asyncio
async def test_second_purge_of_same_post_is_noop(cache_invalidation, seed_cache, fake_redis):
    seed_cache("cache:/api/posts/abc123", "cache:/api/posts?page=1")

    assert await cache_invalidation.invalidate_post("abc123") == 2
    assert await cache_invalidation.invalidate_post("abc123") == 0
    assert fake_redis.store == {}


@pytest.mark.asyncio
async def test_concurrent_comment_invalidations_keep_other_posts(cache_invalidation, seed_cache, fake_redis):
    """Comment purges for one post never reach another post's comment views."""
    seed_cache(
        "cache:/api/comments/post/post-a",
        "cache:/api/comments/post/post-b",
        "cache:/api/categories",
    )

    await asyncio.gather(
        cache_invalidation.invalidate_comments("post-a"),
        cache_invalidation.invalidate_comments("post-a"),
    )

    assert set(fake_redis.store) == {"cache:/api/comments/post/post-b", "cache:/api/categories"}


@pytest.mark.asyncio
async def test_detail_patterns_are_scoped_to_their_post(recording_invalidation, recording_cache):
    await asyncio.gather(
        recording_invalidation.invalidate_post("post-a"),
        recording_invalidation.invalidate_post("post-b"),
    )

    patterns = [args.args[0] for args in recording_cache.delete_pattern.await_args_list]
    assert sorted(patterns) == [
        "cache:/api/posts*",
        "cache:/api/posts*",
        "cache:/api/posts/post-a*",
        "cache:/api/posts/post-b*",
    ]


@pytest.mark.asyncio
async def test_category_invalidation_leaves_comments(cache_invalidation, seed_cache, fake_redis):
    seed_cache(
        "cache:/api/categories",
        "cache:/api/categories/tech",
        "cache:/api/posts?category=tech",
        "cache:/api/comments/post/abc123",
    )

    deleted = await cache_invalidation.invalidate_category()

    assert deleted == 3
    assert set(fake_redis.store) == {"cache:/api/comments/post/abc123"}


@pytest.mark.asyncio
async def test_unavailable_backend_does_not_raise():
    invalidation = CacheInvalidation(CacheService(None))

    assert await invalidation.invalidate_post("abc123") == 0
    assert await invalidation.invalidate_comments("abc123") == 0
    assert await invalidation.invalidate_category() == 0


@pytest.mark.asyncio
async def test_failing_backend_does_not_raise():
    redis = AsyncMock()
    redis.scan.side_effect = TimeoutError("redis timed out")
    invalidation = CacheInvalidation(CacheService(redis))

    assert await invalidation.invalidate_post("abc123") == 0
    assert await invalidation.invalidate_category() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "event, expected",
    [
        (InvalidationEvent(ResourceType.POST), [call("cache:/api/posts*")]),
        (
            InvalidationEvent(ResourceType.POST, "abc123"),
            [call("cache:/api/posts*"), call("cache:/api/posts/abc123*")],
        ),
        (InvalidationEvent(ResourceType.COMMENT, "abc123"), [call("cache:/api/comments/post/abc123*")]),
        (InvalidationEvent(ResourceType.COMMENT), []),
        (
            InvalidationEvent(ResourceType.CATEGORY, "ignored"),
            [call("cache:/api/categories*"), call("cache:/api/posts*")],
        ),
    ],
)
async def test_handle_dispatches_by_resource_type(recording_invalidation, recording_cache, event, expected):
    await recording_invalidation.handle(event)

    assert recording_cache.delete_pattern.await_args_list == expected


@pytest.mark.asyncio
async def test_handle_recovers_from_unexpected_errors(recording_invalidation, recording_cache, caplog):
    recording_cache.delete_pattern.side_effect = RuntimeError("boom")

    with caplog.at_level(logging.ERROR):
        assert await recording_invalidation.handle(InvalidationEvent("post", "abc123")) == 0

    errors = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "Cache invalidation failed" in errors[0].getMessage()
    assert errors[0].exc_info is not None


@pytest.mark.asyncio
async def test_schedule_runs_in_background_and_drain_waits(cache_invalidation, seed_cache, fake_redis):
    seed_cache("cache:/api/posts/abc123", "cache:/api/comments/post/abc123")

    task = cache_invalidation.schedule(InvalidationEvent(ResourceType.POST, "abc123"))
    cache_invalidation.schedule(InvalidationEvent(ResourceType.COMMENT, "abc123"))
    await cache_invalidation.drain()

    assert task.done()
    assert task.result() == 1
    assert fake_redis.store == {}


@pytest.mark.asyncio
async def test_drain_without_pending_tasks(cache_invalidation):
    await cache_invalidation.drain()


def test_invalidation_event_equality():
    assert InvalidationEvent("post", "abc") == InvalidationEvent(ResourceType.POST, "abc")
    assert InvalidationEvent("post", "abc") != InvalidationEvent("comment", "abc")
    assert "post" in repr(InvalidationEvent("post"))


@pytest.mark.asyncio
async def test_drain_waits_for_invalidations_scheduled_while_draining(cache_invalidation, seed_cache, fake_redis):
    seed_cache("cache:/api/posts/abc123", "cache:/api/categories")
    follow_ups = []
    original_handle = cache_invalidation.handle

    async def handle_then_schedule(event):
        deleted = await original_handle(event)
        if event.resource_type == ResourceType.POST:
            await asyncio.sleep(0)
            follow_ups.append(cache_invalidation.schedule(InvalidationEvent(ResourceType.CATEGORY)))
        return deleted

    cache_invalidation.handle = handle_then_schedule
    cache_invalidation.schedule(InvalidationEvent(ResourceType.POST, "abc123"))

    await cache_invalidation.drain()

    assert len(follow_ups) == 1
    assert follow_ups[0].done()
    assert fake_redis.store == {}
