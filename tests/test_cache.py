"""Tests for the TTL result cache."""
from __future__ import annotations

import pytest

from src.core.cache import ResultCache, make_cache_key


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> ResultCache:
    return ResultCache(ttl_s=3600, clock=clock)


class CountingFetch:
    def __init__(self, *results) -> None:
        self.results = list(results)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        result = self.results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result


def test_cache_key_normalises_query():
    assert make_cache_key("  Carthage   Tunisia Travel ", 2) == "carthage tunisia travel-2"
    assert make_cache_key("Carthage Tunisia travel", 2) != make_cache_key("Carthage Tunisia travel", 3)


@pytest.mark.asyncio
async def test_fetch_once_within_ttl(cache, clock):
    fetch = CountingFetch(["video-a"], ["video-b"])

    first = await cache.get_or_fetch("carthage-2", fetch)
    clock.advance(600)
    second = await cache.get_or_fetch("carthage-2", fetch)

    assert first == second == ["video-a"]
    assert fetch.calls == 1


@pytest.mark.asyncio
async def test_entry_is_still_fresh_at_exactly_ttl(cache, clock):
    fetch = CountingFetch(["video-a"], ["video-b"])

    await cache.get_or_fetch("carthage-2", fetch)
    clock.advance(3600)
    value = await cache.get_or_fetch("carthage-2", fetch)

    assert value == ["video-a"]
    assert fetch.calls == 1


@pytest.mark.asyncio
async def test_refetch_after_ttl(cache, clock):
    fetch = CountingFetch(["video-a"], ["video-b"])

    await cache.get_or_fetch("carthage-2", fetch)
    clock.advance(3601)
    value = await cache.get_or_fetch("carthage-2", fetch)

    assert value == ["video-b"]
    assert fetch.calls == 2


@pytest.mark.asyncio
async def test_failures_are_not_cached(cache):
    fetch = CountingFetch(RuntimeError("quota exceeded"), ["video-a"])

    with pytest.raises(RuntimeError):
        await cache.get_or_fetch("carthage-2", fetch)
    assert len(cache) == 0

    value = await cache.get_or_fetch("carthage-2", fetch)

    assert value == ["video-a"]
    assert fetch.calls == 2


def test_get_evicts_stale_entries(cache, clock):
    cache.set("djerba-2", ["video"])
    assert cache.get("djerba-2") == ["video"]

    clock.advance(3601)

    assert cache.get("djerba-2") is None
    assert len(cache) == 0


def test_clear_and_missing_keys(cache):
    cache.set("djerba-2", ["video"])
    cache.clear()

    assert cache.get("djerba-2") is None
    assert cache.get("never-set") is None


def test_ttl_must_be_positive():
    with pytest.raises(ValueError):
        ResultCache(ttl_s=0)
