"""
읽기 캐시 테스트
"""

import asyncio

import pytest

from market_listing.cache import ReadThroughCache
from market_listing.config import CacheConfig


class CountingFetcher:
    """호출 횟수를 세고, 해제될 때까지 대기하는 fetcher"""

    def __init__(self, value="data", error=None):
        self.value = value
        self.error = error
        self.calls = 0
        self.release = asyncio.Event()

    async def __call__(self):
        self.calls += 1
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return f"{self.value}-{self.calls}"


async def settle():
    """대기 중인 태스크가 한 단계씩 진행되도록 양보"""
    for _ in range(5):
        await asyncio.sleep(0)


class TestReadThrough:
    """기본 조회"""

    @pytest.mark.asyncio
    async def test_miss_then_hit(self, cache):
        fetcher = CountingFetcher()
        fetcher.release.set()

        first = await cache.get("workflows", fetcher)
        second = await cache.get("workflows", fetcher)

        assert first == second == "data-1"
        assert fetcher.calls == 1

    @pytest.mark.asyncio
    async def test_expired_entry_refetched(self, cache, clock):
        fetcher = CountingFetcher()
        fetcher.release.set()

        await cache.get("workflows", fetcher, ttl=5.0)
        clock.advance(4.0)
        assert await cache.get("workflows", fetcher) == "data-1"

        clock.advance(1.0)
        assert await cache.get("workflows", fetcher) == "data-2"
        assert fetcher.calls == 2

    @pytest.mark.asyncio
    async def test_default_ttl(self, cache, clock):
        fetcher = CountingFetcher()
        fetcher.release.set()

        await cache.get("workflows", fetcher)
        assert "workflows" in cache

        clock.advance(1.0)
        assert "workflows" not in cache


class TestCoalescing:
    """동시 요청 병합"""

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_one_fetch(self, cache):
        fetcher = CountingFetcher()

        tasks = [asyncio.ensure_future(cache.get("workflows", fetcher)) for _ in range(5)]
        await settle()
        assert cache.stats().pending_requests == 1

        fetcher.release.set()
        results = await asyncio.gather(*tasks)

        assert results == ["data-1"] * 5
        assert fetcher.calls == 1
        assert cache.stats().pending_requests == 0
        assert cache.stats().size == 1

    @pytest.mark.asyncio
    async def test_failure_propagates_to_all_and_is_not_cached(self, cache):
        fetcher = CountingFetcher(error=RuntimeError("backend down"))

        tasks = [asyncio.ensure_future(cache.get("workflows", fetcher)) for _ in range(3)]
        await settle()
        fetcher.release.set()
        results = await asyncio.gather(*tasks, return_exceptions=True)

        assert all(isinstance(r, RuntimeError) for r in results)
        assert fetcher.calls == 1
        assert cache.stats().size == 0
        assert cache.stats().pending_requests == 0

        # 다음 호출은 새로 fetch
        fetcher.error = None
        assert await cache.get("workflows", fetcher) == "data-2"

    @pytest.mark.asyncio
    async def test_different_keys_fetch_independently(self, cache):
        fetcher = CountingFetcher()
        fetcher.release.set()

        await asyncio.gather(cache.get("a", fetcher), cache.get("b", fetcher))

        assert fetcher.calls == 2

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_abort_fetch(self, cache):
        fetcher = CountingFetcher()

        waiter = asyncio.ensure_future(cache.get("workflows", fetcher))
        await settle()
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        fetcher.release.set()
        await settle()

        assert "workflows" in cache
        assert await cache.get("workflows", fetcher) == "data-1"
        assert fetcher.calls == 1


class TestInvalidation:
    """무효화"""

    @pytest.mark.asyncio
    async def test_clear_forces_refetch(self, cache):
        fetcher = CountingFetcher()
        fetcher.release.set()

        await cache.get("workflows", fetcher)
        cache.clear("workflows")

        assert await cache.get("workflows", fetcher) == "data-2"

    @pytest.mark.asyncio
    async def test_clear_during_fetch_discards_result(self, cache):
        """진행 중에 무효화된 fetch 결과는 캐시에 남지 않음"""
        fetcher = CountingFetcher()

        first = asyncio.ensure_future(cache.get("workflows", fetcher))
        await settle()
        cache.clear("workflows")
        assert cache.stats().pending_requests == 0

        fetcher.release.set()
        # 기존 대기자는 결과를 그대로 받음
        assert await first == "data-1"
        assert "workflows" not in cache

        assert await cache.get("workflows", fetcher) == "data-2"

    @pytest.mark.asyncio
    async def test_clear_during_fetch_keeps_newer_marker(self, cache):
        stale = CountingFetcher("stale")
        fresh = CountingFetcher("fresh")

        first = asyncio.ensure_future(cache.get("workflows", stale))
        await settle()
        cache.clear("workflows")
        second = asyncio.ensure_future(cache.get("workflows", fresh))
        await settle()

        stale.release.set()
        await first
        assert cache.stats().pending_requests == 1

        fresh.release.set()
        assert await second == "fresh-1"
        assert await cache.get("workflows", stale) == "fresh-1"

    @pytest.mark.asyncio
    async def test_clear_all(self, cache):
        fetcher = CountingFetcher()
        fetcher.release.set()
        await cache.get("a", fetcher)
        await cache.get("b", fetcher)

        cache.clear_all()

        assert cache.stats().size == 0

    @pytest.mark.asyncio
    async def test_clear_expired(self, cache, clock):
        fetcher = CountingFetcher()
        fetcher.release.set()
        await cache.get("short", fetcher, ttl=1.0)
        await cache.get("long", fetcher, ttl=10.0)

        clock.advance(2.0)

        assert cache.clear_expired() == 1
        assert cache.stats().size == 1
        assert "long" in cache


class TestKeys:
    """캐시 키와 래퍼"""

    def test_generate_key_sorts_params(self):
        a = ReadThroughCache.generate_key("workflows", {"page": 2, "tag": "crm"})
        b = ReadThroughCache.generate_key("workflows", {"tag": "crm", "page": 2})

        assert a == b
        assert a == 'workflows:{"page": 2, "tag": "crm"}'

    def test_generate_key_without_params(self):
        """params가 없으면 빈 문자열, 빈 dict는 "{}"로 직렬화"""
        assert ReadThroughCache.generate_key("workflows") == "workflows:"
        assert ReadThroughCache.generate_key("workflows", {}) == "workflows:{}"

    @pytest.mark.asyncio
    async def test_cached_call(self, cache):
        fetcher = CountingFetcher()
        fetcher.release.set()
        get_workflows = cache.cached_call("workflows", fetcher, ttl=30.0)

        await get_workflows()
        await get_workflows()
        await get_workflows({"page": 2})

        assert fetcher.calls == 2
        assert "workflows:" in cache
        assert 'workflows:{"page": 2}' in cache

    def test_from_config(self, clock):
        cache = ReadThroughCache.from_config(CacheConfig(default_ttl=42.0), clock=clock)

        assert cache.default_ttl == 42.0
