"""
읽기 캐시 (Read-through cache)

화면 계층의 모든 조회 앞에 위치하는 키 기반 TTL 캐시.
같은 키에 대한 동시 요청은 하나의 fetch로 합쳐집니다 (request coalescing).

사용 예시:
    cache = ReadThroughCache(default_ttl=300)

    workflows = await cache.get(
        "workflows_public",
        lambda: api.fetch_workflows(),
        ttl=300,
    )

    # 쓰기 후 무효화
    cache.clear("workflows_public")
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Fetcher = Callable[[], Awaitable[T]]


@dataclass
class CacheEntry:
    """캐시 항목 (캐시 내부 전용)"""
    key: str
    data: Any
    timestamp: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.timestamp < self.ttl


@dataclass
class CacheStats:
    """캐시 통계"""
    size: int
    pending_requests: int


def _mark_retrieved(task: "asyncio.Task") -> None:
    # 대기자가 모두 취소된 경우에도 "exception was never retrieved" 경고가 나지 않도록
    if not task.cancelled():
        task.exception()


class ReadThroughCache:
    """
    TTL 기반 읽기 캐시

    단일 이벤트 루프에서 동작하며, 진행 중 요청 맵(key -> Task)이 유일한
    조정 수단입니다. fetch 시작 전에 맵에 등록하고 완료/실패 후에 제거하므로
    키당 동시에 진행되는 fetch는 최대 하나입니다.

    - 실패한 fetch는 캐시하지 않으며, 합류한 모든 호출자에게 같은 예외를 전달합니다.
    - 호출자가 대기를 중단(취소)해도 fetch는 끝까지 실행되고 캐시를 채웁니다.
    - clock은 주입 가능하며 (기본: time.monotonic), 초 단위 값을 반환해야 합니다.
    """

    def __init__(
        self,
        default_ttl: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._pending: Dict[str, "asyncio.Task"] = {}

    @classmethod
    def from_config(cls, config=None, clock: Callable[[], float] = time.monotonic) -> "ReadThroughCache":
        """CacheConfig 기반 캐시 생성"""
        if config is None:
            from ..config import get_config
            config = get_config().cache
        return cls(default_ttl=config.default_ttl, clock=clock)

    # =========================================================================
    # 조회
    # =========================================================================

    async def get(self, key: str, fetcher: Fetcher, ttl: Optional[float] = None) -> Any:
        """
        캐시 조회

        우선순위:
            1. 진행 중인 fetch가 있으면 그 결과를 함께 기다림 (fetcher 재호출 없음)
            2. 신선한 캐시 항목이 있으면 즉시 반환
            3. 없으면 fetcher를 호출하고 결과를 캐시
        """
        pending = self._pending.get(key)
        if pending is not None:
            logger.debug(f"Cache join in-flight: {key}")
            return await asyncio.shield(pending)

        entry = self._entries.get(key)
        if entry is not None and entry.is_fresh(self._clock()):
            logger.debug(f"Cache hit: {key}")
            return entry.data

        ttl = self.default_ttl if ttl is None else ttl
        logger.debug(f"Cache miss: {key}")

        task = asyncio.ensure_future(self._fetch(key, fetcher, ttl))
        task.add_done_callback(_mark_retrieved)
        self._pending[key] = task
        return await asyncio.shield(task)

    async def _fetch(self, key: str, fetcher: Fetcher, ttl: float) -> Any:
        """fetch 실행 후 진행 중 표시 해제 및 결과 캐시"""
        task = asyncio.current_task()
        try:
            data = await fetcher()
        finally:
            # clear()로 표시가 제거되었거나 새 fetch로 대체된 경우 건드리지 않음
            owned = self._pending.get(key) is task
            if owned:
                del self._pending[key]

        if owned:
            self._entries[key] = CacheEntry(key=key, data=data, timestamp=self._clock(), ttl=ttl)
        else:
            logger.debug(f"Discarding result of invalidated fetch: {key}")
        return data

    # =========================================================================
    # 무효화
    # =========================================================================

    def clear(self, key: str) -> None:
        """특정 키의 캐시와 진행 중 표시 제거 (쓰기 후 무효화)"""
        self._entries.pop(key, None)
        self._pending.pop(key, None)
        logger.debug(f"Cache cleared: {key}")

    def clear_all(self) -> None:
        """전체 캐시 초기화 (로그아웃 시)"""
        self._entries.clear()
        self._pending.clear()
        logger.info("Cache cleared (all entries)")

    def clear_expired(self) -> int:
        """만료된 항목 정리. 자동으로 호출되지 않습니다. 제거된 개수 반환"""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if not entry.is_fresh(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    # =========================================================================
    # 유틸리티
    # =========================================================================

    def stats(self) -> CacheStats:
        """캐시 통계"""
        return CacheStats(size=len(self._entries), pending_requests=len(self._pending))

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.is_fresh(self._clock())

    @staticmethod
    def generate_key(endpoint: str, params: Optional[Dict[str, Any]] = None) -> str:
        """엔드포인트와 파라미터로 캐시 키 생성"""
        param_string = json.dumps(params, sort_keys=True, default=str) if params is not None else ""
        return f"{endpoint}:{param_string}"

    def cached_call(
        self,
        endpoint: str,
        fetcher: Fetcher,
        ttl: Optional[float] = None,
    ) -> Callable[..., Awaitable[Any]]:
        """
        캐시를 거치는 API 호출 함수 생성

        Example:
            get_workflows = cache.cached_call("workflows", fetch_workflows, ttl=300)
            workflows = await get_workflows()
            page = await get_workflows({"page": 2})
        """

        async def call(params: Optional[Dict[str, Any]] = None) -> Any:
            return await self.get(self.generate_key(endpoint, params), fetcher, ttl)

        return call
