"""
캐시 모듈

화면 계층 조회용 읽기 캐시 (TTL + 동시 요청 병합)
"""

from .read_through import ReadThroughCache, CacheStats, CacheEntry

__all__ = [
    "ReadThroughCache",
    "CacheStats",
    "CacheEntry",
]
