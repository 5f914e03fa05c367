"""
리스팅 저장소

게이트웨이 조회를 읽기 캐시로 감싸고, 저장 성공 시 해당 키를 무효화합니다.
"""

import logging
from typing import Optional

from ..cache import ReadThroughCache
from ..core.models import ConfigDocument
from .base import PersistenceGateway, ListingNotFoundError

logger = logging.getLogger(__name__)


class ListingRepository:
    """
    캐시를 거치는 리스팅 저장소

    캐시에 저장된 문서는 호출자에게 복사본으로만 전달됩니다.

    Example:
        repo = ListingRepository(gateway, ReadThroughCache(), ttl=60)

        doc = await repo.get("wf-001")
        doc.name = "Renamed"
        await repo.save(doc)    # 저장 후 캐시 무효화

        repo.sign_out()         # 전체 캐시 초기화
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        cache: Optional[ReadThroughCache] = None,
        ttl: Optional[float] = None,
    ):
        self.gateway = gateway
        self.cache = cache or ReadThroughCache()
        self.ttl = ttl

    @staticmethod
    def cache_key(listing_id: str) -> str:
        return f"listing:{listing_id}"

    async def find(self, listing_id: str) -> Optional[ConfigDocument]:
        """리스팅 조회 (없으면 None)"""
        doc = await self.cache.get(
            self.cache_key(listing_id),
            lambda: self.gateway.load(listing_id),
            self.ttl,
        )
        return doc.model_copy(deep=True) if doc is not None else None

    async def get(self, listing_id: str) -> ConfigDocument:
        """리스팅 조회 (없으면 ListingNotFoundError)"""
        doc = await self.find(listing_id)
        if doc is None:
            raise ListingNotFoundError(listing_id)
        return doc

    async def save(self, document: ConfigDocument) -> bool:
        """리스팅 저장 후 캐시 무효화"""
        saved = await self.gateway.save(document.id, document)
        if saved:
            self.cache.clear(self.cache_key(document.id))
        else:
            logger.warning(f"Listing save returned failure: {document.id}")
        return saved

    def invalidate(self, listing_id: str) -> None:
        self.cache.clear(self.cache_key(listing_id))

    def sign_out(self) -> None:
        """로그아웃 시 전체 캐시 초기화"""
        self.cache.clear_all()
