"""
저장소 게이트웨이 추상 클래스

ConfigDocument의 영속화는 외부 협력자가 담당합니다.
코어는 load/save 두 연산 외에는 구현 방식을 알지 못합니다.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..core.models import ConfigDocument


class PersistenceGateway(ABC):
    """
    저장소 게이트웨이 추상 클래스

    Example:
        class MyGateway(PersistenceGateway):
            async def load(self, listing_id: str) -> Optional[ConfigDocument]:
                row = await db.fetch_listing(listing_id)
                return hydrate(row) if row else None

            async def save(self, listing_id: str, document: ConfigDocument) -> bool:
                return await db.upsert_listing(listing_id, document.to_dict())
    """

    @abstractmethod
    async def load(self, listing_id: str) -> Optional[ConfigDocument]:
        """리스팅 조회. 없으면 None"""

    @abstractmethod
    async def save(self, listing_id: str, document: ConfigDocument) -> bool:
        """리스팅 저장. 성공 여부 반환"""

    async def close(self) -> None:
        """리소스 정리 (필요한 구현만 오버라이드)"""


class ListingNotFoundError(Exception):
    """리스팅을 찾을 수 없을 때 발생"""
    def __init__(self, listing_id: str):
        self.listing_id = listing_id
        super().__init__(f"Listing {listing_id} not found")
