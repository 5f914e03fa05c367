"""
인메모리 저장소 게이트웨이

테스트와 CLI에서 사용하는 dict 기반 구현
"""

import logging
from typing import Optional, Dict, List

from ..core.models import ConfigDocument
from .base import PersistenceGateway

logger = logging.getLogger(__name__)


class InMemoryGateway(PersistenceGateway):
    """
    인메모리 게이트웨이

    저장/조회 시 복사본을 주고받으므로 호출자의 문서와 저장된 문서가
    서로 영향을 주지 않습니다.

    Usage:
        gateway = InMemoryGateway()
        await gateway.save(doc.id, doc)
        loaded = await gateway.load(doc.id)

        # 저장 실패 시뮬레이션
        gateway.fail_saves = True
    """

    def __init__(self, documents: Optional[Dict[str, ConfigDocument]] = None):
        self._documents: Dict[str, ConfigDocument] = {
            key: doc.model_copy(deep=True) for key, doc in (documents or {}).items()
        }
        self.fail_saves = False
        self.load_calls: List[str] = []
        self.save_calls: List[str] = []

    async def load(self, listing_id: str) -> Optional[ConfigDocument]:
        self.load_calls.append(listing_id)
        doc = self._documents.get(listing_id)
        return doc.model_copy(deep=True) if doc else None

    async def save(self, listing_id: str, document: ConfigDocument) -> bool:
        self.save_calls.append(listing_id)
        if self.fail_saves:
            logger.warning(f"Simulated save failure: {listing_id}")
            return False
        self._documents[listing_id] = document.model_copy(deep=True)
        logger.info(f"Listing saved: {listing_id}")
        return True

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, listing_id: str) -> bool:
        return listing_id in self._documents
