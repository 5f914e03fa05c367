"""
HTTP 저장소 게이트웨이

마켓 백엔드의 리스팅 API를 호출하는 httpx 기반 구현
"""

import logging
from typing import Optional

import httpx

from ..core.drafts import hydrate
from ..core.models import ConfigDocument
from .base import PersistenceGateway

logger = logging.getLogger(__name__)


class HttpGateway(PersistenceGateway):
    """
    HTTP 게이트웨이

    Example:
        gateway = HttpGateway(
            base_url="https://market.example.com/api",
            api_key="your-api-key"
        )

        doc = await gateway.load("wf-001")
        ok = await gateway.save(doc.id, doc)

        await gateway.close()
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        api_key_header: str = "X-Market-API-Key",
        timeout: float = 30.0,
        listings_path: str = "/listings/{listing_id}",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.api_key_header = api_key_header
        self.timeout = timeout
        self.listings_path = listings_path
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_config(cls, config=None) -> "HttpGateway":
        """GatewayConfig 기반 게이트웨이 생성"""
        if config is None:
            from ..config import get_config
            config = get_config().gateway
        return cls(
            base_url=config.base_url,
            api_key=config.api_key,
            api_key_header=config.api_key_header,
            timeout=config.timeout,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 반환"""
        if self._client is None:
            headers = {self.api_key_header: self.api_key} if self.api_key else {}
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """클라이언트 종료"""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _url(self, listing_id: str) -> str:
        return f"{self.base_url}{self.listings_path.format(listing_id=listing_id)}"

    async def load(self, listing_id: str) -> Optional[ConfigDocument]:
        """리스팅 조회"""
        client = await self._get_client()

        try:
            response = await client.get(self._url(listing_id))
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return hydrate(response.json())
        except httpx.HTTPStatusError as e:
            logger.error(f"Listing load failed: {e.response.text}")
            raise
        except Exception as e:
            logger.error(f"Listing load failed: {e}")
            raise

    async def save(self, listing_id: str, document: ConfigDocument) -> bool:
        """리스팅 저장"""
        client = await self._get_client()

        try:
            response = await client.put(self._url(listing_id), json=document.to_dict())
            response.raise_for_status()
            logger.info(f"Listing saved: {listing_id}")
            return True
        except httpx.HTTPStatusError as e:
            logger.error(f"Listing save failed: {e.response.text}")
            return False
