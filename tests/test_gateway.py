"""
저장소 게이트웨이 / 리스팅 저장소 테스트
"""

import json

import httpx
import pytest

from market_listing.core.models import PricingMode, Unbounded
from market_listing.config import GatewayConfig
from market_listing.gateway import (
    HttpGateway,
    InMemoryGateway,
    ListingNotFoundError,
    ListingRepository,
)


class TestInMemoryGateway:
    """인메모리 게이트웨이"""

    @pytest.mark.asyncio
    async def test_load_returns_copy(self, gateway, flat_document):
        loaded = await gateway.load(flat_document.id)
        loaded.name = "Changed"

        again = await gateway.load(flat_document.id)
        assert again.name == flat_document.name

    @pytest.mark.asyncio
    async def test_missing(self, gateway):
        assert await gateway.load("missing") is None

    @pytest.mark.asyncio
    async def test_save(self, flat_document):
        gateway = InMemoryGateway()

        assert await gateway.save(flat_document.id, flat_document) is True
        assert len(gateway) == 1
        assert gateway.save_calls == [flat_document.id]


class TestListingRepository:
    """캐시를 거치는 저장소"""

    @pytest.mark.asyncio
    async def test_get_is_cached(self, repository, gateway, flat_document):
        first = await repository.get(flat_document.id)
        second = await repository.get(flat_document.id)

        assert first.name == second.name == "Invoice Reminder"
        assert gateway.load_calls == [flat_document.id]

    @pytest.mark.asyncio
    async def test_returned_documents_are_independent(self, repository, flat_document):
        first = await repository.get(flat_document.id)
        first.name = "Edited locally"

        second = await repository.get(flat_document.id)
        assert second.name == "Invoice Reminder"

    @pytest.mark.asyncio
    async def test_get_missing_raises(self, repository):
        with pytest.raises(ListingNotFoundError) as exc_info:
            await repository.get("missing")

        assert exc_info.value.listing_id == "missing"
        assert str(exc_info.value) == "Listing missing not found"

    @pytest.mark.asyncio
    async def test_find_missing(self, repository):
        assert await repository.find("missing") is None

    @pytest.mark.asyncio
    async def test_save_invalidates(self, repository, gateway, flat_document):
        doc = await repository.get(flat_document.id)
        doc.name = "Renamed"

        assert await repository.save(doc) is True

        reloaded = await repository.get(flat_document.id)
        assert reloaded.name == "Renamed"
        assert len(gateway.load_calls) == 2

    @pytest.mark.asyncio
    async def test_failed_save_keeps_cache(self, repository, gateway, flat_document):
        doc = await repository.get(flat_document.id)
        gateway.fail_saves = True

        assert await repository.save(doc) is False
        await repository.get(flat_document.id)
        assert len(gateway.load_calls) == 1

    @pytest.mark.asyncio
    async def test_sign_out_clears_everything(self, repository, gateway, flat_document):
        await repository.get(flat_document.id)

        repository.sign_out()

        assert repository.cache.stats().size == 0
        await repository.get(flat_document.id)
        assert len(gateway.load_calls) == 2

    @pytest.mark.asyncio
    async def test_ttl_expiry(self, repository, gateway, flat_document, clock):
        await repository.get(flat_document.id)
        clock.advance(60.0)

        await repository.get(flat_document.id)
        assert len(gateway.load_calls) == 2


def make_gateway(handler):
    return HttpGateway(
        base_url="https://market.test/api/",
        api_key="secret",
        transport=httpx.MockTransport(handler),
    )


class TestHttpGateway:
    """HTTP 게이트웨이"""

    @pytest.mark.asyncio
    async def test_load_hydrates_record(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers.get("X-Market-API-Key")
            return httpx.Response(200, json={
                "id": "wf-1",
                "name": "Lead Enrichment",
                "usage_pricing_type": "tiered",
                "usage_tiers": [
                    {"id": "t1", "minUsage": 0, "maxUsage": 99, "pricePerUnit": 1},
                    {"id": "t2", "minUsage": 100, "maxUsage": None, "pricePerUnit": 0.5},
                ],
                "tags": None,
            })

        gateway = make_gateway(handler)
        doc = await gateway.load("wf-1")
        await gateway.close()

        assert seen == {"url": "https://market.test/api/listings/wf-1", "key": "secret"}
        assert doc.pricing_mode == PricingMode.USAGE
        assert isinstance(doc.usage_tiers[1].max_usage, Unbounded)
        assert doc.tags == []

    @pytest.mark.asyncio
    async def test_load_missing(self):
        gateway = make_gateway(lambda request: httpx.Response(404))

        assert await gateway.load("missing") is None

    @pytest.mark.asyncio
    async def test_load_server_error_raises(self):
        gateway = make_gateway(lambda request: httpx.Response(500, text="boom"))

        with pytest.raises(httpx.HTTPStatusError):
            await gateway.load("wf-1")

    @pytest.mark.asyncio
    async def test_save_puts_document(self, flat_document):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["method"] = request.method
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True})

        gateway = make_gateway(handler)

        assert await gateway.save(flat_document.id, flat_document) is True
        assert captured["method"] == "PUT"
        assert captured["body"]["name"] == "Invoice Reminder"
        assert captured["body"]["tags"] == ["automation", "email"]

    @pytest.mark.asyncio
    async def test_save_rejected(self, flat_document):
        gateway = make_gateway(lambda request: httpx.Response(409, text="conflict"))

        assert await gateway.save(flat_document.id, flat_document) is False

    def test_from_config(self):
        gateway = HttpGateway.from_config(
            GatewayConfig(base_url="https://market.test", api_key="k", timeout=5.0)
        )

        assert gateway.base_url == "https://market.test"
        assert gateway.api_key == "k"
        assert gateway.timeout == 5.0
