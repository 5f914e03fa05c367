"""
market_listing - Pytest Configuration

테스트에서 사용할 공통 fixture들을 정의합니다.
"""

import sys
from pathlib import Path

import pytest

# 프로젝트 루트를 Python 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from market_listing.cache import ReadThroughCache
from market_listing.core.drafts import new_draft, new_tier
from market_listing.core.models import (
    ConfigDocument,
    PricingMode,
    UsagePricingType,
)
from market_listing.gateway import InMemoryGateway, ListingRepository

LONG_DESCRIPTION = (
    "Automatically sends payment reminders to customers whose invoices are overdue."
)


class FakeClock:
    """수동으로 진행시키는 시계 (초 단위)"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ReadThroughCache:
    """주입된 시계를 사용하는 캐시"""
    return ReadThroughCache(default_ttl=1.0, clock=clock)


@pytest.fixture
def flat_document() -> ConfigDocument:
    """게시 가능한 고정 요금 리스팅"""
    doc = new_draft(owner_id="seller-1", draft_id="wf-flat")
    doc.name = "Invoice Reminder"
    doc.description = LONG_DESCRIPTION
    doc.price = 10.0
    doc.tags = ["automation", "email"]
    return doc


@pytest.fixture
def tiered_document() -> ConfigDocument:
    """게시 가능한 사용량(티어) 요금 리스팅"""
    doc = new_draft(owner_id="seller-1", draft_id="wf-tiered")
    doc.name = "Lead Enrichment"
    doc.description = LONG_DESCRIPTION
    doc.tags = ["crm"]
    doc.pricing_mode = PricingMode.USAGE
    doc.usage_pricing_type = UsagePricingType.TIERED
    doc.usage_tiers = [
        new_tier(0, 99, 1.0, tier_id="t1"),
        new_tier(100, None, 0.5, tier_id="t2"),
    ]
    doc.usage_test_completed = True
    return doc


@pytest.fixture
def gateway(flat_document: ConfigDocument) -> InMemoryGateway:
    """리스팅 하나가 저장된 인메모리 게이트웨이"""
    return InMemoryGateway({flat_document.id: flat_document})


@pytest.fixture
def repository(gateway: InMemoryGateway, cache: ReadThroughCache) -> ListingRepository:
    return ListingRepository(gateway, cache, ttl=60.0)
