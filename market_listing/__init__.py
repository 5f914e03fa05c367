"""
Marketplace Listing Integrity (market_listing)
==============================================

마켓플레이스 리스팅/워크플로우 설정의 무결성 검증

- 사용량 요금 티어 검증 (겹침/공백)
- 게시 요건 체크리스트와 위저드 단계 완료 판정 (단일 규칙 목록)
- 동시 요청을 병합하는 TTL 읽기 캐시

사용법:
    from market_listing import RequirementEngine, ReadThroughCache
    from market_listing.core.drafts import new_draft

Example:
    draft = new_draft(owner_id="seller-1")
    draft.name = "Invoice Reminder"

    engine = RequirementEngine()
    if not engine.can_publish(draft):
        for item in engine.unmet(draft):
            print(item.label)
"""

from .core.models import (
    ConfigDocument,
    UsageTier,
    Bounded,
    Unbounded,
    PricingMode,
    UsagePricingType,
    ListingStatus,
    FieldError,
    ValidationResult,
)
from .core.tiers import TierValidator, TierValidationResult, validate_tiers
from .core.requirements import (
    Requirement,
    RequirementEngine,
    get_publishing_requirements,
    can_publish,
)
from .core.wizard import WizardController, WizardStateError, SubmissionError
from .cache.read_through import ReadThroughCache, CacheStats
from .gateway import (
    PersistenceGateway,
    InMemoryGateway,
    HttpGateway,
    ListingRepository,
    ListingNotFoundError,
)
from .workflow.validation import validate_configuration, get_field_display_name
from .api.router import create_listing_router
from .config import ListingConfig, get_config, set_config

__version__ = "0.1.0"
__all__ = [
    # Models
    "ConfigDocument",
    "UsageTier",
    "Bounded",
    "Unbounded",
    "PricingMode",
    "UsagePricingType",
    "ListingStatus",
    "FieldError",
    "ValidationResult",
    # Validation
    "TierValidator",
    "TierValidationResult",
    "validate_tiers",
    "validate_configuration",
    "get_field_display_name",
    # Requirements / Wizard
    "Requirement",
    "RequirementEngine",
    "get_publishing_requirements",
    "can_publish",
    "WizardController",
    "WizardStateError",
    "SubmissionError",
    # Cache
    "ReadThroughCache",
    "CacheStats",
    # Gateway
    "PersistenceGateway",
    "InMemoryGateway",
    "HttpGateway",
    "ListingRepository",
    "ListingNotFoundError",
    # API
    "create_listing_router",
    # Config
    "ListingConfig",
    "get_config",
    "set_config",
]
