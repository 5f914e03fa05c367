"""
리스팅 초안 편집 헬퍼

새 초안 생성, 요금 방식 전환, 태그/티어 편집, 미저장 변경 감지 등
편집 화면의 입력 처리기가 ConfigDocument를 변경할 때 사용하는 함수들
"""

import logging
import uuid
from typing import Optional, List, Dict, Any

from .models import (
    ConfigDocument,
    PricingMode,
    BillingPeriod,
    UsageTier,
    Unbounded,
    upper_bound,
)

logger = logging.getLogger(__name__)

# 비교 대상에서 제외하는 식별 필드
IDENTITY_FIELDS = ("id", "owner_id")

COMMON_TAGS = [
    "automation",
    "productivity",
    "small-business",
    "local-business",
    "e-commerce",
    "crm",
    "email",
    "social-media",
    "analytics",
    "inventory",
    "scheduling",
    "notifications",
    "data-processing",
    "integration",
    "workflow",
    "api",
]


def new_draft(owner_id: Optional[str] = None, draft_id: Optional[str] = None) -> ConfigDocument:
    """새 리스팅 초안 (기본값)"""
    return ConfigDocument(
        id=draft_id or f"draft-{uuid.uuid4().hex[:12]}",
        owner_id=owner_id,
    )


def infer_pricing_mode(record: Dict[str, Any]) -> PricingMode:
    """
    저장된 레코드의 요금 방식 추론

    usage_pricing_type이 설정되어 있으면 사용량 기반으로 봅니다.
    """
    if record.get("usage_pricing_type") is not None:
        return PricingMode.USAGE
    return PricingMode.FLAT


def hydrate(record: Dict[str, Any]) -> ConfigDocument:
    """
    저장소 레코드에서 ConfigDocument 복원

    - pricing_mode가 없으면 usage_pricing_type으로 추론
    - 저장소의 티어는 maxUsage가 비어 있으면 상한 없음을 의미하므로
      명시적인 Unbounded로 변환
    """
    data = dict(record)
    if "pricing_mode" not in data:
        data["pricing_mode"] = infer_pricing_mode(data).value

    tiers = []
    for tier in data.get("usage_tiers") or []:
        tier = dict(tier)
        key = "maxUsage" if "maxUsage" in tier else "max_usage"
        if tier.get(key) is None:
            tier[key] = "unbounded"
        tiers.append(tier)
    data["usage_tiers"] = tiers

    if data.get("tags") is None:
        data["tags"] = []
    return ConfigDocument.model_validate(data)


def switch_pricing_mode(doc: ConfigDocument, mode: PricingMode) -> ConfigDocument:
    """
    요금 방식 전환

    다른 방식의 필드는 검증에서 무시되지만, 오래된 값이 남지 않도록 비웁니다.
    """
    mode = PricingMode(mode)
    doc.pricing_mode = mode

    if mode == PricingMode.USAGE:
        doc.billing_period = BillingPeriod.MONTHLY
        doc.price = 0.0
    else:
        doc.billing_period = BillingPeriod.ONE_TIME
        doc.usage_pricing_type = None
        doc.usage_tiers = []
        doc.flat_usage_price = None

    logger.debug(f"Pricing mode switched: {doc.id} -> {mode.value}")
    return doc


# =========================================================================
# 태그
# =========================================================================

def add_tag(doc: ConfigDocument, tag: str) -> bool:
    """태그 추가 (소문자 정규화, 중복/공백 무시). 추가되면 True"""
    normalized = tag.strip().lower()
    if not normalized or normalized in doc.tags:
        return False
    doc.tags = [*doc.tags, normalized]
    return True


def remove_tag(doc: ConfigDocument, tag: str) -> bool:
    """태그 제거. 제거되면 True"""
    if tag not in doc.tags:
        return False
    doc.tags = [t for t in doc.tags if t != tag]
    return True


# =========================================================================
# 티어
# =========================================================================

def new_tier(
    min_usage: int = 0,
    max_usage: Any = None,
    price_per_unit: float = 0.0,
    tier_id: Optional[str] = None,
) -> UsageTier:
    """새 티어 (max_usage를 생략하면 상한 없음)"""
    return UsageTier(
        id=tier_id or f"tier-{uuid.uuid4().hex[:8]}",
        min_usage=min_usage,
        max_usage=Unbounded() if max_usage is None else upper_bound(max_usage),
        price_per_unit=price_per_unit,
    )


def add_tier(doc: ConfigDocument, tier: Optional[UsageTier] = None) -> UsageTier:
    """티어 추가"""
    tier = tier or new_tier()
    doc.usage_tiers = [*doc.usage_tiers, tier]
    return tier


def remove_tier(doc: ConfigDocument, tier_id: str) -> bool:
    """티어 제거"""
    remaining = [t for t in doc.usage_tiers if t.id != tier_id]
    if len(remaining) == len(doc.usage_tiers):
        return False
    doc.usage_tiers = remaining
    return True


def update_tier(doc: ConfigDocument, tier_id: str, **changes) -> UsageTier:
    """티어 필드 수정"""
    for tier in doc.usage_tiers:
        if tier.id == tier_id:
            for name, value in changes.items():
                setattr(tier, name, value)
            return tier
    raise KeyError(f"Tier not found: {tier_id}")


# =========================================================================
# 미저장 변경 감지
# =========================================================================

def changed_fields(doc: ConfigDocument, original: ConfigDocument) -> List[str]:
    """원본 대비 변경된 필드 목록 (식별 필드 제외)"""
    current = doc.model_dump(mode="json", exclude=set(IDENTITY_FIELDS))
    saved = original.model_dump(mode="json", exclude=set(IDENTITY_FIELDS))
    return [name for name in current if current[name] != saved.get(name)]


def has_unsaved_changes(doc: ConfigDocument, original: Optional[ConfigDocument]) -> bool:
    """미저장 변경 여부"""
    if original is None:
        return True
    return bool(changed_fields(doc, original))
