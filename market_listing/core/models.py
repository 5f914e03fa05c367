"""
리스팅 설정 문서 모델

마켓플레이스 리스팅/워크플로우 설정 초안(ConfigDocument)과
사용량 요금 티어, 검증 결과 구조를 정의합니다.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any, Union, Literal, Annotated

from pydantic import BaseModel, Field, field_validator


# ============================================================================
# Enums
# ============================================================================

class PricingMode(str, Enum):
    """요금 방식"""
    FLAT = "flat"
    USAGE = "usage"


class UsagePricingType(str, Enum):
    """사용량 기반 요금 유형"""
    FLAT_RATE = "flat_rate"
    TIERED = "tiered"


class BillingPeriod(str, Enum):
    """결제 주기"""
    ONE_TIME = "one_time"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    LIFETIME = "lifetime"
    USAGE_BASED = "usage_based"


class SourceCodeFormat(str, Enum):
    """소스 코드 제공 형식"""
    JSON = "json"
    PROVIDED_IN_CHAT = "provided_in_chat"
    URL = "url"


class ListingStatus(str, Enum):
    """리스팅 게시 상태"""
    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    ACTIVE = "active"
    INACTIVE = "inactive"
    REJECTED = "rejected"


SELF_SERVICE = "self-service"

SETUP_TIME_OPTIONS = [
    "15min",
    "30min",
    "1hr",
    "2hr",
    "4hr",
    "1day",
    "2days",
    "1week",
    SELF_SERVICE,
]


# ============================================================================
# 티어 상한 (Bounded | Unbounded)
# ============================================================================

class Bounded(BaseModel):
    """상한이 있는 티어 범위"""
    kind: Literal["bounded"] = "bounded"
    value: int

    def as_number(self) -> float:
        return self.value

    def label(self) -> str:
        return str(self.value)


class Unbounded(BaseModel):
    """상한이 없는 티어 범위 (의도적으로 무제한)"""
    kind: Literal["unbounded"] = "unbounded"

    def as_number(self) -> float:
        return math.inf

    def label(self) -> str:
        return "∞"


UpperBound = Annotated[Union[Bounded, Unbounded], Field(discriminator="kind")]

UNBOUNDED = Unbounded()


def upper_bound(value: Any) -> Union[Bounded, Unbounded]:
    """
    입력값을 티어 상한으로 변환

    정수는 Bounded, "unbounded"/"inf"/"∞"는 Unbounded로 변환합니다.
    None은 "아직 입력하지 않음"과 구분할 수 없으므로 허용하지 않습니다.
    """
    if isinstance(value, (Bounded, Unbounded)):
        return value
    if isinstance(value, dict):
        if value.get("kind") == "unbounded":
            return Unbounded()
        if "value" not in value:
            raise ValueError("bounded max_usage requires 'value'")
        return Bounded(value=value["value"])
    if isinstance(value, str):
        if value.strip().lower() in ("unbounded", "inf", "infinity", "∞"):
            return Unbounded()
        return Bounded(value=int(value))
    if value is None or isinstance(value, bool):
        raise ValueError("max_usage must be an integer or 'unbounded'")
    if isinstance(value, float):
        if math.isinf(value):
            return Unbounded()
        # 소수 상한은 허용하지 않음
        if not value.is_integer():
            raise ValueError("max_usage must be an integer or 'unbounded'")
    return Bounded(value=int(value))


class UsageTier(BaseModel):
    """
    사용량 요금 티어

    필드 제약(min_usage >= 0, price_per_unit > 0 등)은 생성 시점이 아니라
    TierValidator에서 검사합니다. 편집 중인 초안은 잘못된 값을 가질 수 있습니다.
    """
    id: str
    min_usage: int = Field(default=0, alias="minUsage")
    max_usage: UpperBound = Field(default_factory=Unbounded, alias="maxUsage")
    price_per_unit: float = Field(default=0.0, alias="pricePerUnit")

    class Config:
        populate_by_name = True
        validate_assignment = True

    @field_validator("max_usage", mode="before")
    @classmethod
    def _coerce_max_usage(cls, value: Any) -> Any:
        return upper_bound(value).model_dump()

    @property
    def range_label(self) -> str:
        return f"{self.min_usage}-{self.max_usage.label()}"


# ============================================================================
# ConfigDocument
# ============================================================================

class ConfigDocument(BaseModel):
    """
    리스팅/워크플로우 설정 초안

    편집 세션 동안 필드 단위로 변경됩니다. 게시 가능 여부는
    RequirementEngine이 문서로부터 매번 다시 계산합니다.
    """
    # 식별자
    id: str
    owner_id: Optional[str] = None

    # 기본 정보
    name: str = ""
    description: str = ""
    tags: List[str] = Field(default_factory=list)

    # 요금
    pricing_mode: PricingMode = PricingMode.FLAT
    price: float = 0.0
    billing_period: BillingPeriod = BillingPeriod.ONE_TIME
    usage_pricing_type: Optional[UsagePricingType] = None
    flat_usage_price: Optional[float] = None
    usage_tiers: List[UsageTier] = Field(default_factory=list)

    # 설치
    setup_time: Optional[str] = None
    installation_url: Optional[str] = None

    # 소스 코드 판매
    source_code_price: Optional[float] = None
    source_code_format: Optional[SourceCodeFormat] = None
    source_code_url: Optional[str] = None

    # 기타
    demo_link: Optional[str] = None

    # 게시
    status: ListingStatus = ListingStatus.DRAFT
    is_public: bool = False
    usage_test_completed: bool = False

    class Config:
        validate_assignment = True
        json_schema_extra = {
            "example": {
                "id": "wf-001",
                "owner_id": "seller-1",
                "name": "Invoice Reminder",
                "description": "Sends automated payment reminders to customers with overdue invoices.",
                "tags": ["automation", "email"],
                "pricing_mode": "usage",
                "usage_pricing_type": "tiered",
                "usage_tiers": [
                    {"id": "t1", "min_usage": 0, "max_usage": 99, "price_per_unit": 1.0},
                    {"id": "t2", "min_usage": 100, "max_usage": "unbounded", "price_per_unit": 0.5},
                ],
                "usage_test_completed": True,
            }
        }

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigDocument":
        """딕셔너리에서 ConfigDocument 생성"""
        return cls.model_validate(data)


# ============================================================================
# 검증 결과
# ============================================================================

@dataclass
class FieldError:
    """
    필드 단위 검증 오류

    field는 점/대괄호 경로 규칙을 따릅니다 (예: connection_keys[0].description).
    화면 쪽 라벨 매핑이 이 경로를 키로 사용하므로 형식을 바꾸지 않습니다.
    """
    field: str
    message: str
    severity: str = "error"  # error, warning

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass
class ValidationResult:
    """검증 결과"""
    is_valid: bool = True
    errors: List[FieldError] = field(default_factory=list)
    warnings: List[FieldError] = field(default_factory=list)

    def add_error(self, path: str, message: str):
        self.errors.append(FieldError(path, message, "error"))
        self.is_valid = False

    def add_warning(self, path: str, message: str):
        self.warnings.append(FieldError(path, message, "warning"))

    def errors_for(self, path: str) -> List[str]:
        """특정 필드의 오류 메시지 목록"""
        return [e.message for e in self.errors if e.field == path]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }
