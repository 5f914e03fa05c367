"""
게시 요건 엔진

하나의 선언적 규칙 목록으로 리스팅의 게시 요건 체크리스트와
위저드 단계별 완료 여부를 모두 계산합니다.

- get_publishing_requirements: 전체 규칙 평가 (체크리스트)
- can_publish: 모든 요건 충족 여부
- step_field_errors: 특정 위저드 단계가 소유한 규칙만 평가

사용 예시:
    from market_listing.core.requirements import RequirementEngine

    engine = RequirementEngine()
    for requirement in engine.requirements(doc):
        print(requirement.completed, requirement.label)
    if engine.can_publish(doc):
        ...
"""

from dataclasses import dataclass, asdict
from typing import Optional, List, Callable, Union, Dict

from .models import (
    ConfigDocument,
    PricingMode,
    UsagePricingType,
    SourceCodeFormat,
    FieldError,
    SELF_SERVICE,
)
from .tiers import TierValidator, EMPTY_TIERS_MESSAGE

DocPredicate = Callable[[ConfigDocument, PricingMode], bool]
Label = Union[str, Callable[[ConfigDocument, PricingMode], str]]


class StepId:
    """위저드 단계 ID"""
    BASIC_INFO = "basic-info"
    PRICING = "pricing"
    SOURCE_CODE = "source-code"
    DETAILS = "details"
    REVIEW = "review"


@dataclass
class Requirement:
    """게시 요건 항목 (화면에서 순서대로 체크리스트로 표시)"""
    id: str
    label: str
    completed: bool

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def _always(doc: ConfigDocument, mode: PricingMode) -> bool:
    return True


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


@dataclass
class Rule:
    """
    선언적 요건 규칙

    applies_when이 거짓이면 체크리스트에 나타나지 않습니다.
    step이 None인 규칙은 게시 시점에만 평가됩니다.
    """
    id: str
    field: str
    label: Label
    predicate: DocPredicate
    applies_when: DocPredicate = _always
    step: Optional[str] = None
    # 미충족 시 필드 오류 메시지 (없으면 label 사용)
    messages: Optional[Callable[[ConfigDocument, PricingMode], List[str]]] = None

    def applies(self, doc: ConfigDocument, mode: PricingMode) -> bool:
        return self.applies_when(doc, mode)

    def is_met(self, doc: ConfigDocument, mode: PricingMode) -> bool:
        return self.predicate(doc, mode)

    def label_for(self, doc: ConfigDocument, mode: PricingMode) -> str:
        if callable(self.label):
            return self.label(doc, mode)
        return self.label

    def errors_for(self, doc: ConfigDocument, mode: PricingMode) -> List[FieldError]:
        if self.messages is not None:
            texts = self.messages(doc, mode)
        else:
            texts = [self.label_for(doc, mode)]
        return [FieldError(self.field, text) for text in texts]


def build_rules(
    tier_validator: Optional[TierValidator] = None,
    min_description_length: int = 50,
) -> List[Rule]:
    """게시 요건 규칙 목록 생성 (순서가 곧 체크리스트 표시 순서)"""
    tier_validator = tier_validator or TierValidator()

    def is_usage(doc, mode):
        return mode == PricingMode.USAGE

    def is_flat(doc, mode):
        return mode == PricingMode.FLAT

    def usage_sub_mode(sub_mode):
        return lambda doc, mode: is_usage(doc, mode) and doc.usage_pricing_type == sub_mode

    def sells_source_code(doc, mode):
        return (doc.source_code_price or 0) > 0

    def tiers_valid(doc, mode):
        return tier_validator.validate(doc.usage_tiers).is_valid

    def tiers_label(doc, mode):
        if not doc.usage_tiers:
            return EMPTY_TIERS_MESSAGE
        if tiers_valid(doc, mode):
            return "Usage tiers are valid"
        return "All tiers must have valid, non-overlapping and gap-free ranges"

    description_label = f"Description must be at least {min_description_length} characters"

    return [
        Rule(
            id="name",
            field="name",
            label="Workflow name is required",
            predicate=lambda doc, mode: not _blank(doc.name),
            step=StepId.BASIC_INFO,
        ),
        Rule(
            id="description",
            field="description",
            label=description_label,
            predicate=lambda doc, mode: len(doc.description.strip()) >= min_description_length,
            step=StepId.BASIC_INFO,
        ),
        Rule(
            id="installation_url",
            field="installation_url",
            label="Installation URL is required for self-service items",
            predicate=lambda doc, mode: not _blank(doc.installation_url),
            applies_when=lambda doc, mode: doc.setup_time == SELF_SERVICE,
            step=StepId.DETAILS,
        ),
        Rule(
            id="usage_test",
            field="usage_test_completed",
            label="Usage test must be completed for usage-based pricing",
            predicate=lambda doc, mode: doc.usage_test_completed,
            applies_when=is_usage,
        ),
        Rule(
            id="price",
            field="price",
            label=lambda doc, mode: (
                "Price cannot be negative" if doc.price < 0
                else "Free workflow" if doc.price == 0
                else "Price set"
            ),
            predicate=lambda doc, mode: doc.price >= 0,
            applies_when=is_flat,
            step=StepId.PRICING,
        ),
        Rule(
            id="flat_usage_price",
            field="flat_usage_price",
            label="Flat usage price must be greater than 0",
            predicate=lambda doc, mode: (doc.flat_usage_price or 0) > 0,
            applies_when=usage_sub_mode(UsagePricingType.FLAT_RATE),
            step=StepId.PRICING,
        ),
        Rule(
            id="usage_tiers",
            field="usage_tiers",
            label=tiers_label,
            predicate=tiers_valid,
            applies_when=usage_sub_mode(UsagePricingType.TIERED),
            step=StepId.PRICING,
            messages=lambda doc, mode: tier_validator.validate(doc.usage_tiers).errors,
        ),
        Rule(
            id="usage_pricing_type",
            field="usage_pricing_type",
            label="Please select a usage pricing type",
            predicate=lambda doc, mode: False,
            applies_when=lambda doc, mode: is_usage(doc, mode) and doc.usage_pricing_type is None,
            step=StepId.PRICING,
        ),
        Rule(
            id="source_code_format",
            field="source_code_format",
            label="Source code format is required when selling source code",
            predicate=lambda doc, mode: doc.source_code_format is not None,
            applies_when=sells_source_code,
            step=StepId.SOURCE_CODE,
        ),
        Rule(
            id="source_code_url",
            field="source_code_url",
            label="Source code URL is required when format is URL",
            predicate=lambda doc, mode: not _blank(doc.source_code_url),
            applies_when=lambda doc, mode: (
                sells_source_code(doc, mode) and doc.source_code_format == SourceCodeFormat.URL
            ),
            step=StepId.SOURCE_CODE,
        ),
        Rule(
            id="tags",
            field="tags",
            label="At least one tag is required",
            predicate=lambda doc, mode: len(doc.tags) > 0,
            step=StepId.DETAILS,
        ),
    ]


class RequirementEngine:
    """
    게시 요건 엔진

    규칙은 서로의 결과를 참조하지 않으며 모두 평가됩니다 (단락 평가 없음).
    미충족 규칙은 예외가 아니라 completed=False 항목으로 표현됩니다.
    """

    def __init__(
        self,
        tier_validator: Optional[TierValidator] = None,
        min_description_length: int = 50,
    ):
        self.tier_validator = tier_validator or TierValidator()
        self.min_description_length = min_description_length
        self.rules = build_rules(self.tier_validator, min_description_length)

    @classmethod
    def from_config(cls, config=None) -> "RequirementEngine":
        """ValidationConfig 기반 엔진 생성"""
        if config is None:
            from ..config import get_config
            config = get_config().validation
        return cls(
            tier_validator=TierValidator(gap_policy=config.tier_gap_policy),
            min_description_length=config.min_description_length,
        )

    def _mode(self, doc: ConfigDocument, mode: Optional[PricingMode]) -> PricingMode:
        return PricingMode(mode) if mode is not None else doc.pricing_mode

    def applicable_rules(
        self,
        doc: ConfigDocument,
        mode: Optional[PricingMode] = None,
        step: Optional[str] = None,
    ) -> List[Rule]:
        """적용 대상 규칙 (step을 주면 해당 단계 소유 규칙만)"""
        mode = self._mode(doc, mode)
        return [
            rule for rule in self.rules
            if (step is None or rule.step == step) and rule.applies(doc, mode)
        ]

    def requirements(
        self,
        doc: ConfigDocument,
        mode: Optional[PricingMode] = None,
    ) -> List[Requirement]:
        """게시 요건 체크리스트"""
        mode = self._mode(doc, mode)
        return [
            Requirement(
                id=rule.id,
                label=rule.label_for(doc, mode),
                completed=bool(rule.is_met(doc, mode)),
            )
            for rule in self.applicable_rules(doc, mode)
        ]

    def can_publish(self, doc: ConfigDocument, mode: Optional[PricingMode] = None) -> bool:
        """게시 가능 여부"""
        return all(r.completed for r in self.requirements(doc, mode))

    def unmet(self, doc: ConfigDocument, mode: Optional[PricingMode] = None) -> List[Requirement]:
        """미충족 요건"""
        return [r for r in self.requirements(doc, mode) if not r.completed]

    def step_field_errors(
        self,
        doc: ConfigDocument,
        step: str,
        mode: Optional[PricingMode] = None,
    ) -> List[FieldError]:
        """특정 단계가 소유한 규칙 중 미충족 항목의 필드 오류"""
        mode = self._mode(doc, mode)
        errors: List[FieldError] = []
        for rule in self.applicable_rules(doc, mode, step=step):
            if not rule.is_met(doc, mode):
                errors.extend(rule.errors_for(doc, mode))
        return errors


# 기본 규칙 기반 함수형 진입점
_default_engine = RequirementEngine()


def get_publishing_requirements(
    doc: ConfigDocument,
    mode: Optional[PricingMode] = None,
) -> List[Requirement]:
    """게시 요건 체크리스트 (기본 규칙)"""
    return _default_engine.requirements(doc, mode)


def can_publish(doc: ConfigDocument, mode: Optional[PricingMode] = None) -> bool:
    """게시 가능 여부 (기본 규칙)"""
    return _default_engine.can_publish(doc, mode)


def unmet_requirements(doc: ConfigDocument, mode: Optional[PricingMode] = None) -> List[Requirement]:
    """미충족 요건 (기본 규칙)"""
    return _default_engine.unmet(doc, mode)


def step_field_errors(
    doc: ConfigDocument,
    step: str,
    mode: Optional[PricingMode] = None,
) -> List[FieldError]:
    """단계별 필드 오류 (기본 규칙)"""
    return _default_engine.step_field_errors(doc, step, mode)
