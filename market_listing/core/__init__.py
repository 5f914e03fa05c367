"""
Core 모듈 - 리스팅 설정 무결성

- ConfigDocument, UsageTier: 설정 초안 모델
- TierValidator: 사용량 티어 검증
- RequirementEngine: 게시 요건 체크리스트
- WizardController: 리스팅 생성 위저드
"""
from .models import (
    ConfigDocument,
    UsageTier,
    Bounded,
    Unbounded,
    UNBOUNDED,
    PricingMode,
    UsagePricingType,
    BillingPeriod,
    SourceCodeFormat,
    ListingStatus,
    FieldError,
    ValidationResult,
    SELF_SERVICE,
    SETUP_TIME_OPTIONS,
)
from .tiers import TierValidator, TierValidationResult, validate_tiers
from .requirements import (
    Requirement,
    Rule,
    RequirementEngine,
    StepId,
    get_publishing_requirements,
    can_publish,
    unmet_requirements,
    step_field_errors,
)
from .wizard import (
    WizardController,
    WizardStep,
    WizardStepStatus,
    StepTransition,
    WizardStateError,
    SubmissionError,
    WIZARD_STEPS,
)
from . import drafts

__all__ = [
    # Models
    "ConfigDocument",
    "UsageTier",
    "Bounded",
    "Unbounded",
    "UNBOUNDED",
    "PricingMode",
    "UsagePricingType",
    "BillingPeriod",
    "SourceCodeFormat",
    "ListingStatus",
    "FieldError",
    "ValidationResult",
    "SELF_SERVICE",
    "SETUP_TIME_OPTIONS",
    # Tiers
    "TierValidator",
    "TierValidationResult",
    "validate_tiers",
    # Requirements
    "Requirement",
    "Rule",
    "RequirementEngine",
    "StepId",
    "get_publishing_requirements",
    "can_publish",
    "unmet_requirements",
    "step_field_errors",
    # Wizard
    "WizardController",
    "WizardStep",
    "WizardStepStatus",
    "StepTransition",
    "WizardStateError",
    "SubmissionError",
    "WIZARD_STEPS",
    "drafts",
]
