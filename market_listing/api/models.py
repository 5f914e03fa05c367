"""
리스팅 API 요청/응답 모델
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field

from ..core.models import ConfigDocument, UsageTier, PricingMode


class TierValidationRequest(BaseModel):
    """티어 검증 요청"""
    tiers: List[UsageTier] = Field(default_factory=list, description="검증할 티어 목록 (화면 표시 순서)")
    gap_policy: Optional[str] = Field(default=None, description="error 또는 warning (기본: 설정값)")


class TierValidationResponse(BaseModel):
    """티어 검증 응답"""
    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class FieldErrorModel(BaseModel):
    """필드 오류"""
    field: str
    message: str


class WorkflowValidationResponse(BaseModel):
    """워크플로우 설정 검증 응답"""
    is_valid: bool
    errors: List[FieldErrorModel] = Field(default_factory=list)
    warnings: List[FieldErrorModel] = Field(default_factory=list)


class RequirementsRequest(BaseModel):
    """게시 요건 계산 요청"""
    document: ConfigDocument
    pricing_mode: Optional[PricingMode] = Field(default=None, description="없으면 문서의 pricing_mode 사용")


class RequirementModel(BaseModel):
    """게시 요건 항목"""
    id: str
    label: str
    completed: bool


class RequirementsResponse(BaseModel):
    """게시 요건 응답"""
    requirements: List[RequirementModel]
    can_publish: bool


class ErrorResponse(BaseModel):
    """에러 응답"""
    success: bool = False
    error: str
    message: str
    details: Optional[Dict[str, Any]] = None


class ErrorCodes:
    """에러 코드 상수"""
    LISTING_NOT_FOUND = "LISTING_NOT_FOUND"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"
