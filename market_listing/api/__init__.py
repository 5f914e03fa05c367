"""
리스팅 API 모듈

FastAPI 라우터로 검증/게시 요건/리스팅 조회를 제공합니다.
"""

from .router import create_listing_router
from .models import (
    TierValidationRequest,
    TierValidationResponse,
    WorkflowValidationResponse,
    RequirementsRequest,
    RequirementsResponse,
    ErrorCodes,
)

__all__ = [
    "create_listing_router",
    "TierValidationRequest",
    "TierValidationResponse",
    "WorkflowValidationResponse",
    "RequirementsRequest",
    "RequirementsResponse",
    "ErrorCodes",
]
