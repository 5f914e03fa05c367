"""
리스팅 API 라우터 생성기

검증/게시 요건 계산과 캐시를 거치는 리스팅 조회를 FastAPI 라우터로 제공합니다.
"""

from typing import Optional, Dict, Any

from fastapi import APIRouter, HTTPException, Body

from ..core.models import ConfigDocument
from ..core.requirements import RequirementEngine
from ..core.tiers import TierValidator
from ..gateway.base import ListingNotFoundError
from ..gateway.repository import ListingRepository
from ..workflow.validation import WorkflowConfigValidator
from .models import (
    TierValidationRequest,
    TierValidationResponse,
    WorkflowValidationResponse,
    FieldErrorModel,
    RequirementsRequest,
    RequirementsResponse,
    RequirementModel,
    ErrorResponse,
    ErrorCodes,
)


def create_listing_router(
    repository: ListingRepository,
    engine: Optional[RequirementEngine] = None,
    prefix: str = "/listings",
) -> APIRouter:
    """
    리스팅 API 라우터 생성

    Args:
        repository: 캐시를 거치는 리스팅 저장소
        engine: 게시 요건 엔진 (None이면 설정값으로 생성)
        prefix: API 경로 prefix (기본: /listings)

    Returns:
        APIRouter: FastAPI 라우터

    Example:
        from fastapi import FastAPI
        from market_listing import create_listing_router, ListingRepository, InMemoryGateway

        app = FastAPI()
        repo = ListingRepository(InMemoryGateway())
        app.include_router(create_listing_router(repo))
    """

    router = APIRouter(prefix=prefix, tags=["Listing Integrity"])
    engine = engine or RequirementEngine.from_config()
    workflow_validator = WorkflowConfigValidator()

    def _requirements_response(document: ConfigDocument, pricing_mode=None) -> RequirementsResponse:
        requirements = engine.requirements(document, pricing_mode)
        return RequirementsResponse(
            requirements=[RequirementModel(**r.to_dict()) for r in requirements],
            can_publish=all(r.completed for r in requirements),
        )

    async def _load(listing_id: str) -> ConfigDocument:
        try:
            return await repository.get(listing_id)
        except ListingNotFoundError as e:
            raise HTTPException(
                status_code=404,
                detail={
                    "success": False,
                    "error": ErrorCodes.LISTING_NOT_FOUND,
                    "message": str(e)
                }
            )

    # =========================================================================
    # 검증
    # =========================================================================

    @router.post(
        "/validate/tiers",
        response_model=TierValidationResponse,
        summary="티어 검증",
        description="사용량 요금 티어의 필드 값, 겹침, 공백을 검사합니다."
    )
    async def validate_tiers(request: TierValidationRequest) -> TierValidationResponse:
        """티어 검증"""
        validator = engine.tier_validator
        if request.gap_policy is not None:
            try:
                validator = TierValidator(gap_policy=request.gap_policy)
            except ValueError as e:
                raise HTTPException(
                    status_code=400,
                    detail={
                        "success": False,
                        "error": ErrorCodes.INVALID_REQUEST,
                        "message": str(e)
                    }
                )

        result = validator.validate(request.tiers)
        return TierValidationResponse(**result.to_dict())

    @router.post(
        "/validate/workflow",
        response_model=WorkflowValidationResponse,
        summary="워크플로우 설정 검증",
    )
    async def validate_workflow(config: Dict[str, Any] = Body(...)) -> WorkflowValidationResponse:
        """워크플로우 설정 검증"""
        result = workflow_validator.validate(config)
        return WorkflowValidationResponse(
            is_valid=result.is_valid,
            errors=[FieldErrorModel(**e.to_dict()) for e in result.errors],
            warnings=[FieldErrorModel(**w.to_dict()) for w in result.warnings],
        )

    @router.post(
        "/requirements",
        response_model=RequirementsResponse,
        summary="게시 요건 계산",
        description="문서의 게시 요건 체크리스트와 게시 가능 여부를 반환합니다."
    )
    async def compute_requirements(request: RequirementsRequest) -> RequirementsResponse:
        """게시 요건 계산"""
        return _requirements_response(request.document, request.pricing_mode)

    # =========================================================================
    # 조회
    # =========================================================================

    @router.get(
        "/{listing_id}",
        response_model=ConfigDocument,
        responses={404: {"model": ErrorResponse, "description": "Listing not found"}},
        summary="리스팅 조회",
    )
    async def get_listing(listing_id: str) -> ConfigDocument:
        """리스팅 조회 (읽기 캐시 경유)"""
        return await _load(listing_id)

    @router.get(
        "/{listing_id}/requirements",
        response_model=RequirementsResponse,
        responses={404: {"model": ErrorResponse, "description": "Listing not found"}},
        summary="저장된 리스팅의 게시 요건",
    )
    async def get_listing_requirements(listing_id: str) -> RequirementsResponse:
        """저장된 리스팅의 게시 요건"""
        document = await _load(listing_id)
        return _requirements_response(document)

    return router
