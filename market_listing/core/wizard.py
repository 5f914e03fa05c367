"""
리스팅 생성 위저드

고정된 단계 목록을 순서대로 진행합니다. 다음 단계로의 이동은
RequirementEngine 규칙 중 현재 단계가 소유한 규칙만으로 판단합니다.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, List

from .models import ConfigDocument, FieldError, PricingMode
from .requirements import RequirementEngine, StepId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WizardStep:
    """위저드 단계 정의"""
    id: str
    title: str
    description: str
    optional: bool = False


WIZARD_STEPS = (
    WizardStep(StepId.BASIC_INFO, "Basic Information", "Tell us about your workflow"),
    WizardStep(StepId.PRICING, "Pricing & Billing", "Set your pricing strategy"),
    WizardStep(
        StepId.SOURCE_CODE,
        "Source Code (Optional)",
        "Configure source code options",
        optional=True,
    ),
    WizardStep(StepId.DETAILS, "Additional Details", "Add tags, setup time, and demo"),
    WizardStep(StepId.REVIEW, "Review & Publish", "Review your listing and publish"),
)


@dataclass
class WizardStepStatus:
    """단계 표시 상태"""
    id: str
    title: str
    description: str
    optional: bool
    completed: bool


@dataclass
class StepTransition:
    """단계 이동 결과"""
    allowed: bool
    index: int
    errors: List[FieldError] = field(default_factory=list)


class WizardStateError(Exception):
    """현재 상태에서 허용되지 않는 위저드 조작"""
    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        super().__init__(message)


class SubmissionError(Exception):
    """리스팅 저장(제출) 실패"""
    def __init__(self, draft_id: str, cause: Optional[BaseException] = None):
        self.draft_id = draft_id
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to save listing {draft_id}{detail}")


class WizardController:
    """
    리스팅 위저드 컨트롤러

    Example:
        wizard = WizardController(draft, gateway)

        transition = wizard.next()
        if not transition.allowed:
            for error in transition.errors:
                print(f"{error.field}: {error.message}")

        # 마지막 단계에서 제출
        await wizard.submit()
    """

    def __init__(
        self,
        document: ConfigDocument,
        gateway=None,
        engine: Optional[RequirementEngine] = None,
        steps=WIZARD_STEPS,
        pricing_mode: Optional[PricingMode] = None,
    ):
        if not steps:
            raise ValueError("Wizard requires at least one step")
        self.document = document
        self.gateway = gateway
        self.engine = engine or RequirementEngine()
        self.steps_def = tuple(steps)
        self.pricing_mode = pricing_mode
        self.current_index = 0
        self.submitted = False
        self.last_error: Optional[SubmissionError] = None

    # =========================================================================
    # 상태 조회
    # =========================================================================

    @property
    def last_index(self) -> int:
        return len(self.steps_def) - 1

    @property
    def current_step(self) -> WizardStep:
        return self.steps_def[self.current_index]

    @property
    def is_terminal_step(self) -> bool:
        return self.current_index == self.last_index

    def step_errors(self, index: Optional[int] = None) -> List[FieldError]:
        """단계의 미충족 필드 오류 (선택 단계는 항상 없음)"""
        step = self.steps_def[self.current_index if index is None else index]
        if step.optional:
            return []
        return self.engine.step_field_errors(self.document, step.id, self.pricing_mode)

    def is_step_complete(self, index: int) -> bool:
        """단계 완료 여부"""
        if index == self.last_index:
            # 검토 단계는 제출되어야 완료
            return self.submitted
        return not self.step_errors(index)

    @property
    def steps(self) -> List[WizardStepStatus]:
        """단계 목록과 완료 여부"""
        return [
            WizardStepStatus(
                id=step.id,
                title=step.title,
                description=step.description,
                optional=step.optional,
                completed=self.is_step_complete(index),
            )
            for index, step in enumerate(self.steps_def)
        ]

    # =========================================================================
    # 이동
    # =========================================================================

    def _ensure_open(self) -> None:
        if self.submitted:
            raise WizardStateError("Wizard already submitted", self.current_index)

    def next(self) -> StepTransition:
        """다음 단계로 이동 (현재 단계 규칙이 충족되어야 함)"""
        self._ensure_open()
        errors = self.step_errors()
        if errors:
            logger.debug(
                f"Step '{self.current_step.id}' incomplete: {[e.field for e in errors]}"
            )
            return StepTransition(allowed=False, index=self.current_index, errors=errors)

        self.current_index = min(self.current_index + 1, self.last_index)
        return StepTransition(allowed=True, index=self.current_index)

    def previous(self) -> StepTransition:
        """이전 단계로 이동 (항상 허용)"""
        self._ensure_open()
        self.current_index = max(self.current_index - 1, 0)
        return StepTransition(allowed=True, index=self.current_index)

    def go_to(self, index: int) -> StepTransition:
        """
        특정 단계로 이동

        뒤로 가는 이동은 항상 허용되며, 앞으로 가는 이동은 건너뛰는
        모든 단계가 완료된 경우에만 허용됩니다.
        """
        self._ensure_open()
        if not 0 <= index <= self.last_index:
            raise WizardStateError(f"Step index out of range: {index}", self.current_index)

        if index <= self.current_index:
            self.current_index = index
            return StepTransition(allowed=True, index=index)

        for position in range(self.current_index, index):
            errors = self.step_errors(position)
            if errors:
                return StepTransition(allowed=False, index=self.current_index, errors=errors)

        self.current_index = index
        return StepTransition(allowed=True, index=index)

    # =========================================================================
    # 제출
    # =========================================================================

    async def submit(self) -> bool:
        """
        리스팅 저장

        마지막 단계에서만 호출할 수 있습니다. 실패하면 마지막 단계에
        머무르며 SubmissionError를 발생시키고, 문서는 변경하지 않습니다.
        """
        self._ensure_open()
        if not self.is_terminal_step:
            raise WizardStateError(
                f"Submit is only allowed on the final step (current: {self.current_step.id})",
                self.current_index,
            )
        if self.gateway is None:
            raise WizardStateError("No persistence gateway configured", self.current_index)

        draft_id = self.document.id
        try:
            saved = await self.gateway.save(draft_id, self.document)
        except Exception as e:
            logger.error(f"Listing submit failed for {draft_id}: {e}")
            self.last_error = SubmissionError(draft_id, e)
            raise self.last_error from e

        if not saved:
            logger.error(f"Listing submit rejected by gateway: {draft_id}")
            self.last_error = SubmissionError(draft_id)
            raise self.last_error

        self.submitted = True
        self.last_error = None
        logger.info(f"Listing submitted: {draft_id}")
        return True
