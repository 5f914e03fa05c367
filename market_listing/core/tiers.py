"""
사용량 요금 티어 검증기

티어 목록의 필드 값, 범위 겹침(overlap), 범위 공백(gap)을 검사합니다.

사용 예시:
    from market_listing.core.tiers import validate_tiers

    result = validate_tiers(doc.usage_tiers)
    if not result.is_valid:
        for error in result.errors:
            print(error)
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence, Dict, Any

from .models import UsageTier, Bounded

GAP_POLICIES = ("error", "warning")

EMPTY_TIERS_MESSAGE = "At least one usage tier is required"


@dataclass
class TierValidationResult:
    """티어 검증 결과"""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def summary(self, separator: str = "; ") -> str:
        """화면 표시용 단일 문자열"""
        return separator.join(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


class TierValidator:
    """
    사용량 요금 티어 검증기

    오류 메시지의 티어 번호는 정렬 순서가 아니라 호출자가 넘긴 목록의
    1부터 시작하는 위치입니다. 입력 목록은 변경하지 않습니다.

    Example:
        validator = TierValidator()
        result = validator.validate([
            new_tier(0, 99, 1.0),
            new_tier(100, None, 2.0),
        ])
        assert result.is_valid

        # 티어 사이 공백을 경고로만 처리
        lenient = TierValidator(gap_policy="warning")
    """

    def __init__(self, gap_policy: str = "error"):
        if gap_policy not in GAP_POLICIES:
            raise ValueError(f"Invalid gap policy: {gap_policy}. Valid values: {list(GAP_POLICIES)}")
        self.gap_policy = gap_policy

    def validate(self, tiers: Sequence[UsageTier]) -> TierValidationResult:
        """티어 목록 검증"""
        if not tiers:
            return TierValidationResult(is_valid=False, errors=[EMPTY_TIERS_MESSAGE])

        errors: List[str] = []
        warnings: List[str] = []

        for position, tier in enumerate(tiers, start=1):
            errors.extend(self._check_tier(position, tier))

        # (원래 위치, 티어)를 min_usage 오름차순으로 안정 정렬
        ordered = sorted(enumerate(tiers, start=1), key=lambda pair: pair[1].min_usage)

        for (a, current), (b, upcoming) in zip(ordered, ordered[1:]):
            current_max = current.max_usage.as_number()
            next_min = upcoming.min_usage

            if current_max >= next_min:
                errors.append(
                    f"Tier ranges cannot overlap. Tier {a} ({current.range_label}) and "
                    f"Tier {b} ({upcoming.range_label}) have conflicting ranges"
                )
            elif current_max < next_min - 1:
                gap_start = int(current_max) + 1
                gap_end = next_min - 1
                message = (
                    f"There's a gap between Tier {a} and Tier {b} "
                    f"(usage {gap_start}-{gap_end} is not covered). All usage ranges should be covered."
                )
                if self.gap_policy == "error":
                    errors.append(message)
                else:
                    warnings.append(message)

        return TierValidationResult(is_valid=not errors, errors=errors, warnings=warnings)

    def _check_tier(self, position: int, tier: UsageTier) -> List[str]:
        """개별 티어 필드 검증"""
        problems = []
        if tier.min_usage < 0:
            problems.append(f"Tier {position}: Minimum usage cannot be negative")
        if not math.isfinite(tier.price_per_unit) or tier.price_per_unit <= 0:
            problems.append(f"Tier {position}: Price per unit must be greater than 0")
        if isinstance(tier.max_usage, Bounded) and tier.max_usage.value <= tier.min_usage:
            problems.append(f"Tier {position}: Maximum usage must be greater than minimum usage")
        return problems


def validate_tiers(tiers: Sequence[UsageTier], gap_policy: str = "error") -> TierValidationResult:
    """티어 목록 검증 (함수형 진입점)"""
    return TierValidator(gap_policy=gap_policy).validate(tiers)
