"""
워크플로우 설정 검증 모듈
"""

from .validation import (
    WorkflowConfigValidator,
    validate_configuration,
    get_field_display_name,
    FIELD_DISPLAY_NAMES,
)

__all__ = [
    "WorkflowConfigValidator",
    "validate_configuration",
    "get_field_display_name",
    "FIELD_DISPLAY_NAMES",
]
