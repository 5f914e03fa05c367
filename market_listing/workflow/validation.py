"""
워크플로우 설정 검증기

워크플로우 자동화 설정(플랫폼, 트리거, 연결 키, 환경변수, 재시도 정책)을
검증합니다. 오류 필드 경로는 점/대괄호 규칙을 따르며 화면의 라벨 매핑이
그대로 사용합니다.

사용 예시:
    from market_listing.workflow import validate_configuration, get_field_display_name

    result = validate_configuration(config_data)
    for error in result.errors:
        print(f"{get_field_display_name(error.field)}: {error.message}")
"""

import re
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from ..core.models import ValidationResult

FIELD_DISPLAY_NAMES = {
    "platform": "Platform",
    "trigger_type": "Trigger Type",
    "webhook_url": "Webhook URL",
    "webhook_method": "Webhook Method",
    "connection_keys[].name": "Connection Key Name",
    "connection_keys[].description": "Connection Key Description",
    "connection_keys[].type": "Connection Key Type",
    "connection_keys[].steps[].title": "Step Title",
    "connection_keys[].steps[].description": "Step Description",
    "environment_variables[].name": "Environment Variable Name",
    "environment_variables[].description": "Environment Variable Description",
    "retry_config.max_retries": "Max Retries",
    "retry_config.retry_delay": "Retry Delay",
    "retry_config.debounce_value": "Debounce Value",
    "retry_config.debounce_unit": "Debounce Unit",
    "execution_timeout": "Execution Timeout",
}

_INDEX_PATTERN = re.compile(r"\[\d+\]")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or value.strip() == ""


def _is_valid_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


class WorkflowConfigValidator:
    """
    워크플로우 설정 검증기

    Example:
        validator = WorkflowConfigValidator()
        result = validator.validate(config_data)
        if not result.is_valid:
            for error in result.errors:
                print(f"Error at {error.field}: {error.message}")
    """

    VALID_DEBOUNCE_UNITS = ["seconds", "minutes", "hours", "days"]

    def __init__(
        self,
        min_key_description_length: int = 50,
        max_key_description_length: int = 250,
    ):
        self.min_key_description_length = min_key_description_length
        self.max_key_description_length = max_key_description_length

    def validate(self, data: Dict[str, Any], result: Optional[ValidationResult] = None) -> ValidationResult:
        """설정 딕셔너리 검증"""
        if result is None:
            result = ValidationResult()

        if not isinstance(data, dict):
            result.add_error("root", "Configuration must be a dictionary")
            return result

        self._validate_required(data, result)
        self._validate_trigger(data.get("trigger_config") or {}, result)
        self._validate_connection_keys(data.get("connection_keys"), result)
        self._validate_environment_variables(data.get("environment_variables"), result)
        self._validate_retry(data.get("retry_config"), result)
        self._validate_execution_timeout(data.get("execution_timeout"), result)
        return result

    def _validate_required(self, data: Dict, result: ValidationResult):
        """필수 필드 검증"""
        if not data.get("platform"):
            result.add_error("platform", "Platform is required")
        if not data.get("trigger_type"):
            result.add_error("trigger_type", "Trigger type is required")

    def _validate_trigger(self, trigger: Dict, result: ValidationResult):
        """웹훅 트리거 검증 (항상 필수)"""
        webhook_url = trigger.get("webhook_url")
        if not webhook_url:
            result.add_error("webhook_url", "Webhook URL is required")
        elif not isinstance(webhook_url, str) or not _is_valid_url(webhook_url):
            result.add_error("webhook_url", "Webhook URL must be a valid URL")

        if not trigger.get("webhook_method"):
            result.add_error("webhook_method", "Webhook method is required")

    def _validate_connection_keys(self, keys: Any, result: ValidationResult):
        """연결 키 검증"""
        if not isinstance(keys, list):
            return

        for i, key in enumerate(keys):
            path = f"connection_keys[{i}]"
            if not isinstance(key, dict):
                result.add_error(path, "Connection key must be a dictionary")
                continue

            if _is_blank(key.get("name")):
                result.add_error(f"{path}.name", "Connection key name is required")

            description = key.get("description")
            if _is_blank(description):
                result.add_error(f"{path}.description", "Connection key description is required")
            elif len(description) < self.min_key_description_length:
                result.add_error(
                    f"{path}.description",
                    f"Connection key description must be at least {self.min_key_description_length} characters",
                )
            elif len(description) > self.max_key_description_length:
                result.add_error(
                    f"{path}.description",
                    f"Connection key description must be no more than {self.max_key_description_length} characters",
                )

            if not key.get("type"):
                result.add_error(f"{path}.type", "Connection key type is required")

            steps = key.get("steps")
            if isinstance(steps, list):
                for j, step in enumerate(steps):
                    step = step if isinstance(step, dict) else {}
                    if _is_blank(step.get("title")):
                        result.add_error(f"{path}.steps[{j}].title", "Step title is required")
                    if _is_blank(step.get("description")):
                        result.add_error(f"{path}.steps[{j}].description", "Step description is required")

    def _validate_environment_variables(self, env_vars: Any, result: ValidationResult):
        """환경변수 검증"""
        if not isinstance(env_vars, list):
            return

        for i, env_var in enumerate(env_vars):
            env_var = env_var if isinstance(env_var, dict) else {}
            if _is_blank(env_var.get("name")):
                result.add_error(f"environment_variables[{i}].name", "Environment variable name is required")
            if _is_blank(env_var.get("description")):
                result.add_error(
                    f"environment_variables[{i}].description",
                    "Environment variable description is required",
                )

    def _validate_retry(self, retry: Any, result: ValidationResult):
        """재시도 설정 검증"""
        if not retry:
            return
        if not isinstance(retry, dict):
            result.add_error("retry_config", "Retry configuration must be a dictionary")
            return

        max_retries = retry.get("max_retries")
        if not _is_number(max_retries) or max_retries < 0:
            result.add_error("retry_config.max_retries", "Max retries must be a non-negative number")

        retry_delay = retry.get("retry_delay")
        if not _is_number(retry_delay) or retry_delay < 0:
            result.add_error("retry_config.retry_delay", "Retry delay must be a non-negative number")

        if retry.get("debounce_enabled"):
            debounce_value = retry.get("debounce_value")
            if not _is_number(debounce_value) or debounce_value < 1:
                result.add_error("retry_config.debounce_value", "Debounce value must be at least 1")

            if retry.get("debounce_unit") not in self.VALID_DEBOUNCE_UNITS:
                result.add_error(
                    "retry_config.debounce_unit",
                    f"Debounce unit must be one of: {', '.join(self.VALID_DEBOUNCE_UNITS)}",
                )

    def _validate_execution_timeout(self, timeout: Any, result: ValidationResult):
        """실행 타임아웃 검증"""
        if timeout is None:
            return
        if not _is_number(timeout) or timeout < 1:
            result.add_error("execution_timeout", "Execution timeout must be a positive number")


def validate_configuration(data: Dict[str, Any]) -> ValidationResult:
    """워크플로우 설정 검증 (함수형 진입점)"""
    return WorkflowConfigValidator().validate(data)


def get_field_display_name(field: str) -> str:
    """
    필드 경로의 표시 이름

    인덱스를 제거한 경로로 조회합니다 (connection_keys[3].name -> connection_keys[].name).
    매핑에 없으면 경로를 그대로 반환합니다.
    """
    return FIELD_DISPLAY_NAMES.get(_INDEX_PATTERN.sub("[]", field), field)
