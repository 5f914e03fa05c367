#!/usr/bin/env python3
"""
market_listing CLI

사용법:
    python -m market_listing.cli check listing.yaml
    python -m market_listing.cli check listing.json --mode usage --json
    python -m market_listing.cli workflow workflow.yaml
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError as ModelValidationError

from .config import get_config
from .core.drafts import hydrate
from .core.models import PricingMode, UsagePricingType
from .core.requirements import RequirementEngine
from .workflow.validation import WorkflowConfigValidator, get_field_display_name


class InputFileError(Exception):
    """입력 파일 로드 실패"""


def load_data_file(file_path: str) -> Dict[str, Any]:
    """YAML/JSON 파일 로드"""
    path = Path(file_path)
    if not path.exists():
        raise InputFileError(f"File not found: {file_path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise InputFileError(f"Parse error: {e}")

    if not isinstance(data, dict):
        raise InputFileError("Document must be a mapping")
    return data


def cmd_check(args) -> int:
    """리스팅 게시 요건 점검"""
    try:
        document = hydrate(load_data_file(args.file))
    except InputFileError as e:
        print(f"[FAIL] {e}")
        return 1
    except ModelValidationError as e:
        print(f"[FAIL] 잘못된 리스팅 문서: {e}")
        return 1

    mode = PricingMode(args.mode) if args.mode else None
    engine = RequirementEngine.from_config(get_config().validation)
    requirements = engine.requirements(document, mode)
    publishable = all(r.completed for r in requirements)

    tier_result = None
    effective_mode = mode or document.pricing_mode
    if effective_mode == PricingMode.USAGE and document.usage_pricing_type == UsagePricingType.TIERED:
        tier_result = engine.tier_validator.validate(document.usage_tiers)

    if args.json:
        output = {
            "id": document.id,
            "can_publish": publishable,
            "requirements": [r.to_dict() for r in requirements],
        }
        if tier_result is not None:
            output["tiers"] = tier_result.to_dict()
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        print(f"\n리스팅: {document.id} ({document.name or '이름 없음'})")
        print("게시 요건:")
        for requirement in requirements:
            mark = "OK" if requirement.completed else "--"
            print(f"  [{mark}] {requirement.label}")

        if tier_result is not None:
            _print_messages("티어 오류", tier_result.errors)
            _print_messages("티어 경고", tier_result.warnings)

        print(f"\n게시 가능: {'YES' if publishable else 'NO'}")

    return 0 if publishable else 1


def cmd_workflow(args) -> int:
    """워크플로우 설정 검증"""
    try:
        data = load_data_file(args.file)
    except InputFileError as e:
        print(f"[FAIL] {e}")
        return 1

    result = WorkflowConfigValidator().validate(data)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(f"유효성: {'OK' if result.is_valid else 'FAIL'}")
        if result.errors:
            print("\n오류:")
            for error in result.errors:
                print(f"  - {get_field_display_name(error.field)} ({error.field}): {error.message}")

    return 0 if result.is_valid else 1


def _print_messages(title: str, messages: List[str]) -> None:
    if not messages:
        return
    print(f"\n{title}:")
    for message in messages:
        print(f"  - {message}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="market_listing - 리스팅 설정 무결성 점검 도구",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
예제:
  # 게시 요건 점검
  python -m market_listing.cli check listing.yaml

  # 사용량 기반 요금으로 점검, JSON 출력
  python -m market_listing.cli check listing.yaml --mode usage --json

  # 워크플로우 설정 검증
  python -m market_listing.cli workflow workflow.yaml
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="명령어")

    # check 명령어
    check_parser = subparsers.add_parser("check", help="리스팅 게시 요건 점검")
    check_parser.add_argument("file", help="리스팅 문서 (YAML/JSON)")
    check_parser.add_argument("--mode", choices=[m.value for m in PricingMode], help="요금 방식 (기본: 문서 값)")
    check_parser.add_argument("--json", action="store_true", help="JSON 형식으로 출력")

    # workflow 명령어
    workflow_parser = subparsers.add_parser("workflow", help="워크플로우 설정 검증")
    workflow_parser.add_argument("file", help="워크플로우 설정 (YAML/JSON)")
    workflow_parser.add_argument("--json", action="store_true", help="JSON 형식으로 출력")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "check":
        return cmd_check(args)
    elif args.command == "workflow":
        return cmd_workflow(args)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
