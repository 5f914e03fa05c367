"""
market_listing 설정

캐시, 검증 정책, 저장소 게이트웨이 설정 관리
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class CacheConfig:
    """읽기 캐시 설정"""
    # 기본 TTL (초) - 5분
    default_ttl: float = 300.0
    # 리스팅 조회 TTL (초)
    listing_ttl: float = 60.0

    @classmethod
    def from_env(cls) -> "CacheConfig":
        """환경변수에서 설정 로드"""
        return cls(
            default_ttl=float(os.getenv("ML_CACHE_DEFAULT_TTL", "300")),
            listing_ttl=float(os.getenv("ML_CACHE_LISTING_TTL", "60")),
        )


@dataclass
class ValidationConfig:
    """검증 정책 설정"""
    min_description_length: int = 50
    # error: 티어 사이 공백을 오류로 처리, warning: 경고로만 표시
    tier_gap_policy: str = "error"

    def __post_init__(self):
        if self.tier_gap_policy not in ("error", "warning"):
            raise ValueError(
                f"Invalid tier gap policy: {self.tier_gap_policy}. Valid values: ['error', 'warning']"
            )

    @classmethod
    def from_env(cls) -> "ValidationConfig":
        """환경변수에서 설정 로드"""
        return cls(
            min_description_length=int(os.getenv("ML_MIN_DESCRIPTION_LENGTH", "50")),
            tier_gap_policy=os.getenv("ML_TIER_GAP_POLICY", "error").lower(),
        )


@dataclass
class GatewayConfig:
    """저장소 게이트웨이 설정"""
    base_url: str = "http://localhost:11010"
    api_key: Optional[str] = None
    api_key_header: str = "X-Market-API-Key"
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """환경변수에서 설정 로드"""
        return cls(
            base_url=os.getenv("ML_GATEWAY_URL", "http://localhost:11010"),
            api_key=os.getenv("MARKET_API_KEY"),
            api_key_header=os.getenv("ML_GATEWAY_API_KEY_HEADER", "X-Market-API-Key"),
            timeout=float(os.getenv("ML_GATEWAY_TIMEOUT", "30")),
        )


@dataclass
class ListingConfig:
    """market_listing 전체 설정"""

    service_name: str = "market_listing"
    environment: str = "development"
    debug: bool = True

    # 하위 설정
    cache: CacheConfig = field(default_factory=CacheConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    gateway: GatewayConfig = field(default_factory=GatewayConfig)

    @classmethod
    def from_env(cls) -> "ListingConfig":
        """환경변수에서 전체 설정 로드"""
        return cls(
            service_name=os.getenv("ML_SERVICE_NAME", "market_listing"),
            environment=os.getenv("ML_ENVIRONMENT", "development"),
            debug=os.getenv("ML_DEBUG", "true").lower() == "true",
            cache=CacheConfig.from_env(),
            validation=ValidationConfig.from_env(),
            gateway=GatewayConfig.from_env(),
        )


# 전역 설정 인스턴스
_config: Optional[ListingConfig] = None


def get_config() -> ListingConfig:
    """전역 설정 반환"""
    global _config
    if _config is None:
        _config = ListingConfig.from_env()
    return _config


def set_config(config: Optional[ListingConfig]) -> None:
    """전역 설정 지정 (None이면 다음 호출 시 환경변수에서 다시 로드)"""
    global _config
    _config = config
