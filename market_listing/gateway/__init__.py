"""
저장소 게이트웨이 모듈

ConfigDocument의 load/save를 담당하는 외부 협력자 인터페이스와 구현
"""

from .base import PersistenceGateway, ListingNotFoundError
from .memory import InMemoryGateway
from .remote import HttpGateway
from .repository import ListingRepository

__all__ = [
    "PersistenceGateway",
    "ListingNotFoundError",
    "InMemoryGateway",
    "HttpGateway",
    "ListingRepository",
]
