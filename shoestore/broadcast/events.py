"""
카탈로그 브로드캐스트 이벤트 정의

두 이벤트는 라벨만 다르고 페이로드(Canonical Product List 전체)는 동일합니다.
"""

from enum import Enum
from typing import Any, Dict, List


class CatalogEvent(str, Enum):
    """브로드캐스트 이벤트 라벨"""

    STOCK_UPDATED = "stock_updated"
    PRODUCTS_UPDATED = "products_updated"


def build_message(
    event: CatalogEvent, sequence: int, products: List[Dict[str, Any]]
) -> Dict[str, Any]:
    """
    소켓으로 전송할 메시지 봉투를 생성합니다.

    Args:
        event: 이벤트 라벨
        sequence: 커밋 순서를 나타내는 단조 증가 번호
        products: Canonical Product List (JSON 직렬화 가능한 형태)

    Returns:
        {"event": ..., "sequence": ..., "products": [...]}
    """
    return {
        "event": CatalogEvent(event).value,
        "sequence": sequence,
        "products": products,
    }
