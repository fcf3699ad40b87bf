"""
클라이언트 측 카탈로그 캐시

서버에서 받은 Canonical Product List를 보관합니다. 변경은 replace()로만
이루어지며, 읽는 쪽은 snapshot()으로 받은 튜플을 사용합니다.
"""

import copy
from typing import Any, Dict, Iterable, Optional, Tuple

Product = Dict[str, Any]


class CatalogCache:
    """단일 writer 카탈로그 캐시"""

    def __init__(self):
        self._products: Tuple[Product, ...] = ()
        self._sequence: int = 0

    @property
    def last_sequence(self) -> int:
        """마지막으로 반영한 브로드캐스트 sequence (전체 로드 직후에는 0)"""
        return self._sequence

    def replace(
        self, products: Iterable[Product], sequence: Optional[int] = None
    ) -> Tuple[Product, ...]:
        """
        캐시 전체를 새 목록으로 교체합니다.

        Args:
            products: 새 Canonical Product List
            sequence: 브로드캐스트 sequence (None이면 기존 값 유지)

        Returns:
            교체된 스냅샷
        """
        # 호출자가 원본을 수정해도 캐시가 바뀌지 않도록 복사
        self._products = tuple(copy.deepcopy(list(products)))
        if sequence is not None:
            self._sequence = sequence
        return self._products

    def is_stale(self, sequence: int) -> bool:
        return sequence <= self._sequence

    def snapshot(self) -> Tuple[Product, ...]:
        return self._products

    def __len__(self) -> int:
        return len(self._products)
