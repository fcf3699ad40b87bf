"""
클라이언트 로컬 화면 상태와 동기화(reconcile)

렌더링과 무관한 순수 함수로만 구성됩니다.

상세 보기 상태 전이:
    DetailClosed → DetailOpen(선택 없음) → DetailOpen(사이즈 선택) → DetailClosed

동기화 결과 선택한 사이즈가 더 이상 구매 불가능하면
DetailOpen(사이즈 선택) → DetailOpen(선택 없음)으로 강제 전이됩니다.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Sequence, Tuple, Union

from shoestore.client.cache import Product

SizeKey = Tuple[int, str]


@dataclass(frozen=True)
class ListingView:
    """목록 화면의 검색어와 브랜드 필터"""

    query: str = ""
    brand: str = ""


@dataclass(frozen=True)
class DetailClosed:
    """상세 보기가 닫힌 상태"""


@dataclass(frozen=True)
class DetailOpen:
    """상세 보기가 열린 상태 (selected_size가 None이면 사이즈 미선택)"""

    product_id: int
    selected_size: Optional[str] = None


DetailView = Union[DetailClosed, DetailOpen]


@dataclass(frozen=True)
class AdminEditForm:
    """
    관리자 재고 편집 폼

    values는 (product_id, size)별 입력값, changed는 관리자가 직접 수정한
    키 집합입니다.
    """

    values: Dict[SizeKey, Any] = field(default_factory=dict)
    changed: FrozenSet[SizeKey] = frozenset()

    @classmethod
    def from_products(cls, products: Sequence[Product]) -> "AdminEditForm":
        return cls(values=stock_values(products))

    def edit(self, product_id: int, size: str, value: Any) -> "AdminEditForm":
        """입력값을 바꾸고 수정된 키로 표시합니다."""
        key = (product_id, size)
        values = dict(self.values)
        values[key] = value
        return AdminEditForm(values=values, changed=self.changed | {key})

    def pending_updates(self):
        """저장 요청(PUT /api/admin/stock)의 updates 목록"""
        return [
            {"productId": product_id, "size": size, "stock": self.values[(product_id, size)]}
            for product_id, size in sorted(self.changed)
        ]


@dataclass(frozen=True)
class LocalState:
    listing: ListingView = ListingView()
    detail: DetailView = DetailClosed()
    admin_form: Optional[AdminEditForm] = None


class NoticeKind(str, Enum):
    SIZE_UNAVAILABLE = "size_unavailable"
    PRODUCT_UNAVAILABLE = "product_unavailable"


@dataclass(frozen=True)
class Notice:
    """사용자에게 보여줄 동기화 알림"""

    kind: NoticeKind
    product_id: int
    size: Optional[str] = None

    @property
    def message(self) -> str:
        if self.kind == NoticeKind.SIZE_UNAVAILABLE:
            return f"Size {self.size} is no longer available"
        return "This product is no longer available"


@dataclass(frozen=True)
class ReconcileResult:
    state: LocalState
    visible_products: Tuple[Product, ...]
    notices: Tuple[Notice, ...] = ()


def find_product(products: Sequence[Product], product_id: int) -> Optional[Product]:
    for product in products:
        if product.get("id") == product_id:
            return product
    return None


def is_purchasable(product: Product, size: Optional[str]) -> bool:
    """해당 사이즈가 존재하고 재고가 1 이상인지 확인합니다."""
    if size is None:
        return False
    for entry in product.get("sizes", []):
        if entry.get("size") == size:
            return (entry.get("stock") or 0) > 0
    return False


def stock_values(products: Sequence[Product]) -> Dict[SizeKey, int]:
    return {
        (product["id"], entry["size"]): entry["stock"]
        for product in products
        for entry in product.get("sizes", [])
    }


def filter_products(
    products: Sequence[Product], query: str = "", brand: str = ""
) -> Tuple[Product, ...]:
    """
    검색어(title/brand 부분 일치, 대소문자 무시)와 브랜드(정확히 일치)로
    목록을 거릅니다. 순서는 유지됩니다.
    """
    needle = (query or "").strip().lower()
    brand = (brand or "").strip()

    result = []
    for product in products:
        if brand and product.get("brand") != brand:
            continue
        if needle:
            haystack = f"{product.get('title', '')} {product.get('brand', '')}".lower()
            if needle not in haystack:
                continue
        result.append(product)
    return tuple(result)


def open_detail(state: LocalState, product_id: int) -> LocalState:
    return replace(state, detail=DetailOpen(product_id=product_id))


def close_detail(state: LocalState) -> LocalState:
    return replace(state, detail=DetailClosed())


def select_size(
    state: LocalState, products: Sequence[Product], size: str
) -> LocalState:
    """
    열린 상세 보기에서 사이즈를 선택합니다.

    상세 보기가 닫혀 있거나 구매 불가능한 사이즈면 상태를 바꾸지 않습니다.
    """
    if not isinstance(state.detail, DetailOpen):
        return state

    product = find_product(products, state.detail.product_id)
    if product is None or not is_purchasable(product, size):
        return state

    return replace(state, detail=replace(state.detail, selected_size=size))


def _reconcile_detail(
    detail: DetailView, products: Sequence[Product]
) -> Tuple[DetailView, Optional[Notice]]:
    if not isinstance(detail, DetailOpen):
        return detail, None

    product = find_product(products, detail.product_id)
    if product is None:
        return DetailClosed(), Notice(NoticeKind.PRODUCT_UNAVAILABLE, detail.product_id)

    if detail.selected_size is not None and not is_purchasable(
        product, detail.selected_size
    ):
        return (
            DetailOpen(product_id=detail.product_id),
            Notice(NoticeKind.SIZE_UNAVAILABLE, detail.product_id, detail.selected_size),
        )

    return detail, None


def _reconcile_admin_form(
    form: Optional[AdminEditForm], products: Sequence[Product]
) -> Optional[AdminEditForm]:
    if form is None:
        return None

    values: Dict[SizeKey, Any] = stock_values(products)

    # 사라진 (상품, 사이즈)의 수정값은 버리고 나머지는 다시 적용
    changed = frozenset(key for key in form.changed if key in values)
    for key in changed:
        values[key] = form.values[key]

    return AdminEditForm(values=values, changed=changed)


def reconcile(old_state: LocalState, products: Sequence[Product]) -> ReconcileResult:
    """
    새 Canonical Product List에 맞춰 로컬 상태를 다시 계산합니다.

    - 목록: 검색어/브랜드 필터를 유지한 채 다시 필터링
    - 상세 보기: 상품이 사라지면 닫고, 선택한 사이즈가 구매 불가능해지면 선택 해제
    - 관리자 폼: 서버 값으로 다시 만든 뒤 로컬에서 수정한 입력값을 재적용

    Args:
        old_state: 동기화 전 로컬 상태
        products: 새 Canonical Product List

    Returns:
        ReconcileResult(state, visible_products, notices)
    """
    detail, notice = _reconcile_detail(old_state.detail, products)

    state = LocalState(
        listing=old_state.listing,
        detail=detail,
        admin_form=_reconcile_admin_form(old_state.admin_form, products),
    )

    return ReconcileResult(
        state=state,
        visible_products=filter_products(
            products, old_state.listing.query, old_state.listing.brand
        ),
        notices=(notice,) if notice else (),
    )
