"""
카탈로그 동기화 클라이언트

초기 로드(GET /api/products)와 WebSocket 브로드캐스트 메시지를 받아
캐시를 교체하고 로컬 상태를 reconcile합니다.

읽기 요청만 재시도합니다. 관리자 변경 요청은 자동으로 재시도하지 않습니다.
"""

import time
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar

import httpx

from shoestore.client.cache import CatalogCache, Product
from shoestore.client.state import (
    AdminEditForm,
    LocalState,
    ReconcileResult,
    close_detail,
    open_detail,
    reconcile,
    select_size,
)
from shoestore.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY = 1.0


class CatalogUnavailableError(Exception):
    """재시도 후에도 카탈로그를 불러오지 못한 경우"""

    def __init__(self, attempts: int, cause: Exception):
        self.attempts = attempts
        self.message = f"Catalog could not be loaded after {attempts} attempts: {cause}"
        super().__init__(self.message)


def retry_with_backoff(
    operation: Callable[[], T],
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
    retry_on: Tuple[Type[Exception], ...] = (httpx.HTTPError,),
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    실패 시 대기 시간을 두 배씩 늘리며 operation을 다시 실행합니다.

    최초 시도 + max_retries번 재시도 (대기: base_delay, 2*base_delay, ...)

    Raises:
        CatalogUnavailableError: 모든 시도가 실패한 경우
    """
    attempts = max_retries + 1
    for attempt in range(attempts):
        try:
            return operation()
        except retry_on as e:
            logger.warning(
                "retry_attempt_failed",
                attempt=attempt + 1,
                attempts=attempts,
                error=str(e),
            )
            if attempt == max_retries:
                raise CatalogUnavailableError(attempts, e) from e
            sleep(base_delay * (2 ** attempt))


class CatalogSyncClient:
    """
    카탈로그 캐시와 로컬 화면 상태를 소유하는 클라이언트

    Example:
        client = CatalogSyncClient("http://localhost:8000")
        client.load()
        client.open_detail(1)
        client.select_size("38")
        result = client.handle_message(message)  # WebSocket 수신 시
        for notice in result.notices:
            print(notice.message)
    """

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._sleep = sleep

        self.cache = CatalogCache()
        self.state = LocalState()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch_products(self) -> List[Product]:
        response = self._client.get("/api/products")
        response.raise_for_status()
        return response.json()

    def load(self) -> ReconcileResult:
        """
        전체 목록을 가져와 캐시를 교체합니다 (연결 직후, 재연결 후 호출).

        Raises:
            CatalogUnavailableError: 재시도 후에도 실패한 경우 (화면에 재로드 버튼 표시)
        """
        products = retry_with_backoff(
            self.fetch_products,
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            sleep=self._sleep,
        )
        # 전체 로드 이후에는 서버 sequence가 1부터 다시 시작해도 반영
        self.cache.replace(products, sequence=0)
        logger.info("catalog_loaded", products=len(products))
        return self._apply()

    def handle_message(self, message: Dict[str, Any]) -> Optional[ReconcileResult]:
        """
        브로드캐스트 메시지를 반영합니다.

        Returns:
            ReconcileResult, 카탈로그 메시지가 아니거나 오래된 sequence면 None
        """
        if not isinstance(message, dict) or "products" not in message:
            return None

        sequence = message.get("sequence")
        if sequence is not None and self.cache.is_stale(sequence):
            logger.debug(
                "stale_message_ignored",
                sequence=sequence,
                last_sequence=self.cache.last_sequence,
            )
            return None

        self.cache.replace(message["products"], sequence)
        return self._apply()

    def _apply(self) -> ReconcileResult:
        result = reconcile(self.state, self.cache.snapshot())
        self.state = result.state

        for notice in result.notices:
            logger.info(
                "catalog_notice",
                kind=notice.kind.value,
                product_id=notice.product_id,
                size=notice.size,
            )
        return result

    # ------------------------------------------------------------------
    # 화면 상태 조작
    # ------------------------------------------------------------------

    def open_detail(self, product_id: int) -> LocalState:
        self.state = open_detail(self.state, product_id)
        return self.state

    def close_detail(self) -> LocalState:
        self.state = close_detail(self.state)
        return self.state

    def select_size(self, size: str) -> LocalState:
        self.state = select_size(self.state, self.cache.snapshot(), size)
        return self.state

    def start_admin_edit(self) -> AdminEditForm:
        form = AdminEditForm.from_products(self.cache.snapshot())
        self.state = LocalState(
            listing=self.state.listing, detail=self.state.detail, admin_form=form
        )
        return form

    def edit_stock(self, product_id: int, size: str, value: Any) -> AdminEditForm:
        form = self.state.admin_form or AdminEditForm.from_products(
            self.cache.snapshot()
        )
        form = form.edit(product_id, size, value)
        self.state = LocalState(
            listing=self.state.listing, detail=self.state.detail, admin_form=form
        )
        return form
