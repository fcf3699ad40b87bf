"""
카탈로그 변경 서비스

상품/사이즈 재고에 대한 모든 쓰기 작업을 담당합니다.

공통 플로우:
1. 쓰기 전에 모든 입력 검증 (실패 시 상태 변경 없음)
2. 하나의 트랜잭션으로 적용 (실패 시 전체 롤백)
3. 커밋 후 전체 카탈로그를 다시 조회하여 브로드캐스트
"""

from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shoestore.broadcast.events import CatalogEvent
from shoestore.core.exceptions import (
    CatalogValidationException,
    LastSizeRemovalException,
    PersistenceException,
    ProductAlreadyExistsException,
    ProductNotFoundException,
    SizeAlreadyExistsException,
    SizeNotFoundException,
)
from shoestore.core.logging import get_logger
from shoestore.db.database import atomic
from shoestore.models import Product, ProductSize
from shoestore.schemas.catalog import ProductFields, SizeEntry, StockUpdateEntry
from shoestore.services.catalog_service import CatalogService

if TYPE_CHECKING:
    from shoestore.broadcast.publisher import CatalogPublisher

logger = get_logger(__name__)

PRICE_QUANTUM = Decimal("0.01")
PRICE_LIMIT = Decimal("100000000")  # Numeric(10, 2)
TITLE_MAX_LENGTH = 255
BRAND_MAX_LENGTH = 100


def _clean_text(value: Optional[str]) -> str:
    return str(value).strip() if value is not None else ""


class MutationService:
    """상품 및 사이즈 재고 변경 서비스."""

    # ------------------------------------------------------------------
    # 검증
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_product_fields(fields: Optional[ProductFields]) -> Dict[str, object]:
        """
        상품 필드를 검증하고 정리된 값을 반환합니다.

        Raises:
            CatalogValidationException: 필수 필드 누락, 길이 초과, 잘못된 가격
        """
        if fields is None:
            raise CatalogValidationException("Product data is required")

        title = _clean_text(fields.title)
        brand = _clean_text(fields.brand)
        image_url = _clean_text(fields.image_url)

        if not title or not brand or not image_url:
            raise CatalogValidationException(
                "Missing required product fields: title, brand and image_url are required"
            )
        if len(title) > TITLE_MAX_LENGTH:
            raise CatalogValidationException(
                f"Title must be at most {TITLE_MAX_LENGTH} characters"
            )
        if len(brand) > BRAND_MAX_LENGTH:
            raise CatalogValidationException(
                f"Brand must be at most {BRAND_MAX_LENGTH} characters"
            )

        if fields.price is None:
            raise CatalogValidationException("Price is required")
        try:
            price = Decimal(fields.price).quantize(PRICE_QUANTUM)
        except InvalidOperation:
            raise CatalogValidationException(f"Invalid price: {fields.price}")
        if not price.is_finite() or price <= 0:
            raise CatalogValidationException("Price must be greater than 0")
        if price >= PRICE_LIMIT:
            raise CatalogValidationException(f"Price must be less than {PRICE_LIMIT}")

        return {"title": title, "brand": brand, "price": price, "image_url": image_url}

    @staticmethod
    def _validate_size_label(size: Optional[str]) -> str:
        label = _clean_text(size)
        if not label:
            raise CatalogValidationException("Size is required")
        if len(label) > ProductSize.SIZE_MAX_LENGTH:
            raise CatalogValidationException(
                f"Size must be at most {ProductSize.SIZE_MAX_LENGTH} characters"
            )
        return label

    @staticmethod
    def _validate_stock(stock: Optional[int]) -> int:
        value = 0 if stock is None else stock
        if value < 0:
            raise CatalogValidationException("Stock cannot be negative")
        if value > ProductSize.STOCK_MAX:
            raise CatalogValidationException(
                f"Stock must be at most {ProductSize.STOCK_MAX}"
            )
        return value

    @staticmethod
    def _validate_new_sizes(
        sizes: Optional[Sequence[SizeEntry]],
    ) -> List[Tuple[str, int]]:
        """
        신규 상품의 사이즈 목록을 검증합니다.

        빈 라벨은 제외하며, 최소 1개의 유효한 사이즈가 남아야 합니다.

        Raises:
            CatalogValidationException: 사이즈 없음, 음수 재고, 중복 라벨
        """
        if not sizes:
            raise CatalogValidationException("At least one size is required")

        cleaned: List[Tuple[str, int]] = []
        seen = set()
        for entry in sizes:
            if not _clean_text(entry.size):
                continue
            label = MutationService._validate_size_label(entry.size)
            stock = MutationService._validate_stock(entry.stock)
            if label in seen:
                raise CatalogValidationException(f"Duplicate size '{label}'")
            seen.add(label)
            cleaned.append((label, stock))

        if not cleaned:
            raise CatalogValidationException("At least one valid size is required")
        return cleaned

    @staticmethod
    def _validate_stock_updates(
        updates: Optional[Sequence[StockUpdateEntry]],
    ) -> List[Tuple[int, str, int]]:
        """
        재고 일괄 수정 항목을 모두 검증합니다 (하나라도 잘못되면 전체 거부).

        Raises:
            CatalogValidationException: 목록 없음, productId/size 누락, 범위를 벗어난 재고
        """
        if updates is None:
            raise CatalogValidationException("Updates must be a list")
        if not updates:
            raise CatalogValidationException("At least one update is required")

        cleaned: List[Tuple[int, str, int]] = []
        for index, entry in enumerate(updates):
            product_id = entry.product_id
            size = _clean_text(entry.size)
            stock = 0 if entry.stock is None else entry.stock

            if (
                not product_id
                or product_id <= 0
                or not size
                or len(size) > ProductSize.SIZE_MAX_LENGTH
                or stock < 0
                or stock > ProductSize.STOCK_MAX
            ):
                raise CatalogValidationException(
                    f"Invalid update at index {index}: "
                    f"productId={entry.product_id}, size={entry.size}, stock={entry.stock}"
                )
            cleaned.append((product_id, size, stock))
        return cleaned

    @staticmethod
    def _title_taken(
        db: Session, title: str, exclude_id: Optional[int] = None
    ) -> bool:
        query = db.query(Product.id).filter(Product.title == title)
        if exclude_id is not None:
            query = query.filter(Product.id != exclude_id)
        return query.first() is not None

    @staticmethod
    def _lock_product(db: Session, product_id: int) -> Optional[Product]:
        """같은 상품에 대한 동시 변경을 직렬화하기 위해 상품 행을 잠급니다."""
        return (
            db.query(Product)
            .filter(Product.id == product_id)
            .with_for_update()
            .first()
        )

    @staticmethod
    def _raise_for_integrity_error(error: IntegrityError, title: str) -> None:
        if "title" in str(error.orig).lower():
            raise ProductAlreadyExistsException(title) from error
        raise PersistenceException(str(error.orig)) from error

    # ------------------------------------------------------------------
    # 쓰기 작업
    # ------------------------------------------------------------------

    @staticmethod
    def create_product(
        fields: Optional[ProductFields],
        sizes: Optional[Sequence[SizeEntry]],
        db: Session,
        publisher: "CatalogPublisher",
    ) -> Product:
        """
        상품과 초기 사이즈 목록을 하나의 트랜잭션으로 생성합니다.

        Args:
            fields: 상품 필드 (title, brand, price, image_url)
            sizes: 초기 사이즈 목록 (최소 1개)
            db: DB 세션
            publisher: 커밋 후 브로드캐스트할 발행기

        Returns:
            생성된 Product 객체

        Raises:
            CatalogValidationException: 입력 검증 실패
            ProductAlreadyExistsException: 동일한 title의 상품이 이미 존재
            PersistenceException: 트랜잭션 실패
        """
        values = MutationService._validate_product_fields(fields)
        size_rows = MutationService._validate_new_sizes(sizes)

        if MutationService._title_taken(db, values["title"]):
            raise ProductAlreadyExistsException(values["title"])

        try:
            with atomic(db):
                product = Product(**values)
                product.sizes = [
                    ProductSize(size=label, stock=stock) for label, stock in size_rows
                ]
                db.add(product)
                db.flush()
                product_id = product.id
        except IntegrityError as e:
            # 동시 생성 경쟁: 사전 확인 이후 다른 요청이 같은 title을 커밋한 경우
            MutationService._raise_for_integrity_error(e, values["title"])

        logger.info(
            "product_created",
            product_id=product_id,
            title=values["title"],
            sizes=len(size_rows),
        )
        publisher.broadcast_catalog(CatalogEvent.PRODUCTS_UPDATED, db)
        return product

    @staticmethod
    def update_stock(
        updates: Optional[Sequence[StockUpdateEntry]],
        db: Session,
        publisher: "CatalogPublisher",
    ) -> int:
        """
        여러 (상품, 사이즈)의 재고를 하나의 트랜잭션으로 설정합니다.

        사이즈 행이 없으면 생성하고, 있으면 재고를 덮어씁니다 (upsert).
        같은 배치를 다시 적용해도 결과는 동일합니다.

        Args:
            updates: 재고 수정 항목 목록
            db: DB 세션
            publisher: 커밋 후 브로드캐스트할 발행기

        Returns:
            적용한 항목 수

        Raises:
            CatalogValidationException: 항목 중 하나라도 잘못된 경우 (아무것도 적용 안 됨)
            ProductNotFoundException: 존재하지 않는 상품 (전체 롤백)
            PersistenceException: 트랜잭션 실패 (전체 롤백)
        """
        cleaned = MutationService._validate_stock_updates(updates)

        try:
            with atomic(db):
                for product_id, size, stock in cleaned:
                    product = MutationService._lock_product(db, product_id)
                    if product is None:
                        raise ProductNotFoundException(product_id)

                    row = (
                        db.query(ProductSize)
                        .filter(
                            ProductSize.product_id == product_id,
                            ProductSize.size == size,
                        )
                        .first()
                    )
                    if row is None:
                        db.add(ProductSize(product_id=product_id, size=size, stock=stock))
                    else:
                        row.stock = stock
                    db.flush()
        except IntegrityError as e:
            raise PersistenceException(str(e.orig)) from e

        logger.info("stock_updated", entries=len(cleaned))
        publisher.broadcast_catalog(CatalogEvent.STOCK_UPDATED, db)
        return len(cleaned)

    @staticmethod
    def update_product(
        product_id: int,
        fields: Optional[ProductFields],
        db: Session,
        publisher: "CatalogPublisher",
    ) -> Product:
        """
        상품 필드(title, brand, price, image_url)를 수정합니다.

        Raises:
            CatalogValidationException: 입력 검증 실패
            ProductNotFoundException: 상품이 없는 경우
            ProductAlreadyExistsException: 다른 상품이 이미 같은 title을 사용 중
            PersistenceException: 트랜잭션 실패
        """
        values = MutationService._validate_product_fields(fields)

        product = CatalogService.get_product(product_id, db)
        if product is None:
            raise ProductNotFoundException(product_id)

        if MutationService._title_taken(db, values["title"], exclude_id=product_id):
            raise ProductAlreadyExistsException(values["title"])

        try:
            with atomic(db):
                for key, value in values.items():
                    setattr(product, key, value)
                db.flush()
        except IntegrityError as e:
            MutationService._raise_for_integrity_error(e, values["title"])

        logger.info("product_updated", product_id=product_id, title=values["title"])
        publisher.broadcast_catalog(CatalogEvent.PRODUCTS_UPDATED, db)
        return CatalogService.get_product(product_id, db)

    @staticmethod
    def delete_product(
        product_id: int, db: Session, publisher: "CatalogPublisher"
    ) -> Dict[str, object]:
        """
        상품을 삭제합니다 (사이즈 재고는 FK CASCADE로 함께 삭제).

        Returns:
            {"id": 삭제된 상품 ID, "title": 삭제된 상품명}

        Raises:
            ProductNotFoundException: 상품이 없는 경우
            PersistenceException: 트랜잭션 실패
        """
        product = CatalogService.get_product(product_id, db)
        if product is None:
            raise ProductNotFoundException(product_id)

        deleted = {"id": product.id, "title": product.title}

        with atomic(db):
            db.delete(product)

        logger.info("product_deleted", product_id=product_id, title=deleted["title"])
        publisher.broadcast_catalog(CatalogEvent.PRODUCTS_UPDATED, db)
        return deleted

    @staticmethod
    def add_size(
        product_id: int,
        size: Optional[str],
        stock: Optional[int],
        db: Session,
        publisher: "CatalogPublisher",
    ) -> Tuple[Product, ProductSize]:
        """
        기존 상품에 새 사이즈를 추가합니다.

        Returns:
            (상품, 추가된 사이즈 행)

        Raises:
            CatalogValidationException: 빈 사이즈, 음수 재고
            ProductNotFoundException: 상품이 없는 경우
            SizeAlreadyExistsException: 이미 존재하는 사이즈
            PersistenceException: 트랜잭션 실패
        """
        label = MutationService._validate_size_label(size)
        stock_value = MutationService._validate_stock(stock)

        product = CatalogService.get_product(product_id, db)
        if product is None:
            raise ProductNotFoundException(product_id)

        if any(row.size == label for row in product.sizes):
            raise SizeAlreadyExistsException(product_id, label)

        try:
            with atomic(db):
                row = ProductSize(product_id=product_id, size=label, stock=stock_value)
                db.add(row)
                db.flush()
        except IntegrityError as e:
            raise SizeAlreadyExistsException(product_id, label) from e

        logger.info("size_added", product_id=product_id, size=label, stock=stock_value)
        publisher.broadcast_catalog(CatalogEvent.PRODUCTS_UPDATED, db)
        return product, row

    @staticmethod
    def remove_size(
        product_id: int,
        size: Optional[str],
        db: Session,
        publisher: "CatalogPublisher",
    ) -> Product:
        """
        상품에서 사이즈를 삭제합니다. 마지막 남은 사이즈는 삭제할 수 없습니다.

        상품 행을 잠근 뒤 개수를 확인하므로, 동시에 두 사이즈를 삭제해도
        사이즈가 0개가 되지 않습니다.

        Returns:
            사이즈를 삭제한 Product 객체

        Raises:
            CatalogValidationException: 빈 사이즈
            ProductNotFoundException: 상품이 없는 경우
            SizeNotFoundException: 해당 사이즈가 없는 경우
            LastSizeRemovalException: 마지막 남은 사이즈인 경우
            PersistenceException: 트랜잭션 실패
        """
        label = MutationService._validate_size_label(size)

        with atomic(db):
            product = MutationService._lock_product(db, product_id)
            if product is None:
                raise ProductNotFoundException(product_id)

            row = (
                db.query(ProductSize)
                .filter(
                    ProductSize.product_id == product_id,
                    ProductSize.size == label,
                )
                .first()
            )
            if row is None:
                raise SizeNotFoundException(product_id, label)

            remaining = (
                db.query(ProductSize)
                .filter(ProductSize.product_id == product_id)
                .count()
            )
            if remaining <= 1:
                raise LastSizeRemovalException(product_id, label)

            db.delete(row)

        logger.info("size_removed", product_id=product_id, size=label)
        publisher.broadcast_catalog(CatalogEvent.PRODUCTS_UPDATED, db)
        return product
