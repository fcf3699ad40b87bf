"""카탈로그 조회 서비스."""

from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from shoestore.core.config import Settings
from shoestore.models import Product, ProductSize
from shoestore.schemas.catalog import ProductResponse

# 통계에서 보여줄 재고가 가장 적은 상품 수
TOP_LOW_STOCK_PRODUCTS = 5


class CatalogService:
    """Canonical Product List 조회 및 재고 통계 서비스."""

    @staticmethod
    def list_products(db: Session) -> List[Product]:
        """
        전체 상품을 사이즈와 함께 조회합니다.

        정렬: 최신 상품 우선 (created_at DESC, id DESC), 사이즈는 라벨 순.
        브로드캐스트와 전체 조회가 모두 이 경로를 사용합니다.

        Args:
            db: DB 세션

        Returns:
            Product 객체 리스트 (sizes 로드 완료)
        """
        return (
            db.query(Product)
            .options(selectinload(Product.sizes))
            .order_by(Product.created_at.desc(), Product.id.desc())
            .all()
        )

    @staticmethod
    def list_products_payload(db: Session) -> List[Dict[str, Any]]:
        """
        Canonical Product List를 JSON 직렬화 가능한 형태로 반환합니다.

        Args:
            db: DB 세션

        Returns:
            ProductResponse를 JSON 모드로 dump한 dict 리스트
        """
        return [
            ProductResponse.model_validate(product).model_dump(mode="json")
            for product in CatalogService.list_products(db)
        ]

    @staticmethod
    def get_product(product_id: int, db: Session) -> Optional[Product]:
        """
        상품 ID로 상품을 조회합니다.

        Args:
            product_id: 상품 ID
            db: DB 세션

        Returns:
            Product 객체 또는 None
        """
        return (
            db.query(Product)
            .options(selectinload(Product.sizes))
            .filter(Product.id == product_id)
            .first()
        )

    @staticmethod
    def get_stats(db: Session, settings: Settings) -> Dict[str, Any]:
        """
        관리자용 재고 통계를 계산합니다.

        Args:
            db: DB 세션
            settings: 애플리케이션 설정 (low_stock_threshold)

        Returns:
            {
                "general": {"total_products", "total_stock",
                            "out_of_stock_sizes", "low_stock_sizes"},
                "top_products": [...재고 합계가 가장 적은 상품 5개...],
                "stock_by_brand": [...브랜드별 재고 합계, 많은 순...]
            }
        """
        total_products = db.query(func.count(Product.id)).scalar() or 0
        total_stock = (
            db.query(func.coalesce(func.sum(ProductSize.stock), 0)).scalar() or 0
        )
        out_of_stock_sizes = (
            db.query(func.count(ProductSize.id))
            .filter(ProductSize.stock == 0)
            .scalar()
            or 0
        )
        low_stock_sizes = (
            db.query(func.count(ProductSize.id))
            .filter(
                ProductSize.stock > 0,
                ProductSize.stock < settings.low_stock_threshold,
            )
            .scalar()
            or 0
        )

        product_stock = func.coalesce(func.sum(ProductSize.stock), 0).label(
            "total_stock"
        )
        top_rows = (
            db.query(
                Product.id,
                Product.title,
                Product.brand,
                product_stock,
                func.count(ProductSize.id).label("total_sizes"),
            )
            .outerjoin(ProductSize, ProductSize.product_id == Product.id)
            .group_by(Product.id, Product.title, Product.brand)
            .order_by(product_stock.asc(), Product.id.asc())
            .limit(TOP_LOW_STOCK_PRODUCTS)
            .all()
        )

        brand_stock = func.coalesce(func.sum(ProductSize.stock), 0).label(
            "total_stock"
        )
        brand_rows = (
            db.query(
                Product.brand,
                brand_stock,
                func.count(func.distinct(Product.id)).label("products_count"),
            )
            .outerjoin(ProductSize, ProductSize.product_id == Product.id)
            .group_by(Product.brand)
            .order_by(brand_stock.desc(), Product.brand.asc())
            .all()
        )

        return {
            "general": {
                "total_products": int(total_products),
                "total_stock": int(total_stock),
                "out_of_stock_sizes": int(out_of_stock_sizes),
                "low_stock_sizes": int(low_stock_sizes),
            },
            "top_products": [
                {
                    "id": row.id,
                    "title": row.title,
                    "brand": row.brand,
                    "total_stock": int(row.total_stock),
                    "total_sizes": int(row.total_sizes),
                }
                for row in top_rows
            ],
            "stock_by_brand": [
                {
                    "brand": row.brand,
                    "total_stock": int(row.total_stock),
                    "products_count": int(row.products_count),
                }
                for row in brand_rows
            ],
        }
