"""
데이터베이스 초기화

테이블 생성 및 데모 카탈로그 데이터 입력을 담당합니다.
"""

from decimal import Decimal

from sqlalchemy.orm import Session

from shoestore.core.logging import get_logger
from shoestore.db.database import Base, atomic, engine
from shoestore.models import Product, ProductSize

logger = get_logger(__name__)


DEMO_CATALOG = [
    {
        "title": "Zapato Boni urbano negro",
        "brand": "Boni",
        "price": Decimal("74.99"),
        "image_url": "/imagenes/imagen1.jpeg",
        "sizes": [("38", 2), ("39", 0), ("40", 5), ("41", 1), ("42", 0)],
    },
    {
        "title": "Zapato Boni urbano negro clasico",
        "brand": "Boni",
        "price": Decimal("74.99"),
        "image_url": "/imagenes/imagen2.jpeg",
        "sizes": [("36", 3), ("37", 0), ("38", 4), ("39", 2), ("40", 0)],
    },
    {
        "title": "Zapato Boni urbano negro edicion limitada",
        "brand": "Boni",
        "price": Decimal("74.99"),
        "image_url": "/imagenes/imagen3.jpeg",
        "sizes": [("39", 0), ("40", 0), ("41", 0)],
    },
]


def create_tables(bind=engine) -> None:
    """
    모든 테이블을 생성합니다 (이미 있으면 건너뜀).

    Args:
        bind: 대상 엔진 (기본값: 애플리케이션 엔진)
    """
    # 모델 모듈이 import되어야 metadata에 테이블이 등록됨
    import shoestore.models  # noqa: F401

    Base.metadata.create_all(bind=bind)
    logger.info("tables_created", tables=sorted(Base.metadata.tables))


def seed_catalog(db: Session) -> int:
    """
    상품 테이블이 비어 있을 때만 데모 카탈로그를 입력합니다.

    Args:
        db: DB 세션

    Returns:
        입력한 상품 수 (이미 데이터가 있으면 0)
    """
    if db.query(Product.id).first() is not None:
        return 0

    with atomic(db):
        for entry in DEMO_CATALOG:
            product = Product(
                title=entry["title"],
                brand=entry["brand"],
                price=entry["price"],
                image_url=entry["image_url"],
            )
            product.sizes = [
                ProductSize(size=size, stock=stock) for size, stock in entry["sizes"]
            ]
            db.add(product)

    logger.info("demo_catalog_seeded", products=len(DEMO_CATALOG))
    return len(DEMO_CATALOG)
