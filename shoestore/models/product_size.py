"""
ProductSize 모델
"""

from datetime import datetime
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from shoestore.db.database import Base


class ProductSize(Base):
    """
    상품의 사이즈별 재고 모델

    Attributes:
        id: 고유 ID (Primary Key)
        product_id: 상품 ID (Foreign Key to products.id, ON DELETE CASCADE)
        size: 사이즈 라벨 (상품 내에서 Unique, 최대 10자)
        stock: 재고 수량 (0 이상)
        created_at: 생성 일시 (자동 설정)
        updated_at: 수정 일시 (자동 업데이트)
        product: Product 모델과의 관계
    """

    __tablename__ = "product_sizes"
    __table_args__ = (
        UniqueConstraint("product_id", "size", name="uq_product_size"),
        CheckConstraint("stock >= 0", name="ck_product_size_stock_non_negative"),
    )

    SIZE_MAX_LENGTH = 10
    # Integer 컬럼 범위
    STOCK_MAX = 2**31 - 1

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    size = Column(String(SIZE_MAX_LENGTH), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    product = relationship("Product", back_populates="sizes")

    def __repr__(self) -> str:
        """ProductSize 객체의 문자열 표현"""
        return (
            f"<ProductSize(product_id={self.product_id}, size='{self.size}', "
            f"stock={self.stock})>"
        )

    def __str__(self) -> str:
        return f"Size {self.size}: {self.stock} in stock"
