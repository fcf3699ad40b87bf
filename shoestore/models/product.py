"""
Product 모델
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric
from sqlalchemy.orm import relationship
from shoestore.db.database import Base


class Product(Base):
    """
    상품(신발) 모델

    Attributes:
        id: 상품 고유 ID (Primary Key, 서버에서 할당)
        title: 상품명 (Unique, Not Null)
        brand: 브랜드 (Not Null)
        price: 가격 (Not Null, 소수점 2자리 고정)
        image_url: 이미지 URL (Not Null)
        created_at: 생성 일시 (자동 설정)
        updated_at: 수정 일시 (자동 업데이트)
        sizes: 사이즈별 재고 목록 (사이즈 라벨 순, 상품 삭제 시 함께 삭제)
    """

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    title = Column(String(255), unique=True, nullable=False, index=True)
    brand = Column(String(100), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # ON DELETE CASCADE는 DB가 처리하고, ORM은 세션에 로드된 사이즈만 정리
    sizes = relationship(
        "ProductSize",
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProductSize.size",
    )

    def __repr__(self) -> str:
        """Product 객체의 문자열 표현"""
        return f"<Product(id={self.id}, title='{self.title}', price={self.price})>"

    def __str__(self) -> str:
        return f"Product: {self.title}"
