"""
카탈로그(상품/사이즈 재고) 관련 Pydantic 스키마

API 요청/응답 모델을 정의합니다.
요청 스키마는 타입만 검사하고, 필수 여부/범위 검증은 MutationService가
쓰기 전에 수행합니다 (검증 실패는 400으로 응답).
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class SizeStockResponse(BaseModel):
    """
    사이즈별 재고 응답 스키마

    Example:
        {"size": "38", "stock": 2}
    """

    model_config = ConfigDict(from_attributes=True)

    size: str = Field(..., description="사이즈 라벨")
    stock: int = Field(..., description="재고 수량")


class ProductResponse(BaseModel):
    """
    상품 정보 응답 스키마 (Canonical Product List의 원소)

    Example:
        {
            "id": 1,
            "title": "Zapato Boni urbano negro",
            "brand": "Boni",
            "price": "74.99",
            "image_url": "/imagenes/imagen1.jpeg",
            "created_at": "2025-01-22T10:30:00",
            "updated_at": "2025-01-22T10:30:00",
            "sizes": [{"size": "38", "stock": 2}, {"size": "40", "stock": 5}]
        }
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="상품 ID")
    title: str = Field(..., description="상품명")
    brand: str = Field(..., description="브랜드")
    price: Decimal = Field(..., description="가격 (소수점 2자리)")
    image_url: str = Field(..., description="이미지 URL")
    created_at: datetime = Field(..., description="상품 생성 일시")
    updated_at: datetime = Field(..., description="상품 수정 일시")
    sizes: list[SizeStockResponse] = Field(
        default_factory=list, description="사이즈별 재고 (사이즈 라벨 순)"
    )

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> str:
        return f"{price:.2f}"


class ProductFields(BaseModel):
    """
    상품 생성/수정 시 상품 필드

    Example:
        {
            "title": "Zapato Boni urbano negro",
            "brand": "Boni",
            "price": 74.99,
            "image_url": "/imagenes/imagen1.jpeg"
        }
    """

    title: str | None = Field(None, description="상품명 (필수, 전역 유일)")
    brand: str | None = Field(None, description="브랜드 (필수)")
    price: Decimal | None = Field(None, description="가격 (필수, 0보다 커야 함)")
    image_url: str | None = Field(None, description="이미지 URL (필수)")


class SizeEntry(BaseModel):
    """
    사이즈 입력 항목

    Example:
        {"size": "38", "stock": 2}
    """

    size: str | None = Field(None, description="사이즈 라벨 (필수, 공백 제거)")
    stock: int | None = Field(None, description="재고 수량 (미입력 시 0)")


class ProductCreateRequest(BaseModel):
    """
    상품 생성 요청 스키마

    Example:
        {
            "product": {"title": "...", "brand": "Boni", "price": 74.99, "image_url": "..."},
            "sizes": [{"size": "38", "stock": 2}, {"size": "39"}]
        }
    """

    product: ProductFields | None = None
    sizes: list[SizeEntry] | None = None


class ProductUpdateRequest(BaseModel):
    """상품 수정 요청 스키마"""

    product: ProductFields | None = None


class StockUpdateEntry(BaseModel):
    """
    재고 일괄 수정 항목

    Example:
        {"productId": 1, "size": "38", "stock": 0}
    """

    model_config = ConfigDict(populate_by_name=True)

    product_id: int | None = Field(None, alias="productId", description="상품 ID")
    size: str | None = Field(None, description="사이즈 라벨")
    stock: int | None = Field(None, description="설정할 재고 (0 이상, 미입력 시 0)")


class StockUpdateRequest(BaseModel):
    """
    재고 일괄 수정 요청 스키마

    Example:
        {"updates": [{"productId": 1, "size": "38", "stock": 0}]}
    """

    updates: list[StockUpdateEntry] | None = None


class SizeAddRequest(BaseModel):
    """
    사이즈 추가 요청 스키마

    Example:
        {"size": "43", "stock": 4}
    """

    size: str | None = None
    stock: int | None = None


class MutationResponse(BaseModel):
    """쓰기 작업 공통 응답 스키마"""

    success: bool = True
    message: str


class ProductCreatedResponse(MutationResponse):
    """
    상품 생성 응답 스키마

    Example:
        {"success": true, "message": "Product created", "productId": 7}
    """

    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(..., alias="productId")


class ProductUpdatedResponse(MutationResponse):
    """상품 수정 응답 스키마"""

    product: ProductResponse


class DeletedProduct(BaseModel):
    """삭제된 상품 요약"""

    id: int
    title: str


class ProductDeletedResponse(MutationResponse):
    """
    상품 삭제 응답 스키마

    Example:
        {"success": true, "message": "Product deleted", "deletedProduct": {"id": 7, "title": "..."}}
    """

    model_config = ConfigDict(populate_by_name=True)

    deleted_product: DeletedProduct = Field(..., alias="deletedProduct")


class SizeChangedResponse(MutationResponse):
    """
    사이즈 추가/삭제 응답 스키마

    Example:
        {"success": true, "message": "Size added", "productId": 1,
         "productTitle": "...", "size": "43", "stock": 4}
    """

    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(..., alias="productId")
    product_title: str = Field(..., alias="productTitle")
    size: str
    stock: int | None = None


class GeneralStats(BaseModel):
    """재고 전체 통계"""

    model_config = ConfigDict(populate_by_name=True)

    total_products: int = Field(..., alias="totalProducts")
    total_stock: int = Field(..., alias="totalStock")
    out_of_stock_sizes: int = Field(..., alias="outOfStockSizes")
    low_stock_sizes: int = Field(..., alias="lowStockSizes")


class ProductStockSummary(BaseModel):
    """재고가 적은 상품 요약"""

    id: int
    title: str
    brand: str
    total_stock: int
    total_sizes: int


class BrandStockSummary(BaseModel):
    """브랜드별 재고 요약"""

    brand: str
    total_stock: int
    products_count: int


class StatsResponse(BaseModel):
    """
    관리자 재고 통계 응답 스키마

    Example:
        {
            "general": {"totalProducts": 3, "totalStock": 17, "outOfStockSizes": 6, "lowStockSizes": 5},
            "topProducts": [{"id": 3, "title": "...", "brand": "Boni", "total_stock": 0, "total_sizes": 3}],
            "stockByBrand": [{"brand": "Boni", "total_stock": 17, "products_count": 3}]
        }
    """

    model_config = ConfigDict(populate_by_name=True)

    general: GeneralStats
    top_products: list[ProductStockSummary] = Field(..., alias="topProducts")
    stock_by_brand: list[BrandStockSummary] = Field(..., alias="stockByBrand")
