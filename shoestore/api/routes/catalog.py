"""
공개 카탈로그 API 엔드포인트

인증 없이 Canonical Product List와 단일 상품을 조회합니다.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from shoestore.api.deps import get_db
from shoestore.schemas.catalog import ProductResponse
from shoestore.services.catalog_service import CatalogService


router = APIRouter()


@router.get("/products", response_model=List[ProductResponse])
def list_products(db: Session = Depends(get_db)):
    """
    전체 상품 목록(사이즈별 재고 포함)을 조회합니다.

    새로 연결한 클라이언트는 브로드캐스트를 받기 전에 이 엔드포인트로
    전체 상태를 먼저 가져와야 합니다.

    Returns:
        List[ProductResponse]: Canonical Product List (최신 상품 우선)

    Example:
        Response (200):
        ```json
        [
            {
                "id": 1,
                "title": "Zapato Boni urbano negro",
                "brand": "Boni",
                "price": "74.99",
                "image_url": "/imagenes/imagen1.jpeg",
                "created_at": "2025-01-22T10:30:00",
                "updated_at": "2025-01-22T10:30:00",
                "sizes": [{"size": "38", "stock": 2}]
            }
        ]
        ```
    """
    return CatalogService.list_products(db)


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    """
    특정 상품의 상세 정보를 조회합니다.

    Raises:
        HTTPException 404: 상품을 찾을 수 없는 경우
    """
    product = CatalogService.get_product(product_id, db)

    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with id {product_id} not found",
        )

    return product
