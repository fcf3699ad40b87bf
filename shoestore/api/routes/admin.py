"""
관리자 API 엔드포인트

관리자 토큰 발급, 재고 일괄 수정, 상품/사이즈 생성·수정·삭제, 재고 통계를
제공합니다. 모든 쓰기 엔드포인트는 관리자 토큰이 필요하며, 커밋된 변경은
WebSocket으로 전체 카탈로그가 브로드캐스트됩니다.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from shoestore.api.deps import get_admin_session, get_db, get_publisher
from shoestore.broadcast.publisher import CatalogPublisher
from shoestore.core.config import Settings, get_settings
from shoestore.core.exceptions import (
    CatalogValidationException,
    InvalidCredentialsException,
    PersistenceException,
    ProductNotFoundException,
    SizeNotFoundException,
)
from shoestore.core.logging import get_logger
from shoestore.schemas.auth import AdminVerifyRequest, TokenResponse
from shoestore.schemas.catalog import (
    DeletedProduct,
    MutationResponse,
    ProductCreateRequest,
    ProductCreatedResponse,
    ProductDeletedResponse,
    ProductResponse,
    ProductUpdateRequest,
    ProductUpdatedResponse,
    SizeAddRequest,
    SizeChangedResponse,
    StatsResponse,
    StockUpdateRequest,
)
from shoestore.services.auth_service import AuthService
from shoestore.services.catalog_service import CatalogService
from shoestore.services.mutation_service import MutationService

logger = get_logger(__name__)

router = APIRouter()


@router.post("/verify", response_model=TokenResponse)
def verify_admin(
    credentials: AdminVerifyRequest,
    settings: Settings = Depends(get_settings),
):
    """
    관리자 비밀번호를 검증하고 관리자 토큰을 발급합니다.

    Raises:
        HTTPException 401: 잘못된 비밀번호

    Example:
        Request:
        ```json
        {"password": "shared-admin-secret"}
        ```

        Response (200):
        ```json
        {"access_token": "eyJhbGciOi...", "token_type": "bearer", "expires_in": 3600}
        ```
    """
    try:
        token = AuthService.issue_admin_token(credentials.password, settings)
    except InvalidCredentialsException as e:
        logger.warning("admin_verify_failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    return TokenResponse(
        access_token=token,
        token_type="bearer",
        expires_in=settings.jwt_expiration_minutes * 60,
    )


@router.put("/stock", response_model=MutationResponse)
def update_stock(
    payload: StockUpdateRequest,
    db: Session = Depends(get_db),
    publisher: CatalogPublisher = Depends(get_publisher),
    admin: Dict[str, Any] = Depends(get_admin_session),
):
    """
    여러 (상품, 사이즈)의 재고를 한 번에 설정합니다 (인증 필요).

    하나의 트랜잭션으로 처리되어 항목 중 하나라도 실패하면 아무것도 반영되지
    않습니다. 성공 시 `stock_updated` 이벤트가 브로드캐스트됩니다.

    Raises:
        HTTPException 400: 잘못된 항목 (productId/size 누락, 음수 재고)
        HTTPException 404: 존재하지 않는 상품
        HTTPException 500: 트랜잭션 실패

    Example:
        Request:
        ```json
        {"updates": [{"productId": 1, "size": "38", "stock": 0}]}
        ```

        Response (200):
        ```json
        {"success": true, "message": "Stock updated for 1 size(s)"}
        ```
    """
    try:
        count = MutationService.update_stock(payload.updates, db, publisher)

    except CatalogValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    except ProductNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    except PersistenceException as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )

    return MutationResponse(success=True, message=f"Stock updated for {count} size(s)")


@router.post("/products", response_model=ProductCreatedResponse)
def create_product(
    payload: ProductCreateRequest,
    db: Session = Depends(get_db),
    publisher: CatalogPublisher = Depends(get_publisher),
    admin: Dict[str, Any] = Depends(get_admin_session),
):
    """
    새 상품과 초기 사이즈 목록을 생성합니다 (인증 필요).

    Raises:
        HTTPException 400: 입력 검증 실패 또는 중복 title
        HTTPException 500: 트랜잭션 실패

    Example:
        Request:
        ```json
        {
            "product": {"title": "Bota Andina", "brand": "Andes", "price": 120.5,
                        "image_url": "/imagenes/bota.jpeg"},
            "sizes": [{"size": "40", "stock": 3}, {"size": "41"}]
        }
        ```

        Response (200):
        ```json
        {"success": true, "message": "Product created", "productId": 4}
        ```
    """
    try:
        product = MutationService.create_product(
            payload.product, payload.sizes, db, publisher
        )

    except CatalogValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    except PersistenceException as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )

    return ProductCreatedResponse(
        success=True, message="Product created", product_id=product.id
    )


@router.put("/products/{product_id}", response_model=ProductUpdatedResponse)
def update_product(
    product_id: int,
    payload: ProductUpdateRequest,
    db: Session = Depends(get_db),
    publisher: CatalogPublisher = Depends(get_publisher),
    admin: Dict[str, Any] = Depends(get_admin_session),
):
    """
    상품 필드(title, brand, price, image_url)를 수정합니다 (인증 필요).

    Raises:
        HTTPException 400: 입력 검증 실패 또는 다른 상품과 title 중복
        HTTPException 404: 상품을 찾을 수 없는 경우
        HTTPException 500: 트랜잭션 실패
    """
    try:
        product = MutationService.update_product(
            product_id, payload.product, db, publisher
        )

    except CatalogValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    except ProductNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    except PersistenceException as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )

    return ProductUpdatedResponse(
        success=True,
        message="Product updated",
        product=ProductResponse.model_validate(product),
    )


@router.delete("/products/{product_id}", response_model=ProductDeletedResponse)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    publisher: CatalogPublisher = Depends(get_publisher),
    admin: Dict[str, Any] = Depends(get_admin_session),
):
    """
    상품과 모든 사이즈 재고를 삭제합니다 (인증 필요).

    Raises:
        HTTPException 404: 상품을 찾을 수 없는 경우
        HTTPException 500: 트랜잭션 실패

    Example:
        Response (200):
        ```json
        {"success": true, "message": "Product deleted",
         "deletedProduct": {"id": 4, "title": "Bota Andina"}}
        ```
    """
    try:
        deleted = MutationService.delete_product(product_id, db, publisher)

    except ProductNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    except PersistenceException as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )

    return ProductDeletedResponse(
        success=True,
        message="Product deleted",
        deleted_product=DeletedProduct(**deleted),
    )


@router.post("/products/{product_id}/sizes", response_model=SizeChangedResponse)
def add_size(
    product_id: int,
    payload: SizeAddRequest,
    db: Session = Depends(get_db),
    publisher: CatalogPublisher = Depends(get_publisher),
    admin: Dict[str, Any] = Depends(get_admin_session),
):
    """
    기존 상품에 새 사이즈를 추가합니다 (인증 필요).

    Raises:
        HTTPException 400: 빈 사이즈, 음수 재고, 이미 존재하는 사이즈
        HTTPException 404: 상품을 찾을 수 없는 경우
        HTTPException 500: 트랜잭션 실패
    """
    try:
        product, row = MutationService.add_size(
            product_id, payload.size, payload.stock, db, publisher
        )

    except CatalogValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    except ProductNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    except PersistenceException as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )

    return SizeChangedResponse(
        success=True,
        message="Size added",
        product_id=product.id,
        product_title=product.title,
        size=row.size,
        stock=row.stock,
    )


@router.delete(
    "/products/{product_id}/sizes/{size}", response_model=SizeChangedResponse
)
def remove_size(
    product_id: int,
    size: str,
    db: Session = Depends(get_db),
    publisher: CatalogPublisher = Depends(get_publisher),
    admin: Dict[str, Any] = Depends(get_admin_session),
):
    """
    상품에서 사이즈를 삭제합니다 (인증 필요).

    Raises:
        HTTPException 400: 마지막 남은 사이즈 삭제 시도
        HTTPException 404: 상품 또는 사이즈를 찾을 수 없는 경우
        HTTPException 500: 트랜잭션 실패
    """
    try:
        product = MutationService.remove_size(product_id, size, db, publisher)

    except CatalogValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    except (ProductNotFoundException, SizeNotFoundException) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    except PersistenceException as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )

    return SizeChangedResponse(
        success=True,
        message="Size removed",
        product_id=product.id,
        product_title=product.title,
        size=size.strip(),
    )


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    재고 통계를 조회합니다.

    Example:
        Response (200):
        ```json
        {
            "general": {"totalProducts": 3, "totalStock": 17,
                        "outOfStockSizes": 6, "lowStockSizes": 5},
            "topProducts": [{"id": 3, "title": "...", "brand": "Boni",
                             "total_stock": 0, "total_sizes": 3}],
            "stockByBrand": [{"brand": "Boni", "total_stock": 17, "products_count": 3}]
        }
        ```
    """
    return StatsResponse.model_validate(CatalogService.get_stats(db, settings))
