"""
Pydantic 스키마 모듈
"""

from shoestore.schemas.auth import AdminVerifyRequest, TokenResponse
from shoestore.schemas.catalog import (
    ProductCreateRequest,
    ProductFields,
    ProductResponse,
    ProductUpdateRequest,
    SizeAddRequest,
    SizeEntry,
    SizeStockResponse,
    StatsResponse,
    StockUpdateEntry,
    StockUpdateRequest,
)

__all__ = [
    "AdminVerifyRequest",
    "TokenResponse",
    "ProductCreateRequest",
    "ProductFields",
    "ProductResponse",
    "ProductUpdateRequest",
    "SizeAddRequest",
    "SizeEntry",
    "SizeStockResponse",
    "StatsResponse",
    "StockUpdateEntry",
    "StockUpdateRequest",
]
