"""
FastAPI 의존성 주입 함수들

데이터베이스 세션, 설정, 발행기, 관리자 인증 등의 의존성을 제공합니다.
"""

from typing import Any, Dict

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from shoestore.broadcast.publisher import get_publisher
from shoestore.core.config import Settings, get_settings
from shoestore.core.exceptions import InvalidCredentialsException
from shoestore.db.database import get_db
from shoestore.services.auth_service import AuthService

__all__ = ["get_db", "get_publisher", "get_settings", "get_admin_session"]


# 관리자 토큰 스키마 설정
# tokenUrl은 토큰을 얻기 위한 엔드포인트 경로
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/admin/verify")


def get_admin_session(
    token: str = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    Bearer 토큰으로 관리자 세션을 확인하는 의존성 함수

    Args:
        token: Bearer 토큰 (자동으로 Authorization 헤더에서 추출)
        settings: 애플리케이션 설정

    Returns:
        Dict[str, Any]: 관리자 토큰 페이로드

    Raises:
        HTTPException: 토큰이 없거나 유효하지 않은 경우 401 Unauthorized

    Example:
        @router.put("/stock")
        def update_stock(admin: dict = Depends(get_admin_session)):
            ...
    """
    try:
        return AuthService.verify_admin_token(token, settings)

    except InvalidCredentialsException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
