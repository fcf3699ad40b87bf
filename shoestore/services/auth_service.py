"""
관리자 인증 서비스

공유 관리자 비밀번호를 한 번 검증한 뒤, 만료 시간이 있는 관리자 토큰을
발급하고 검증합니다.
"""

from typing import Any, Dict

import jwt

from shoestore.core.config import Settings
from shoestore.core.exceptions import InvalidCredentialsException
from shoestore.core.security import (
    create_access_token,
    verify_access_token,
    verify_password,
)

ADMIN_SUBJECT = "admin"
ADMIN_SCOPE = "admin"


class AuthService:
    """관리자 인증 관련 비즈니스 로직을 처리하는 서비스 클래스"""

    @staticmethod
    def issue_admin_token(password: str, settings: Settings) -> str:
        """
        관리자 비밀번호를 검증하고 관리자 토큰을 발급합니다.

        Args:
            password: 평문 관리자 비밀번호
            settings: 애플리케이션 설정 (비밀번호 해시, JWT 설정)

        Returns:
            str: 관리자 scope가 포함된 JWT 토큰

        Raises:
            InvalidCredentialsException: 비밀번호가 일치하지 않는 경우
        """
        if not verify_password(password, settings.admin_password_hash):
            raise InvalidCredentialsException("Invalid admin password")

        return create_access_token(
            {"sub": ADMIN_SUBJECT, "scope": ADMIN_SCOPE}, settings
        )

    @staticmethod
    def verify_admin_token(token: str, settings: Settings) -> Dict[str, Any]:
        """
        관리자 토큰을 검증합니다.

        Args:
            token: JWT 액세스 토큰
            settings: 애플리케이션 설정

        Returns:
            Dict[str, Any]: 토큰 페이로드

        Raises:
            InvalidCredentialsException: 토큰이 만료/위조되었거나 관리자 scope가 아닌 경우
        """
        try:
            payload = verify_access_token(token, settings)
        except jwt.ExpiredSignatureError:
            raise InvalidCredentialsException("Token has expired")
        except jwt.InvalidTokenError:
            raise InvalidCredentialsException("Invalid token")

        if payload.get("scope") != ADMIN_SCOPE:
            raise InvalidCredentialsException("Token is not scoped for admin access")

        return payload
