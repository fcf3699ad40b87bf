"""
관리자 인증 유틸리티

관리자는 공유 비밀번호 하나로 인증합니다. 서버에는 bcrypt 해시
(ADMIN_PASSWORD_HASH)만 보관하고, 검증에 성공하면 admin scope의
만료 시간이 있는 JWT를 발급합니다.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any
import bcrypt
import jwt

from shoestore.core.config import Settings


def hash_password(password: str) -> str:
    """
    관리자 비밀번호의 bcrypt 해시를 만듭니다 (ADMIN_PASSWORD_HASH 값 생성용).

    Example:
        $ python -c "from shoestore.core.security import hash_password; print(hash_password('...'))"
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    입력한 비밀번호가 설정된 관리자 해시와 일치하는지 확인합니다.

    해시가 설정되지 않았거나 bcrypt 형식이 아니면 어떤 비밀번호도
    통과하지 못합니다.
    """
    if not hashed_password:
        return False

    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        return False


def create_access_token(data: Dict[str, Any], settings: Settings) -> str:
    """
    관리자 세션 토큰을 발급합니다.

    Args:
        data: 토큰 클레임 (예: {"sub": "admin", "scope": "admin"})
        settings: JWT 시크릿, 알고리즘, 유효 시간(분)

    Returns:
        str: iat/exp가 추가된 JWT
    """
    issued_at = datetime.now(timezone.utc)
    claims = {
        **data,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.jwt_expiration_minutes),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    관리자 세션 토큰의 서명과 만료를 확인하고 클레임을 반환합니다.

    scope 확인은 AuthService.verify_admin_token에서 합니다.

    Raises:
        jwt.ExpiredSignatureError: 만료된 토큰
        jwt.InvalidTokenError: 서명 불일치, 형식 오류
    """
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
