"""
비밀번호 해싱 및 JWT 토큰 관련 테스트
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from shoestore.core.security import (
    create_access_token,
    hash_password,
    verify_access_token,
    verify_password,
)


class TestPasswordHashing:
    """관리자 비밀번호 해싱 테스트 클래스"""

    def test_hash_password(self):
        """비밀번호가 bcrypt로 해싱되는지 테스트"""
        hashed = hash_password("shared-admin-secret")

        assert hashed != "shared-admin-secret"
        assert hashed.startswith("$2b$")

    def test_verify_password(self):
        hashed = hash_password("shared-admin-secret")

        assert verify_password("shared-admin-secret", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_empty_hash_never_matches(self):
        """해시 미설정 시 빈 비밀번호도 거부"""
        assert verify_password("", "") is False
        assert verify_password("anything", "") is False

    def test_malformed_hash(self):
        """bcrypt 형식이 아닌 해시는 예외 대신 False"""
        assert verify_password("secret", "not-a-bcrypt-hash") is False


class TestJWTToken:
    """JWT 토큰 생성 및 검증 테스트 클래스"""

    def test_create_and_verify(self, settings):
        token = create_access_token({"sub": "admin", "scope": "admin"}, settings)

        # JWT 형식 (헤더.페이로드.서명)
        assert len(token.split(".")) == 3

        payload = verify_access_token(token, settings)
        assert payload["sub"] == "admin"
        assert payload["scope"] == "admin"
        assert "exp" in payload
        assert "iat" in payload

    def test_create_does_not_mutate_input(self, settings):
        data = {"sub": "admin"}
        create_access_token(data, settings)

        assert data == {"sub": "admin"}

    def test_expired_token(self, settings):
        now = datetime.now(timezone.utc)
        expired = jwt.encode(
            {"sub": "admin", "exp": now - timedelta(minutes=1)},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(jwt.ExpiredSignatureError):
            verify_access_token(expired, settings)

    def test_wrong_secret(self, settings):
        token = jwt.encode(
            {"sub": "admin", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            "another-secret",
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(jwt.InvalidTokenError):
            verify_access_token(token, settings)
