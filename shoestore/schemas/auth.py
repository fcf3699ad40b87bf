"""
관리자 인증 관련 Pydantic 스키마

API 요청/응답 모델을 정의합니다.
"""

from pydantic import BaseModel, Field


class AdminVerifyRequest(BaseModel):
    """
    관리자 비밀번호 검증 요청 스키마

    Example:
        {
            "password": "shared-admin-secret"
        }
    """

    password: str = Field(..., description="관리자 공유 비밀번호")


class TokenResponse(BaseModel):
    """
    JWT 토큰 응답 스키마

    Example:
        {
            "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
            "token_type": "bearer",
            "expires_in": 3600
        }
    """

    access_token: str = Field(..., description="관리자 JWT 액세스 토큰")
    token_type: str = Field(default="bearer", description="토큰 타입")
    expires_in: int = Field(..., description="만료까지 남은 시간 (초)")
