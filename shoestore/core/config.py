"""
애플리케이션 설정 관리

Pydantic Settings를 사용하여 환경 변수를 로드합니다.
.env 파일 또는 시스템 환경 변수에서 설정을 읽어옵니다.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정 클래스"""

    # 데이터베이스 설정
    database_url: str = "sqlite:///./shoestore.db"

    # Redis 설정 (브로드캐스트 채널)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str = ""

    # 브로드캐스트 설정
    broadcast_backend: Literal["redis", "local"] = "redis"
    broadcast_channel: str = "shoestore:catalog"

    # 관리자 인증 (bcrypt 해시로 저장된 공유 비밀번호)
    admin_password_hash: str = ""

    # JWT 설정
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 60

    # 재고 통계 설정
    low_stock_threshold: int = 5

    # 애플리케이션 설정
    seed_demo_data: bool = False
    frontend_origins: list[str] = ["http://localhost:3000"]
    app_env: str = "development"
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # 정의되지 않은 환경 변수 무시
    )

    @property
    def redis_url(self) -> str:
        """
        Redis 연결 URL 생성

        비밀번호가 있는 경우: redis://:password@host:port/db
        비밀번호가 없는 경우: redis://host:port/db
        """
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @property
    def is_sqlite(self) -> bool:
        """SQLite URL 여부 (connect_args, PRAGMA 설정 분기용)"""
        return self.database_url.startswith("sqlite")


def get_settings() -> Settings:
    """
    Settings 인스턴스를 반환하는 팩토리 함수
    """
    return Settings()
