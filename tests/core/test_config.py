"""
설정(Config) 관련 테스트
"""

import pytest
from pydantic import ValidationError

from shoestore.core.config import Settings


def test_config_from_env(monkeypatch):
    """환경 변수로부터 설정을 로드하는지 테스트"""
    monkeypatch.setenv("REDIS_HOST", "test-redis")
    monkeypatch.setenv("REDIS_PORT", "6380")
    monkeypatch.setenv("BROADCAST_BACKEND", "redis")
    monkeypatch.setenv("BROADCAST_CHANNEL", "test:catalog")
    monkeypatch.setenv("LOW_STOCK_THRESHOLD", "3")
    monkeypatch.setenv("JWT_EXPIRATION_MINUTES", "15")

    settings = Settings()

    assert settings.redis_host == "test-redis"
    assert settings.redis_port == 6380
    assert settings.broadcast_backend == "redis"
    assert settings.broadcast_channel == "test:catalog"
    assert settings.low_stock_threshold == 3
    assert settings.jwt_expiration_minutes == 15


def test_invalid_broadcast_backend(monkeypatch):
    monkeypatch.setenv("BROADCAST_BACKEND", "kafka")

    with pytest.raises(ValidationError):
        Settings()


def test_redis_url():
    assert Settings(redis_host="cache", redis_port=6379, redis_db=2).redis_url == (
        "redis://cache:6379/2"
    )
    assert Settings(redis_password="pw").redis_url.startswith("redis://:pw@")


def test_is_sqlite():
    assert Settings(database_url="sqlite://").is_sqlite is True
    assert Settings(database_url="postgresql://u:p@db/shoes").is_sqlite is False
