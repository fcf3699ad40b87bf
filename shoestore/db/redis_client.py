"""
Redis 클라이언트 연결 관리

카탈로그 브로드캐스트(pub/sub)에 사용됩니다.
"""

from redis import Redis
import redis.asyncio as aioredis

from shoestore.core.config import Settings


def create_redis_client(settings: Settings) -> Redis:
    """
    Redis 클라이언트 생성 (동기, 발행용)

    Args:
        settings: 애플리케이션 설정 객체

    Returns:
        Redis 클라이언트 인스턴스
    """
    return Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        db=settings.redis_db,
        password=settings.redis_password if settings.redis_password else None,
        decode_responses=True,
    )


def create_async_redis_client(settings: Settings) -> aioredis.Redis:
    """
    비동기 Redis 클라이언트 생성 (구독용, 이벤트 루프에서 사용)

    Args:
        settings: 애플리케이션 설정 객체

    Returns:
        redis.asyncio 클라이언트 인스턴스
    """
    return aioredis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )

