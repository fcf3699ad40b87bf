"""
카탈로그 발행기

커밋된 변경 이후 Canonical Product List를 다시 조회하여 발행합니다.
- RedisCatalogPublisher: Redis pub/sub 채널로 발행 (여러 API 프로세스 지원)
- LocalCatalogPublisher: 같은 프로세스의 ConnectionManager로 직접 전달
"""

import itertools
import json
import threading
from typing import Any, ContextManager, Dict, Generator, Optional

import anyio.from_thread
from fastapi import Depends
from redis import Redis
from sqlalchemy.orm import Session

from shoestore.broadcast.events import CatalogEvent, build_message
from shoestore.broadcast.manager import ConnectionManager, connection_manager
from shoestore.core.config import Settings, get_settings
from shoestore.core.logging import get_logger
from shoestore.db.redis_client import create_redis_client
from shoestore.services.catalog_service import CatalogService

logger = get_logger(__name__)

# 스냅샷 조회 + sequence 할당 + 발행을 한 번에 하나씩 수행
_snapshot_lock = threading.Lock()
_local_sequence = itertools.count(1)

# Redis 발행 잠금 (초): 만료 시간, 획득 대기 시간
PUBLISH_LOCK_TIMEOUT = 10
PUBLISH_LOCK_WAIT = 5


class CatalogPublisher:
    """카탈로그 발행기 기본 클래스"""

    def publish_lock(self) -> ContextManager:
        """스냅샷 조회부터 발행까지 감싸는 잠금 (프로세스 내부)"""
        return _snapshot_lock

    def next_sequence(self) -> int:
        """다음 sequence 번호를 반환합니다."""
        return next(_local_sequence)

    def publish(self, message: Dict[str, Any]) -> None:
        """메시지를 구독자에게 전달합니다."""
        raise NotImplementedError

    def broadcast_catalog(self, event: CatalogEvent, db: Session) -> Optional[int]:
        """
        현재 커밋된 카탈로그 전체를 조회하여 발행합니다.

        반드시 트랜잭션 커밋 이후에 호출해야 합니다. 발행 실패는 로그만 남기고
        None을 반환합니다 (이미 커밋된 변경을 실패로 만들지 않음).

        Args:
            event: 이벤트 라벨 (stock_updated / products_updated)
            db: DB 세션

        Returns:
            발행한 메시지의 sequence, 실패 시 None
        """
        try:
            with self.publish_lock():
                products = CatalogService.list_products_payload(db)
                sequence = self.next_sequence()
                self.publish(build_message(event, sequence, products))
        except Exception:
            logger.exception("catalog_publish_failed", catalog_event=CatalogEvent(event).value)
            return None

        logger.info(
            "catalog_published",
            catalog_event=CatalogEvent(event).value,
            sequence=sequence,
            products=len(products),
        )
        return sequence


class RedisCatalogPublisher(CatalogPublisher):
    """Redis pub/sub 채널로 발행하는 발행기"""

    def __init__(self, redis: Redis, channel: str):
        self.redis = redis
        self.channel = channel

    @property
    def sequence_key(self) -> str:
        return f"{self.channel}:sequence"

    @property
    def lock_key(self) -> str:
        return f"{self.channel}:publish"

    def publish_lock(self) -> ContextManager:
        """
        여러 API 프로세스에 걸친 발행 잠금

        다른 프로세스가 스냅샷 조회와 INCR 사이에 끼어들면 더 오래된 목록이
        더 큰 sequence로 발행되므로, 세 단계를 Redis 잠금 안에서 수행합니다.
        잠금을 얻지 못하면 redis.exceptions.LockError가 발생합니다.
        """
        return self.redis.lock(
            self.lock_key,
            timeout=PUBLISH_LOCK_TIMEOUT,
            blocking_timeout=PUBLISH_LOCK_WAIT,
        )

    def next_sequence(self) -> int:
        """여러 프로세스가 공유하는 sequence (Redis INCR)"""
        return int(self.redis.incr(self.sequence_key))

    def publish(self, message: Dict[str, Any]) -> None:
        receivers = self.redis.publish(self.channel, json.dumps(message))
        logger.debug("redis_published", channel=self.channel, receivers=receivers)


class LocalCatalogPublisher(CatalogPublisher):
    """
    단일 프로세스용 발행기

    threadpool에서 실행되는 동기 라우트가 이벤트 루프의 ConnectionManager로
    메시지를 넘깁니다.
    """

    def __init__(self, manager: ConnectionManager = connection_manager):
        self.manager = manager

    def publish(self, message: Dict[str, Any]) -> None:
        try:
            anyio.from_thread.run(self.manager.broadcast, message)
        except RuntimeError:
            # 이벤트 루프 밖(스크립트, 단위 테스트)에서는 전달할 구독자가 없음
            logger.debug("no_event_loop_for_broadcast", sequence=message.get("sequence"))


def get_publisher(
    settings: Settings = Depends(get_settings),
) -> Generator[CatalogPublisher, None, None]:
    """
    FastAPI 의존성 주입용 발행기 생성 함수

    Args:
        settings: 애플리케이션 설정 (broadcast_backend로 구현 선택)

    Yields:
        CatalogPublisher 인스턴스
    """
    if settings.broadcast_backend == "local":
        yield LocalCatalogPublisher(connection_manager)
        return

    client = create_redis_client(settings)
    try:
        yield RedisCatalogPublisher(client, settings.broadcast_channel)
    finally:
        client.close()
