"""
Redis 채널 → WebSocket 중계기

앱 lifespan 동안 Redis 채널을 구독하고, 받은 메시지를 이 프로세스의
ConnectionManager로 전달합니다. Redis 연결이 끊기면 대기 후 다시 구독합니다.
"""

import asyncio
import json
from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from shoestore.broadcast.manager import ConnectionManager
from shoestore.core.config import Settings
from shoestore.core.logging import get_logger
from shoestore.db.redis_client import create_async_redis_client

logger = get_logger(__name__)


class CatalogRelay:
    """Redis pub/sub 구독 후 WebSocket 구독자에게 중계"""

    def __init__(
        self,
        settings: Settings,
        manager: ConnectionManager,
        reconnect_delay: float = 1.0,
        max_reconnect_delay: float = 30.0,
    ):
        self.settings = settings
        self.manager = manager
        self.reconnect_delay = reconnect_delay
        self.max_reconnect_delay = max_reconnect_delay
        self._client: Optional[aioredis.Redis] = None
        self._pubsub = None
        self._task: Optional[asyncio.Task] = None

    @property
    def channel(self) -> str:
        return self.settings.broadcast_channel

    async def start(self) -> None:
        """채널을 구독하고 수신 태스크를 시작합니다."""
        self._client = create_async_redis_client(self.settings)
        await self._subscribe()

        self._task = asyncio.create_task(self._listen())
        self._task.add_done_callback(self._on_listener_done)
        logger.info("catalog_relay_started", channel=self.channel)

    async def _subscribe(self) -> None:
        pubsub = self._client.pubsub(ignore_subscribe_messages=True)
        await pubsub.subscribe(self.channel)
        self._pubsub = pubsub

    async def _close_pubsub(self) -> None:
        pubsub, self._pubsub = self._pubsub, None
        if pubsub is None:
            return
        try:
            await pubsub.aclose()
        except RedisError as e:
            logger.debug("catalog_relay_pubsub_close_failed", error=str(e))

    async def _listen(self) -> None:
        delay = self.reconnect_delay
        while True:
            try:
                if self._pubsub is None:
                    await self._subscribe()
                    logger.info("catalog_relay_resubscribed", channel=self.channel)

                async for message in self._pubsub.listen():
                    delay = self.reconnect_delay
                    if message.get("type") != "message":
                        continue
                    await self.handle_raw(message["data"])
                return
            except (RedisConnectionError, RedisTimeoutError) as e:
                logger.warning(
                    "catalog_relay_disconnected",
                    channel=self.channel,
                    error=str(e),
                    retry_in=delay,
                )
                await self._close_pubsub()
                await asyncio.sleep(delay)
                delay = min(delay * 2, self.max_reconnect_delay)

    def _on_listener_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "catalog_relay_listener_failed",
                channel=self.channel,
                error=repr(error),
            )
        else:
            logger.warning("catalog_relay_listener_exited", channel=self.channel)

    async def handle_raw(self, data: str) -> int:
        """
        수신한 원문 메시지를 파싱하여 브로드캐스트합니다.

        Args:
            data: JSON 문자열

        Returns:
            전송한 연결 수 (파싱 실패 시 0)
        """
        try:
            payload = json.loads(data)
        except ValueError:
            logger.error("catalog_relay_invalid_message", data=data[:200])
            return 0
        return await self.manager.broadcast(payload)

    async def stop(self) -> None:
        """수신 태스크를 취소하고 연결을 닫습니다."""
        if self._task:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)

        if self._pubsub is not None:
            try:
                await self._pubsub.unsubscribe(self.channel)
            except RedisError as e:
                logger.debug("catalog_relay_unsubscribe_failed", error=str(e))
            await self._close_pubsub()

        if self._client is not None:
            await self._client.aclose()

        logger.info("catalog_relay_stopped")
