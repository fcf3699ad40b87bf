"""
ConnectionManager 테스트

가짜 WebSocket으로 구독자 관리와 sequence 기반 중복/역순 메시지 차단을 검증합니다.
"""

import pytest

from shoestore.broadcast.events import CatalogEvent, build_message
from shoestore.broadcast.manager import ConnectionManager


class FakeWebSocket:
    """send_json 호출을 기록하는 가짜 WebSocket"""

    def __init__(self, fail=False):
        self.accepted = False
        self.sent = []
        self.fail = fail

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)


def _message(sequence, event=CatalogEvent.STOCK_UPDATED):
    return build_message(event, sequence, [{"id": 1, "sizes": []}])


class TestConnectionManager:
    """ConnectionManager 테스트 클래스"""

    @pytest.mark.asyncio
    async def test_broadcast_to_all_subscribers(self):
        manager = ConnectionManager()
        first, second = FakeWebSocket(), FakeWebSocket()
        await manager.connect(first)
        await manager.connect(second)

        sent = await manager.broadcast(_message(1))

        assert sent == 2
        assert first.accepted and second.accepted
        assert first.sent == second.sent == [_message(1)]

    @pytest.mark.asyncio
    async def test_stale_sequence_dropped(self):
        """이미 전달한 sequence 이하의 메시지는 전송하지 않음"""
        manager = ConnectionManager()
        websocket = FakeWebSocket()
        await manager.connect(websocket)

        await manager.broadcast(_message(5))
        assert await manager.broadcast(_message(4)) == 0
        assert await manager.broadcast(_message(5)) == 0
        await manager.broadcast(_message(6, CatalogEvent.PRODUCTS_UPDATED))

        assert [message["sequence"] for message in websocket.sent] == [5, 6]
        assert manager.last_sequence == 6

    @pytest.mark.asyncio
    async def test_failed_connection_removed(self):
        """전송에 실패한 연결은 구독자에서 제거"""
        manager = ConnectionManager()
        healthy, broken = FakeWebSocket(), FakeWebSocket(fail=True)
        await manager.connect(healthy)
        await manager.connect(broken)

        sent = await manager.broadcast(_message(1))

        assert sent == 1
        assert manager.get_stats()["total_connections"] == 1

    @pytest.mark.asyncio
    async def test_no_replay_for_late_subscriber(self):
        """늦게 연결한 구독자는 이전 메시지를 받지 않음"""
        manager = ConnectionManager()
        early = FakeWebSocket()
        await manager.connect(early)
        await manager.broadcast(_message(1))

        late = FakeWebSocket()
        await manager.connect(late)

        assert late.sent == []

    @pytest.mark.asyncio
    async def test_disconnect(self):
        manager = ConnectionManager()
        websocket = FakeWebSocket()
        await manager.connect(websocket)

        manager.disconnect(websocket)
        manager.disconnect(websocket)

        assert manager.get_stats() == {"total_connections": 0, "last_sequence": 0}


def test_build_message():
    message = build_message("products_updated", 3, [])

    assert message == {"event": "products_updated", "sequence": 3, "products": []}
