"""
WebSocket 연결 관리자

현재 연결된 모든 클라이언트에게 카탈로그 메시지를 전달합니다.
늦게 연결한 클라이언트를 위한 재전송(backlog)은 없으며, 연결 직후
GET /api/products로 직접 전체 목록을 받아야 합니다.
"""

from typing import Any, Dict, Optional, Set

from fastapi import WebSocket

from shoestore.core.logging import get_logger

logger = get_logger(__name__)


class ConnectionManager:
    """WebSocket 구독자 집합 관리자"""

    def __init__(self):
        # 연결 추가/삭제는 connect/disconnect에서만, 읽기는 broadcast마다
        self._connections: Set[WebSocket] = set()

        # 마지막으로 전달한 메시지의 sequence (오래된 상태 재전송 방지)
        self._last_sequence: int = 0

    @property
    def last_sequence(self) -> int:
        return self._last_sequence

    async def connect(self, websocket: WebSocket) -> None:
        """
        새 WebSocket 연결을 수락하고 구독자로 등록합니다.

        Args:
            websocket: WebSocket 연결 객체
        """
        await websocket.accept()
        self._connections.add(websocket)

        logger.info("websocket_connected", total_connections=len(self._connections))

    def disconnect(self, websocket: WebSocket) -> None:
        """
        WebSocket 연결을 구독자에서 제거합니다.

        Args:
            websocket: 끊어진 WebSocket 연결
        """
        if websocket not in self._connections:
            return

        self._connections.discard(websocket)

        logger.info(
            "websocket_disconnected", total_connections=len(self._connections)
        )

    async def broadcast(self, message: Dict[str, Any]) -> int:
        """
        모든 연결에 메시지를 전송합니다.

        sequence가 이미 전달한 값보다 크지 않으면 전송하지 않습니다.
        전송에 실패한 연결은 구독자에서 제거합니다.

        Args:
            message: build_message()로 만든 메시지

        Returns:
            성공적으로 전송한 연결 수
        """
        sequence: Optional[int] = message.get("sequence")
        if sequence is not None:
            if sequence <= self._last_sequence:
                logger.debug(
                    "stale_broadcast_dropped",
                    sequence=sequence,
                    last_sequence=self._last_sequence,
                )
                return 0
            self._last_sequence = sequence

        sent_count = 0
        failed_connections = []

        for websocket in list(self._connections):
            try:
                await websocket.send_json(message)
                sent_count += 1
            except Exception as e:
                logger.error("websocket_send_failed", error=str(e))
                failed_connections.append(websocket)

        for websocket in failed_connections:
            self.disconnect(websocket)

        logger.info(
            "catalog_broadcast",
            catalog_event=message.get("event"),
            sequence=sequence,
            sent=sent_count,
        )
        return sent_count

    def get_stats(self) -> Dict[str, Any]:
        """
        연결 통계 정보를 반환합니다.

        Returns:
            {"total_connections": int, "last_sequence": int}
        """
        return {
            "total_connections": len(self._connections),
            "last_sequence": self._last_sequence,
        }


# 전역 인스턴스
connection_manager = ConnectionManager()
