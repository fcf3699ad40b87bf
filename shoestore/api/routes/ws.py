"""
카탈로그 WebSocket 엔드포인트

연결된 클라이언트는 커밋된 모든 변경 이후 전체 상품 목록을 수신합니다.
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from shoestore.broadcast.manager import connection_manager
from shoestore.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.websocket("/ws/catalog")
async def catalog_socket(websocket: WebSocket):
    """
    카탈로그 변경 구독

    서버 → 클라이언트:
        {"event": "stock_updated", "sequence": 12, "products": [...]}

    클라이언트 → 서버:
        "ping" → {"type": "pong"} (연결 유지 확인용, 그 외 메시지는 무시)
    """
    await connection_manager.connect(websocket)

    try:
        while True:
            text = await websocket.receive_text()
            if text == "ping":
                await websocket.send_json({"type": "pong"})

    except WebSocketDisconnect:
        logger.debug("catalog_socket_closed")

    finally:
        connection_manager.disconnect(websocket)
