"""
廣播服務：把狀態變化推送給所有連線（BroadcastHub）

本身沒有任何遊戲規則，只負責：
- 管理目前連線中的 websocket
- 廣播（所有人）與單播（只回給發送者）
- 事件名稱與 payload 格式，沿用前端頁面的 socket 事件

每一則訊息都是 {"event": <事件名稱>, "data": <payload>}。
"""
from typing import Any, Dict, Iterable, List, Union
import asyncio
import logging

from fastapi import WebSocket

from models import BuzzAccepted, BuzzRecord, ClientSession, GameSnapshot
from core.exceptions import BuzzerGameException

logger = logging.getLogger(__name__)


# ============ 事件名稱 ============

EVENT_REGISTERED = "registered"
EVENT_GUEST_COUNT = "guestCount"
EVENT_BUZZ_RESULT = "buzzResult"
EVENT_BUZZ_UPDATE = "buzzUpdate"
EVENT_ROUND_STARTED = "roundStarted"
EVENT_RECORDS_CLEARED = "recordsCleared"
EVENT_ROUND_STATE = "roundState"
EVENT_ERROR = "error"


def serialize_records(records: Iterable[BuzzRecord]) -> List[Dict[str, Any]]:
    return [r.to_wire() for r in records]


class BroadcastHub:
    """websocket 連線池 + 廣播"""

    def __init__(self):
        self._sessions: Dict[str, ClientSession] = {}
        # 「修改狀態 + 廣播」整段在這把鎖內，觀察者收到的 snapshot 順序與修改順序一致
        self.lock = asyncio.Lock()

    # ============ 連線管理 ============

    async def connect(self, websocket: WebSocket) -> ClientSession:
        await websocket.accept()
        session = ClientSession(websocket)
        self._sessions[session.id] = session
        logger.info(f"User connected: {session.id}")
        return session

    def disconnect(self, session: ClientSession) -> None:
        if self._sessions.pop(session.id, None) is not None:
            logger.info(f"User disconnected: {session.id}")

    @property
    def connection_count(self) -> int:
        return len(self._sessions)

    # ============ 傳送 ============

    async def send(self, session: ClientSession, event: str, data: Any = None) -> bool:
        """
        單播給一條連線

        傳送失敗時把連線移出連線池並返回 False，不往上拋，
        同一個事件後續的廣播照常送出。
        """
        try:
            await session.websocket.send_json({"event": event, "data": data})
        except Exception as e:
            logger.warning(f"Dropping connection {session.id} after failed send: {e}")
            self.disconnect(session)
            return False
        return True

    async def broadcast(self, event: str, data: Any = None) -> None:
        """
        廣播給所有連線

        傳送失敗的連線直接移出連線池，之後由該連線自己的斷線流程清理登記。
        """
        for session in list(self._sessions.values()):
            await self.send(session, event, data)

    # ============ 廣播事件 ============

    async def notify_guest_count(self, count: int) -> None:
        await self.broadcast(EVENT_GUEST_COUNT, count)

    async def notify_ledger(self, records: Iterable[BuzzRecord]) -> None:
        await self.broadcast(EVENT_BUZZ_UPDATE, serialize_records(records))

    async def notify_round_started(self) -> None:
        await self.broadcast(EVENT_ROUND_STARTED)

    async def notify_records_cleared(self) -> None:
        await self.broadcast(EVENT_RECORDS_CLEARED)

    # ============ 單播回覆 ============

    async def reply_registered(
        self,
        session: ClientSession,
        result: Union[str, BuzzerGameException],
    ) -> None:
        if isinstance(result, BuzzerGameException):
            payload = {"success": False, "message": result.message}
        else:
            payload = {"success": True, "name": result}
        await self.send(session, EVENT_REGISTERED, payload)

    async def reply_to_submitter(
        self,
        session: ClientSession,
        result: Union[BuzzAccepted, BuzzerGameException],
    ) -> None:
        if isinstance(result, BuzzerGameException):
            payload = {"success": False, "message": result.message}
        else:
            payload = {"success": True, "position": result.rank}
        await self.send(session, EVENT_BUZZ_RESULT, payload)

    async def reply_state(self, session: ClientSession, snapshot: GameSnapshot) -> None:
        """讓晚加入的主持人頁面不用等下一次變化就能同步"""
        await self.send(session, EVENT_BUZZ_UPDATE, serialize_records(snapshot.records))
        await self.send(session, EVENT_GUEST_COUNT, snapshot.guest_count)
        await self.send(session, EVENT_ROUND_STATE, snapshot.round_active)

    async def reply_error(self, session: ClientSession, message: str) -> None:
        await self.send(session, EVENT_ERROR, {"message": message})


hub = BroadcastHub()


def get_hub() -> BroadcastHub:
    """FastAPI dependency：提供全域的廣播中心"""
    return hub
