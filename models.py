"""
資料模型

全部狀態都在記憶體內，程序重啟即歸零，所以不需要 ORM。
"""
import enum
import uuid
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class RoundStatus(str, enum.Enum):
    IDLE = "IDLE"
    ACTIVE = "ACTIVE"


class SignalType(str, enum.Enum):
    """前端送來的所有事件（封閉集合）"""
    REGISTER = "register"
    BUZZ = "buzz"
    START_ROUND = "startRound"
    CLEAR_RECORDS = "clearRecords"
    GET_STATE = "getState"


class DuplicateNamePolicy(str, enum.Enum):
    REJECT = "reject"
    TAKEOVER = "takeover"


class BuzzRecord(BaseModel):
    """
    一筆搶答紀錄（建立後不可修改）

    欄位：
        name: 參賽者名稱
        elapsed_ms: 距離回合開始的毫秒數
        timestamp: 搶答當下的 epoch 毫秒
    """
    model_config = ConfigDict(frozen=True)

    name: str
    elapsed_ms: int
    timestamp: int

    def to_wire(self) -> dict:
        # 主持人頁面沿用 {name, time, timestamp} 格式
        return {"name": self.name, "time": self.elapsed_ms, "timestamp": self.timestamp}


class BuzzAccepted(BaseModel):
    model_config = ConfigDict(frozen=True)

    record: BuzzRecord
    rank: int
    records: Tuple[BuzzRecord, ...]


class GameSnapshot(BaseModel):
    """某一瞬間的完整遊戲狀態（唯讀）"""
    model_config = ConfigDict(frozen=True)

    records: Tuple[BuzzRecord, ...]
    guest_count: int
    round_active: bool
    started_at: Optional[int] = None


class ClientSession:
    """
    一條 websocket 連線

    guest_name 只是登記成功後的快取，名稱真正屬於誰以 Registry 為準。
    """

    def __init__(self, websocket=None, session_id: Optional[str] = None):
        self.id = session_id or uuid.uuid4().hex
        self.websocket = websocket
        self.guest_name: Optional[str] = None

    def __repr__(self):
        return f"<ClientSession {self.id} guest={self.guest_name!r}>"
