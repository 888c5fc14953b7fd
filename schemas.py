"""
API 輸入 / 輸出格式（Pydantic）
"""
from typing import Any, List, Optional

from pydantic import BaseModel

from models import GameSnapshot, SignalType


class InboundMessage(BaseModel):
    """websocket 收到的訊息：{"event": "register", "data": "Alice"}"""
    event: SignalType
    data: Any = None


class BuzzRecordResponse(BaseModel):
    name: str
    time: int
    timestamp: int


class StateResponse(BaseModel):
    records: List[BuzzRecordResponse]
    guest_count: int
    round_active: bool
    started_at: Optional[int] = None

    @classmethod
    def from_snapshot(cls, snapshot: GameSnapshot) -> "StateResponse":
        return cls(
            records=[BuzzRecordResponse(**r.to_wire()) for r in snapshot.records],
            guest_count=snapshot.guest_count,
            round_active=snapshot.round_active,
            started_at=snapshot.started_at,
        )


class PlayersResponse(BaseModel):
    count: int
    names: List[str]


class QRCodeResponse(BaseModel):
    qrcode: str
    url: str


class ActionResponse(BaseModel):
    status: str
