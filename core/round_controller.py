"""
RoundController：回合生命週期

狀態只有 IDLE / ACTIVE 兩種：
- start(): 任何狀態 -> ACTIVE（重新開始會換新的起點）
- clear(): 任何狀態 -> IDLE

清空搶答紀錄由 BuzzerGame 在同一個臨界區內一起完成。
"""
from typing import Optional

from models import RoundStatus


class RoundController:
    """單一、全域的回合狀態"""

    def __init__(self):
        self.status = RoundStatus.IDLE
        self._started_at: Optional[int] = None

    def start(self, now: int) -> None:
        self.status = RoundStatus.ACTIVE
        self._started_at = now

    def clear(self) -> None:
        self.status = RoundStatus.IDLE
        self._started_at = None

    def is_active(self) -> bool:
        return self.status == RoundStatus.ACTIVE

    @property
    def started_at(self) -> Optional[int]:
        return self._started_at
