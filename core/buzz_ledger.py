"""
BuzzLedger：本回合的搶答排行

排序規則：
- 依 elapsed_ms 由小到大
- 相同毫秒時先到先排（插入在所有相同值的後面）

每位參賽者每回合只能有一筆紀錄。
"""
from bisect import bisect_right
from typing import List, Tuple

from models import BuzzRecord
from core.exceptions import NotActive, AlreadyBuzzed
from core.round_controller import RoundController


class BuzzLedger:
    """本回合搶答紀錄（永遠保持排序）"""

    def __init__(self, round_controller: RoundController):
        self.round_controller = round_controller
        self._records: List[BuzzRecord] = []

    def submit(self, name: str, now: int) -> Tuple[BuzzRecord, int]:
        """
        提交一次搶答

        流程：
        1. 回合未開始 -> NotActive
        2. 已經搶答過 -> AlreadyBuzzed
        3. 計算經過時間，依序插入，回傳名次（從 1 開始）

        參數：
            name: 參賽者名稱
            now: 目前 epoch 毫秒

        返回：
            (BuzzRecord, rank) tuple

        注意：
            - 呼叫者必須持有遊戲鎖，檢查與插入之間不能被其他提交插隊
            - 時鐘倒退時 elapsed_ms 以 0 計
        """
        if not self.round_controller.is_active():
            raise NotActive()

        if self.has_buzzed(name):
            raise AlreadyBuzzed(name)

        elapsed_ms = max(0, now - self.round_controller.started_at)
        record = BuzzRecord(name=name, elapsed_ms=elapsed_ms, timestamp=now)

        position = bisect_right([r.elapsed_ms for r in self._records], elapsed_ms)
        self._records.insert(position, record)

        return record, position + 1

    def has_buzzed(self, name: str) -> bool:
        return any(r.name == name for r in self._records)

    def reset(self) -> None:
        self._records = []

    def snapshot(self) -> Tuple[BuzzRecord, ...]:
        # BuzzRecord 是 frozen，tuple 複本不會讓外部改到排序
        return tuple(self._records)

    def __len__(self):
        return len(self._records)
