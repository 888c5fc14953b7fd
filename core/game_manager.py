"""
Game Manager：搶答遊戲的唯一狀態擁有者

職責：
1. 參賽者登記 / 斷線（Registry）
2. 開始 / 清除回合（RoundController）
3. 搶答排名（BuzzLedger）
4. 提供唯讀 snapshot 給廣播與查詢

原則：
- 所有修改都經過同一把鎖（core.locks.with_state_lock）
- 對外只回傳不可變的 snapshot，不暴露內部 dict/list
- 預期中的拒絕一律以 core.exceptions 拋出，由 API 層回覆給發送者
"""
from typing import List, Optional, Tuple
import logging
import time

from config import get_settings
from models import (
    BuzzAccepted,
    BuzzRecord,
    ClientSession,
    DuplicateNamePolicy,
    GameSnapshot,
)
from core.buzz_ledger import BuzzLedger
from core.exceptions import NotRegistered, RenameDuringRound
from core.locks import new_state_lock, with_state_lock
from core.registry import Registry
from core.round_controller import RoundController
from services.naming_service import normalize_display_name

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class BuzzerGame:
    """搶答遊戲狀態（整個程序只有一份）"""

    def __init__(self, policy: DuplicateNamePolicy = DuplicateNamePolicy.REJECT, clock=now_ms):
        self._lock = new_state_lock()
        self._clock = clock
        self._registry = Registry(policy)
        self._round = RoundController()
        self._ledger = BuzzLedger(self._round)

    # ============ 參賽者 ============

    @with_state_lock
    def register(self, session: ClientSession, raw_name: str) -> Tuple[str, int]:
        """
        登記名稱

        流程：
        1. 交給 Registry 驗證並登記（空白 / 重複會拋出異常）
        2. 如果這條連線之前用別的名稱登記過，釋放舊名稱
           （回合進行中不能改名，否則同一條連線可以用新名稱再搶答一次）
        3. 把名稱快取在 session 上

        返回：
            (名稱, 目前登記人數) tuple

        異常：
            ValidationRejected: 名稱為空白
            NameTaken: 名稱被其他連線佔用
            RenameDuringRound: 回合進行中更換名稱
        """
        previous = session.guest_name
        if previous and self._round.is_active() and normalize_display_name(raw_name) != previous:
            raise RenameDuringRound()

        name = self._registry.register(session.id, raw_name)

        if previous and previous != name:
            self._registry.unregister(previous, session.id)
            logger.info(f"Guest {previous!r} renamed to {name!r}")

        session.guest_name = name
        logger.info(f"Guest registered: {name}")
        return name, self._registry.count()

    @with_state_lock
    def unregister(self, session: ClientSession) -> Optional[int]:
        """
        斷線清理

        返回：
            有移除登記時返回新的登記人數，否則 None（沒登記過或名稱已被接手）
        """
        name = session.guest_name
        if not name:
            return None

        session.guest_name = None
        if not self._registry.unregister(name, session.id):
            logger.info(f"Guest {name!r} disconnected but name was already taken over")
            return None

        logger.info(f"Guest disconnected: {name}")
        return self._registry.count()

    # ============ 搶答 ============

    @with_state_lock
    def submit_buzz(self, session: ClientSession) -> BuzzAccepted:
        """
        以 session 快取的名稱搶答

        返回：
            BuzzAccepted（紀錄、名次、以及插入後的完整排行）

        異常：
            NotRegistered: 沒登記，或名稱已被其他連線接手
            NotActive: 回合尚未開始
            AlreadyBuzzed: 本回合已經搶答過
        """
        name = session.guest_name
        if not name or self._registry.connection_for(name) != session.id:
            raise NotRegistered()

        record, rank = self._ledger.submit(name, self._clock())
        logger.info(f"Buzz from {name}: {record.elapsed_ms}ms (rank {rank})")

        return BuzzAccepted(record=record, rank=rank, records=self._ledger.snapshot())

    # ============ 回合 ============

    @with_state_lock
    def start_round(self) -> Tuple[BuzzRecord, ...]:
        """開始（或重新開始）回合：換新起點並清空排行，返回清空後的排行"""
        self._round.start(self._clock())
        self._ledger.reset()
        logger.info("Round started")
        return self._ledger.snapshot()

    @with_state_lock
    def clear_round(self) -> Tuple[BuzzRecord, ...]:
        """結束回合並清空排行，之後的搶答都會被拒絕直到下次開始"""
        self._round.clear()
        self._ledger.reset()
        logger.info("Records cleared, waiting for next round")
        return self._ledger.snapshot()

    # ============ 查詢 ============

    @with_state_lock
    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            records=self._ledger.snapshot(),
            guest_count=self._registry.count(),
            round_active=self._round.is_active(),
            started_at=self._round.started_at,
        )

    @with_state_lock
    def records(self) -> Tuple[BuzzRecord, ...]:
        return self._ledger.snapshot()

    @with_state_lock
    def guest_count(self) -> int:
        return self._registry.count()

    @with_state_lock
    def guest_names(self) -> List[str]:
        return self._registry.names()

    @with_state_lock
    def is_round_active(self) -> bool:
        return self._round.is_active()


game = BuzzerGame(get_settings().duplicate_name_policy)


def get_game() -> BuzzerGame:
    """FastAPI dependency：提供全域的遊戲狀態"""
    return game
