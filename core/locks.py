"""
並發控制工具

共享狀態（Registry + RoundController + BuzzLedger）只有一個臨界區：
登記、搶答、開始/清除回合、斷線都必須互斥執行，
否則兩個同時的搶答可能拿到錯誤的名次，或同一人出現兩筆紀錄。

操作都是記憶體內的 dict/list 運算，一把全域鎖就夠，不需要更細的鎖。
"""
from functools import wraps
import threading


def new_state_lock() -> threading.RLock:
    """
    建立保護遊戲狀態的鎖

    使用 RLock：同一個 thread 在臨界區內呼叫另一個受保護的方法
    （例如 start_round 內取 snapshot）不會自己卡死。
    """
    return threading.RLock()


def with_state_lock(func):
    """
    讓方法整段在 self._lock 內執行

    使用方式：
        class BuzzerGame:
            def __init__(self):
                self._lock = new_state_lock()

            @with_state_lock
            def submit_buzz(self, session):
                # 檢查、插入、取 snapshot 都在同一個臨界區
                ...

    注意：
        - 被裝飾的方法不可以 await 或做 I/O，鎖內只做記憶體運算
        - 異常會原封不動往上拋（讓 API 層轉成拒絕訊息）
    """
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return func(self, *args, **kwargs)

    return wrapper
