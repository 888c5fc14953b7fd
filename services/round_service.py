"""
回合控制服務：開始 / 清除回合並通知所有人

websocket 的 startRound / clearRecords 與 HTTP 的主持人 endpoint 共用，
確保兩條路徑的廣播順序一致：
- 先送 buzzUpdate（空排行），再送一次性的 roundStarted / recordsCleared
"""
from core.game_manager import BuzzerGame
from services.broadcast_service import BroadcastHub


async def start_round(game: BuzzerGame, hub: BroadcastHub) -> None:
    """
    開始（或重新開始）回合

    注意：
        呼叫者必須已持有 hub.lock
    """
    records = game.start_round()
    await hub.notify_ledger(records)
    await hub.notify_round_started()


async def clear_round(game: BuzzerGame, hub: BroadcastHub) -> None:
    """
    清除紀錄並回到等待狀態

    注意：
        呼叫者必須已持有 hub.lock
    """
    records = game.clear_round()
    await hub.notify_ledger(records)
    await hub.notify_records_cleared()
