"""
Round API Endpoints（主持人用）

重點：
1. 與 websocket 事件共用 round_service，廣播內容與順序完全一致
2. /state 讓不方便開 websocket 的頁面也能輪詢目前排行
"""
from fastapi import APIRouter, Depends

import logging

from schemas import ActionResponse, StateResponse
from core.game_manager import BuzzerGame, get_game
from services.broadcast_service import BroadcastHub, get_hub
from services import round_service

router = APIRouter(prefix="/api", tags=["rounds"])
logger = logging.getLogger(__name__)


@router.get("/state", response_model=StateResponse)
def get_state(game: BuzzerGame = Depends(get_game)):
    """
    取得目前狀態

    返回：
        - records: 依名次排序的搶答紀錄
        - guest_count: 登記人數
        - round_active: 回合是否進行中
        - started_at: 回合開始時間（epoch 毫秒）
    """
    return StateResponse.from_snapshot(game.snapshot())


@router.post("/rounds/start", response_model=ActionResponse)
async def start_round(
    game: BuzzerGame = Depends(get_game),
    hub: BroadcastHub = Depends(get_hub),
):
    """
    開始回合（Host endpoint）

    效果：
    - 任何狀態 -> ACTIVE，清空排行
    - 廣播 buzzUpdate [] 與 roundStarted
    """
    async with hub.lock:
        await round_service.start_round(game, hub)

    logger.info("Round started via HTTP")
    return ActionResponse(status="ok")


@router.post("/rounds/clear", response_model=ActionResponse)
async def clear_round(
    game: BuzzerGame = Depends(get_game),
    hub: BroadcastHub = Depends(get_hub),
):
    """
    清除紀錄（Host endpoint）

    效果：
    - 任何狀態 -> IDLE，清空排行
    - 廣播 buzzUpdate [] 與 recordsCleared
    """
    async with hub.lock:
        await round_service.clear_round(game, hub)

    logger.info("Records cleared via HTTP")
    return ActionResponse(status="ok")
