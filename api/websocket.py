"""
WebSocket Endpoint：參賽者與主持人的即時連線

職責：
1. 接收前端事件（register / buzz / startRound / clearRecords / getState）
2. 呼叫 BuzzerGame 修改狀態
3. 透過 BroadcastHub 廣播結果或單播回覆

並發安全：
- 每個事件「修改狀態 + 廣播」整段在 hub.lock 內執行
- 斷線也是一個事件，同樣排隊執行
"""
from typing import Any
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from models import ClientSession, SignalType
from schemas import InboundMessage
from core.exceptions import BuzzerGameException
from core.game_manager import BuzzerGame, get_game
from services.broadcast_service import BroadcastHub, get_hub
from services import round_service

router = APIRouter(tags=["websocket"])
logger = logging.getLogger(__name__)


@router.websocket("/ws")
async def buzzer_websocket(
    websocket: WebSocket,
    game: BuzzerGame = Depends(get_game),
    hub: BroadcastHub = Depends(get_hub),
):
    """
    一條連線一個 session，直到斷線為止

    訊息格式：
        {"event": "register", "data": "Alice"}
        {"event": "buzz"}

    格式錯誤或未知事件只回覆 error 給發送者，連線保持開啟。
    """
    session = await hub.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = InboundMessage.model_validate_json(raw)
            except ValidationError:
                logger.warning(f"Malformed message from {session.id}: {raw[:200]!r}")
                await hub.reply_error(session, "無法辨識的訊息")
                continue

            async with hub.lock:
                await dispatch_signal(message.event, message.data, session, game, hub)

    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"WebSocket handler failed for {session.id}: {e}", exc_info=True)
        if websocket.application_state == WebSocketState.CONNECTED:
            await websocket.close(code=1011)
    finally:
        hub.disconnect(session)
        async with hub.lock:
            count = game.unregister(session)
            if count is not None:
                await hub.notify_guest_count(count)


async def dispatch_signal(
    signal: SignalType,
    data: Any,
    session: ClientSession,
    game: BuzzerGame,
    hub: BroadcastHub,
) -> None:
    """
    依事件類型分派

    注意：
        呼叫者必須已持有 hub.lock
    """
    if signal == SignalType.REGISTER:
        await handle_register(data, session, game, hub)
    elif signal == SignalType.BUZZ:
        await handle_buzz(session, game, hub)
    elif signal == SignalType.START_ROUND:
        await round_service.start_round(game, hub)
    elif signal == SignalType.CLEAR_RECORDS:
        await round_service.clear_round(game, hub)
    elif signal == SignalType.GET_STATE:
        await hub.reply_state(session, game.snapshot())
    else:
        raise ValueError(f"Unhandled signal: {signal}")


async def handle_register(data: Any, session: ClientSession, game: BuzzerGame, hub: BroadcastHub) -> None:
    try:
        name, count = game.register(session, data)
    except BuzzerGameException as e:
        logger.info(f"Registration rejected for {session.id} ({e.reason})")
        await hub.reply_registered(session, e)
        return

    await hub.reply_registered(session, name)
    await hub.notify_guest_count(count)


async def handle_buzz(session: ClientSession, game: BuzzerGame, hub: BroadcastHub) -> None:
    try:
        accepted = game.submit_buzz(session)
    except BuzzerGameException as e:
        logger.info(f"Buzz rejected for {session.guest_name or session.id} ({e.reason})")
        await hub.reply_to_submitter(session, e)
        return

    await hub.reply_to_submitter(session, accepted)
    await hub.notify_ledger(accepted.records)
