"""
Player API Endpoints

職責：
1. 查詢目前登記的參賽者
"""
from fastapi import APIRouter, Depends

from schemas import PlayersResponse
from core.game_manager import BuzzerGame, get_game

router = APIRouter(prefix="/api", tags=["players"])


@router.get("/players", response_model=PlayersResponse)
def list_players(game: BuzzerGame = Depends(get_game)):
    """返回登記人數與名稱（依字母排序）"""
    names = game.guest_names()
    return PlayersResponse(count=len(names), names=names)
