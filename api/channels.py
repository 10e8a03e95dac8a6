"""
Channel API Endpoints（唯讀）

職責：
1. 查詢頻道內的遊戲狀態
2. 列出 bot 註冊的 slash commands
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
import logging

from schemas import CommandDescriptor, CommandKind, StatusResult
from core.exceptions import NoGameInProgress
from core.game_manager import GameManager
from api.dependencies import get_game_manager

router = APIRouter(prefix="/api", tags=["channels"])
logger = logging.getLogger(__name__)

SLASH_COMMANDS = [
    CommandDescriptor(name="help", description="Get help with bot commands", kind=CommandKind.HELP),
    CommandDescriptor(name="join-game", description="Join the Deadman's Tip game (tip the bot to enter)", kind=CommandKind.JOIN_INFO),
    CommandDescriptor(name="start-game", description="Start the game with current players", kind=CommandKind.START),
    CommandDescriptor(name="shoot", description="Pull the trigger (your turn)", kind=CommandKind.SHOOT),
    CommandDescriptor(name="pass", description="Pass your turn (burns part of the pot)", kind=CommandKind.PASS),
    CommandDescriptor(name="game-status", description="Check current game status", kind=CommandKind.STATUS),
]


@router.get("/channels/{channel_id}/status", response_model=StatusResult)
def get_channel_status(channel_id: str, manager: GameManager = Depends(get_game_manager)):
    """
    查詢頻道的遊戲狀態

    異常：
        404: 頻道內沒有遊戲（包含剛結束被移除的）
    """
    try:
        return manager.get_status(channel_id)
    except NoGameInProgress:
        raise HTTPException(status_code=404, detail="No game in progress")
    except Exception as e:
        logger.error(f"Failed to get status for channel {channel_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/commands", response_model=List[CommandDescriptor])
def list_commands():
    return SLASH_COMMANDS
