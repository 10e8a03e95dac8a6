"""
Webhook Endpoints

職責：
1. 接收 tip 事件（入場）
2. 接收 slash command 事件（開始、開槍、pass、狀態、說明）

被拒絕的動作（輪不到你、人數不足…）仍回 200，result.success = False；
只有內部錯誤才回 500。訊息文字在頻道鎖釋放後才組出來。
"""
from fastapi import APIRouter, Depends, HTTPException
import logging

from schemas import CommandEvent, DepositEvent, WebhookResponse
from settings import Settings
from core.dispatcher import dispatch_command, dispatch_deposit
from core.game_manager import GameManager
from services.message_service import render_result
from services.turn_service import identities_match
from api.dependencies import get_app_settings, get_game_manager, verify_webhook_secret

router = APIRouter(
    prefix="/webhook",
    tags=["webhook"],
    dependencies=[Depends(verify_webhook_secret)],
)
logger = logging.getLogger(__name__)


@router.post("/tips", response_model=WebhookResponse)
def receive_tip(
    event: DepositEvent,
    manager: GameManager = Depends(get_game_manager),
    settings: Settings = Depends(get_app_settings),
):
    """
    收到 tip（入場存款）

    流程：
    1. 只處理給 bot 的 tip（有設定 bot_id 時）
    2. 交給 GameManager 入場
    3. 組出回覆訊息

    返回：
        - handled: 是否處理了這個事件
        - result: 引擎結果
        - text: 要送回頻道的訊息
    """
    # 1. 不是給 bot 的 tip 直接忽略
    if settings.bot_id and not identities_match(event.receiver_address or "", settings.bot_id):
        logger.info(
            f"Ignoring tip in channel {event.channel_id} addressed to {event.receiver_address}"
        )
        return WebhookResponse(handled=False)

    try:
        # 2. 入場
        result = dispatch_deposit(manager, event)
    except Exception as e:
        logger.error(f"Failed to handle tip: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")

    # 3. 鎖已釋放，組訊息
    return WebhookResponse(
        handled=True,
        result=result.model_dump(mode="json"),
        text=render_result(result, settings.currency_symbol),
    )


@router.post("/commands", response_model=WebhookResponse)
def receive_command(
    event: CommandEvent,
    manager: GameManager = Depends(get_game_manager),
    settings: Settings = Depends(get_app_settings),
):
    """
    收到 slash command

    參數：
        event.kind: join-info / start / shoot / pass / status / help
        event.channel_id: 頻道 ID
        event.acting_identity: 下指令的玩家
    """
    try:
        result = dispatch_command(manager, event)
    except Exception as e:
        logger.error(
            f"Failed to handle /{event.kind.value} in channel {event.channel_id}: {e}",
            exc_info=True,
        )
        raise HTTPException(status_code=500, detail="Internal error")

    return WebhookResponse(
        handled=True,
        result=result.model_dump(mode="json"),
        text=render_result(result, settings.currency_symbol),
    )
