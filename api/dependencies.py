"""
FastAPI dependencies

GameManager 與 Settings 由 create_app() 放在 app.state，每個 request 共用同一份。
"""
import hmac
import logging
from typing import Optional

from fastapi import Header, HTTPException, Request

from settings import Settings
from core.game_manager import GameManager

logger = logging.getLogger(__name__)


def get_game_manager(request: Request) -> GameManager:
    return request.app.state.game_manager


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def verify_webhook_secret(
    request: Request,
    x_webhook_secret: Optional[str] = Header(None),
) -> None:
    """
    驗證 webhook 來源

    settings.webhook_secret 沒設定時不檢查；
    有設定時 X-Webhook-Secret header 必須完全相同（constant-time 比較）。
    """
    secret = request.app.state.settings.webhook_secret
    if not secret:
        return
    if not hmac.compare_digest((x_webhook_secret or "").encode(), secret.encode()):
        logger.warning(f"Rejected webhook call to {request.url.path}: bad secret")
        raise HTTPException(status_code=401, detail="Invalid webhook secret")
