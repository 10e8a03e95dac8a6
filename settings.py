"""
設定層

所有可調整的常數集中在這裡，透過環境變數（前綴 DEADMANS_TIP_）或 .env 覆寫
金額單位一律是 wei（最小貨幣單位），遊戲引擎只做整數運算
"""
from functools import lru_cache
from typing import Optional

from pydantic import PositiveInt
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Base Sepolia testnet amounts
    pass_burn_amount: PositiveInt = 500_000_000_000_000  # 0.0005 ETH
    grit_bonus_amount: PositiveInt = 1_000_000_000_000_000  # 0.001 ETH
    # 只用在說明文字，引擎不強制最低金額
    entry_fee_hint: PositiveInt = 1_000_000_000_000_000  # 0.001 ETH

    bot_id: Optional[str] = None
    webhook_secret: Optional[str] = None

    currency_symbol: str = "$"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "DEADMANS_TIP_"


@lru_cache()
def get_settings():
    return Settings()
