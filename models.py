"""
資料模型：Player 與 GameState

只存在記憶體中（不做持久化），由 GameRegistry 獨占持有。
"""
import enum
from dataclasses import dataclass, field
from typing import List, Optional


class GameStatus(str, enum.Enum):
    WAITING = "waiting"
    ACTIVE = "active"
    FINISHED = "finished"


class LastAction(str, enum.Enum):
    NONE = "none"
    SHOT = "shot"
    PASSED = "passed"


class ShotOutcome(str, enum.Enum):
    BANG = "bang"    # 淘汰
    CLICK = "click"  # 存活


@dataclass
class Player:
    """
    參加者

    identity 是聊天平台的使用者 ID，payout_address 是收款帳戶，
    兩者由 transport 分別提供，不一定相同。
    """
    identity: str
    payout_address: str
    alive: bool = True
    last_action: LastAction = LastAction.NONE


@dataclass
class GameState:
    """
    單一頻道的遊戲狀態

    players 的順序就是輪流順序（加入順序），建立後不再重排；
    current_turn_index 指向「存活玩家」子序列，而不是 players 本身。
    """
    channel_id: str
    players: List[Player] = field(default_factory=list)
    pot_balance: int = 0
    current_turn_index: int = 0
    status: GameStatus = GameStatus.WAITING
    winner: Optional[str] = None

    @property
    def player_count(self) -> int:
        return len(self.players)

    def turn_order(self) -> List[str]:
        return [p.identity for p in self.players]
