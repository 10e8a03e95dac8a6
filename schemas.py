"""
Pydantic schemas：進來的事件與出去的結果

事件由 transport 送進來（tip、slash command），結果由引擎回傳，
再交給 message_service 轉成聊天訊息。每個結果都帶 success，
被拒絕時另外帶 reason（固定代碼）、detail（說明）、context（結構化欄位）。
"""
import enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, PositiveInt

from models import GameStatus, ShotOutcome


class CommandKind(str, enum.Enum):
    JOIN_INFO = "join-info"
    START = "start"
    SHOOT = "shoot"
    PASS = "pass"
    STATUS = "status"
    HELP = "help"


DEPOSIT_KIND = "deposit"


# ============ Inbound ============

class DepositEvent(BaseModel):
    channel_id: str = Field(..., min_length=1)
    sender_identity: str = Field(..., min_length=1)
    sender_payout_address: str = Field(..., min_length=1)
    amount: PositiveInt
    receiver_address: Optional[str] = None


class CommandEvent(BaseModel):
    kind: CommandKind
    channel_id: str = Field(..., min_length=1)
    acting_identity: str = Field(..., min_length=1)


# ============ Outbound ============

class CommandResult(BaseModel):
    kind: str
    success: bool = True
    reason: Optional[str] = None
    detail: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)


class RejectedResult(CommandResult):
    success: bool = False


class EnrollmentResult(CommandResult):
    kind: str = DEPOSIT_KIND
    identity: str
    amount: int
    player_count: int
    pot_balance: int


class StartResult(CommandResult):
    kind: str = CommandKind.START.value
    turn_order: List[str]
    current_player: str
    player_count: int
    pot_balance: int


class ShootResult(CommandResult):
    kind: str = CommandKind.SHOOT.value
    identity: str
    outcome: ShotOutcome
    grit_bonus: int = 0
    pot_balance: int
    alive_count: int
    next_player: Optional[str] = None
    finished: bool = False
    winner: Optional[str] = None
    payout: Optional[int] = None


class PassResult(CommandResult):
    kind: str = CommandKind.PASS.value
    identity: str
    burned: int
    pot_balance: int
    next_player: str
    forced_shoot: bool = False


class StatusResult(CommandResult):
    kind: str = CommandKind.STATUS.value
    status: GameStatus
    pot_balance: int
    player_count: int
    players: List[str] = Field(default_factory=list)
    alive_count: Optional[int] = None
    current_player: Optional[str] = None
    winner: Optional[str] = None
    payout: Optional[int] = None


class InfoResult(CommandResult):
    entry_fee_hint: int
    pass_burn_amount: int
    grit_bonus_amount: int


# ============ HTTP ============

class WebhookResponse(BaseModel):
    handled: bool
    result: Optional[Dict[str, Any]] = None
    text: Optional[str] = None


class CommandDescriptor(BaseModel):
    name: str
    description: str
    kind: CommandKind
