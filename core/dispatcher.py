"""
Dispatcher：把進來的事件交給 GameManager，並把拒絕轉成結果

- DeadmansTipException → RejectedResult(success=False, reason=...)
- GameInvariantViolation 不攔截，直接往上拋（由 API 層回 500）
"""
import logging

from schemas import (
    CommandEvent,
    CommandKind,
    CommandResult,
    DEPOSIT_KIND,
    DepositEvent,
    RejectedResult,
)
from core.exceptions import DeadmansTipException
from core.game_manager import GameManager

logger = logging.getLogger(__name__)


def rejected(kind: str, exc: DeadmansTipException) -> RejectedResult:
    return RejectedResult(
        kind=kind,
        reason=exc.reason,
        detail=str(exc),
        context=dict(exc.context),
    )


def dispatch_deposit(manager: GameManager, event: DepositEvent) -> CommandResult:
    try:
        return manager.enroll(
            event.channel_id,
            event.sender_identity,
            event.sender_payout_address,
            event.amount,
        )
    except DeadmansTipException as e:
        return rejected(DEPOSIT_KIND, e)


def dispatch_command(manager: GameManager, event: CommandEvent) -> CommandResult:
    kind = event.kind

    if kind in (CommandKind.JOIN_INFO, CommandKind.HELP):
        return manager.info(kind)

    handlers = {
        CommandKind.START: manager.start_game,
        CommandKind.SHOOT: manager.shoot,
        CommandKind.PASS: manager.pass_turn,
    }

    try:
        if kind == CommandKind.STATUS:
            return manager.get_status(event.channel_id)
        return handlers[kind](event.channel_id, event.acting_identity)
    except DeadmansTipException as e:
        return rejected(kind.value, e)
