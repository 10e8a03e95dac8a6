"""
狀態機：集中管理遊戲狀態轉換

合法轉換只有兩條：
    WAITING -> ACTIVE -> FINISHED

GameManager 在呼叫 transition() 之前已經檢查過狀態並拋出 WrongGameStatus，
所以這裡失敗代表程式邏輯錯誤（InvalidStateTransition）。
"""
import logging
from typing import Dict, FrozenSet

from models import GameState, GameStatus
from core.exceptions import InvalidStateTransition

logger = logging.getLogger(__name__)


class GameStateMachine:
    TRANSITIONS: Dict[GameStatus, FrozenSet[GameStatus]] = {
        GameStatus.WAITING: frozenset({GameStatus.ACTIVE}),
        GameStatus.ACTIVE: frozenset({GameStatus.FINISHED}),
        GameStatus.FINISHED: frozenset(),
    }

    @classmethod
    def can_transition(cls, current: GameStatus, target: GameStatus) -> bool:
        return target in cls.TRANSITIONS[current]

    @classmethod
    def transition(cls, game: GameState, target: GameStatus) -> GameState:
        if not cls.can_transition(game.status, target):
            raise InvalidStateTransition(
                f"Cannot transition game in channel {game.channel_id} "
                f"from {game.status.value} to {target.value}"
            )

        logger.info(
            f"Channel {game.channel_id}: {game.status.value} -> {target.value}"
        )
        game.status = target
        return game
