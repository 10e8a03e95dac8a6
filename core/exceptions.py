"""
自定義異常類別

兩種完全不同的錯誤：
- DeadmansTipException：預期中的拒絕（輪不到你、人數不足…），
  由 dispatcher 轉成 success=False 的結果回給玩家，不會讓程式崩潰
- GameInvariantViolation：內部狀態不一致（例如 ACTIVE 但沒有存活玩家），
  代表程式有 bug，一路往上拋，由 API 層記錄並回 500

所有拒絕都在任何修改之前拋出，所以 GameState 不會留下半套變更。
"""
from typing import Any, Dict


class DeadmansTipException(Exception):
    """所有遊戲拒絕的基類"""
    reason = "rejected"

    def __init__(self, message: str, **context: Any):
        self.context: Dict[str, Any] = context
        super().__init__(message)


# ============ Game 存在 / 狀態 ============

class NoGameInProgress(DeadmansTipException):
    """頻道內沒有遊戲"""
    reason = "no_game_in_progress"

    def __init__(self, channel_id):
        self.channel_id = channel_id
        super().__init__(f"No game in progress in channel {channel_id}")


class WrongGameStatus(DeadmansTipException):
    """遊戲狀態不符合這個動作的要求"""
    reason = "wrong_game_status"

    def __init__(self, status, expected):
        self.status = status
        self.expected = expected
        super().__init__(
            f"Game is already {status.value}",
            status=status.value,
            expected=expected.value,
        )


class NotEnoughPlayers(DeadmansTipException):
    """開始遊戲至少需要 2 位玩家"""
    reason = "not_enough_players"

    def __init__(self, player_count, required):
        self.player_count = player_count
        self.required = required
        super().__init__(
            f"Need at least {required} players to start, got {player_count}",
            player_count=player_count,
            required=required,
        )


# ============ Enrollment ============

class InvalidDepositAmount(DeadmansTipException):
    """入場金額必須是正整數（wei）"""
    reason = "invalid_deposit_amount"

    def __init__(self, amount):
        self.amount = amount
        super().__init__(f"Deposit amount must be a positive integer, got {amount!r}")


class DuplicateEnrollment(DeadmansTipException):
    """同一個 identity 或收款地址已經加入過"""
    reason = "duplicate_enrollment"

    def __init__(self, identity):
        self.identity = identity
        super().__init__(f"Player {identity} already joined", identity=identity)


# ============ Turn ============

class NotYourTurn(DeadmansTipException):
    """不是這位玩家的回合"""
    reason = "not_your_turn"

    def __init__(self, identity, current_player):
        self.identity = identity
        self.current_player = current_player
        super().__init__(
            f"Not {identity}'s turn, waiting on {current_player}",
            identity=identity,
            current_player=current_player,
        )


class AlreadyEliminated(DeadmansTipException):
    """玩家已被淘汰（照理不會發生，但要安全失敗）"""
    reason = "already_eliminated"

    def __init__(self, identity):
        self.identity = identity
        super().__init__(f"Player {identity} is already eliminated", identity=identity)


class MustShoot(DeadmansTipException):
    """其他存活玩家都 pass 了，這位玩家只能開槍"""
    reason = "must_shoot"

    def __init__(self, identity):
        self.identity = identity
        super().__init__(f"Player {identity} must shoot", identity=identity)


# ============ 內部一致性錯誤（不是拒絕） ============

class GameInvariantViolation(Exception):
    """遊戲狀態違反不變量，例如 ACTIVE 卻沒有存活玩家"""
    pass


class InvalidStateTransition(GameInvariantViolation):
    """非法的狀態轉換"""
    pass
