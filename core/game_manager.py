"""
Game Manager：管理每個頻道遊戲的完整生命週期

職責：
1. 入場（存款事件）
2. 開始遊戲
3. 開槍 / Pass
4. 查詢狀態

原則：
- 每個操作整段在頻道鎖內：resolve → 驗證 → 修改 → 組結果
- 先驗證完所有前置條件才修改，拒絕時 GameState 完全不變
- 所有狀態變更經過 GameStateMachine
- 引擎不送訊息，只回傳結構化結果；訊息在鎖釋放後由呼叫者送出
"""
import logging
from typing import Optional

from models import GameState, GameStatus, LastAction, Player, ShotOutcome
from schemas import (
    CommandKind,
    EnrollmentResult,
    InfoResult,
    PassResult,
    ShootResult,
    StartResult,
    StatusResult,
)
from settings import Settings
from core.exceptions import (
    AlreadyEliminated,
    DuplicateEnrollment,
    GameInvariantViolation,
    InvalidDepositAmount,
    MustShoot,
    NoGameInProgress,
    NotEnoughPlayers,
    NotYourTurn,
    WrongGameStatus,
)
from core.locks import ChannelLocks, channel_transaction
from core.registry import GameRegistry
from core.state_machine import GameStateMachine
from services.chamber_service import Chamber
from services.pot_service import (
    burn_for_pass,
    credit_deposit,
    credit_grit_bonus,
    is_positive_amount,
    payout,
)
from services.turn_service import (
    advance_turn,
    alive_players,
    current_player,
    everyone_passed,
    identities_match,
    is_enrolled,
    others_all_passed,
    reset_rotation,
)

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2


class GameManager:
    """Deadman's Tip 遊戲引擎"""

    def __init__(
        self,
        pass_burn_amount: int,
        grit_bonus_amount: int,
        entry_fee_hint: int,
        chamber=None,
        registry: Optional[GameRegistry] = None,
        locks: Optional[ChannelLocks] = None,
    ):
        for name, amount in (
            ("pass_burn_amount", pass_burn_amount),
            ("grit_bonus_amount", grit_bonus_amount),
            ("entry_fee_hint", entry_fee_hint),
        ):
            if not is_positive_amount(amount):
                raise ValueError(f"{name} must be a positive integer, got {amount!r}")

        self.pass_burn_amount = pass_burn_amount
        self.grit_bonus_amount = grit_bonus_amount
        self.entry_fee_hint = entry_fee_hint
        self.chamber = chamber if chamber is not None else Chamber()
        self.registry = registry if registry is not None else GameRegistry()
        self.locks = locks if locks is not None else ChannelLocks()

    @classmethod
    def from_settings(cls, settings: Settings, chamber=None) -> "GameManager":
        return cls(
            pass_burn_amount=settings.pass_burn_amount,
            grit_bonus_amount=settings.grit_bonus_amount,
            entry_fee_hint=settings.entry_fee_hint,
            chamber=chamber,
        )

    # ============ Enrollment ============

    @channel_transaction
    def enroll(self, channel_id: str, identity: str, payout_address: str, amount: int) -> EnrollmentResult:
        """
        入場（存款事件觸發）

        前置條件：
        1. amount 是正整數（沒有最低金額，任何正數都算全額入場）
        2. 遊戲狀態是 WAITING
        3. identity 和 payout_address 都還沒出現過

        流程：
        1. 驗證金額（失敗時不建立遊戲）
        2. 取得或建立頻道的遊戲
        3. 檢查狀態與重複加入
        4. 加入玩家，存款全額進獎池

        異常：
            InvalidDepositAmount: 金額不是正整數
            WrongGameStatus: 遊戲已經開始或結束
            DuplicateEnrollment: 已經加入過（存款不入帳，由支付端對帳）
        """
        # 1. 驗證金額
        if not is_positive_amount(amount):
            raise InvalidDepositAmount(amount)

        # 2. 取得或建立遊戲
        game = self.registry.resolve_or_create(channel_id)

        # 3. 檢查狀態與重複加入
        if game.status != GameStatus.WAITING:
            raise WrongGameStatus(game.status, GameStatus.WAITING)

        if is_enrolled(game, identity, payout_address):
            raise DuplicateEnrollment(identity)

        # 4. 加入玩家並更新獎池
        new_pot = credit_deposit(game.pot_balance, amount)
        game.players.append(Player(identity=identity, payout_address=payout_address))
        game.pot_balance = new_pot

        logger.info(
            f"Player {identity} joined channel {channel_id} with {amount} wei "
            f"(players={game.player_count}, pot={game.pot_balance})"
        )

        return EnrollmentResult(
            identity=identity,
            amount=amount,
            player_count=game.player_count,
            pot_balance=game.pot_balance,
        )

    # ============ Start ============

    @channel_transaction
    def start_game(self, channel_id: str, requested_by: str) -> StartResult:
        """
        開始遊戲（狀態轉換 WAITING -> ACTIVE）

        任何人都可以開始，不限已加入的玩家。

        前置條件：
        1. 頻道內有遊戲
        2. 狀態是 WAITING
        3. 玩家數量 >= 2

        效果：
            current_turn_index = 0，加入順序就是輪流順序

        異常：
            NoGameInProgress, WrongGameStatus, NotEnoughPlayers
        """
        # 1. 取得遊戲
        game = self.registry.get(channel_id)
        if game is None:
            raise NoGameInProgress(channel_id)

        # 2. 驗證狀態與人數
        if game.status != GameStatus.WAITING:
            raise WrongGameStatus(game.status, GameStatus.WAITING)

        if game.player_count < MIN_PLAYERS:
            raise NotEnoughPlayers(game.player_count, MIN_PLAYERS)

        # 3. 狀態轉換
        GameStateMachine.transition(game, GameStatus.ACTIVE)
        game.current_turn_index = 0
        first = current_player(game)

        logger.info(
            f"Game started in channel {channel_id} by {requested_by} "
            f"with {game.player_count} players"
        )

        return StartResult(
            turn_order=game.turn_order(),
            current_player=first.identity,
            player_count=game.player_count,
            pot_balance=game.pot_balance,
        )

    # ============ Turn actions ============

    def _require_active_game(self, channel_id: str) -> GameState:
        game = self.registry.get(channel_id)
        if game is None:
            raise NoGameInProgress(channel_id)
        if game.status != GameStatus.ACTIVE:
            raise WrongGameStatus(game.status, GameStatus.ACTIVE)
        return game

    def _require_turn(self, game: GameState, identity: str) -> Player:
        # current_player() 在沒有存活玩家時拋 GameInvariantViolation
        player = current_player(game)
        if not identities_match(player.identity, identity):
            raise NotYourTurn(identity, player.identity)
        if not player.alive:
            raise AlreadyEliminated(player.identity)
        return player

    @channel_transaction
    def shoot(self, channel_id: str, identity: str) -> ShootResult:
        """
        開槍：50/50 淘汰或存活

        前置條件（依序檢查，第一個失敗的為準）：
        1. 遊戲存在且為 ACTIVE
        2. 找得到目前玩家
        3. 輪到這位玩家（不分大小寫）
        4. 這位玩家還活著

        流程：
        1. 轉輪決定結果
        2. 標記 SHOT，然後重設所有存活玩家的 last_action（新的一輪）
        3. BANG：淘汰；只剩一人就結束遊戲並從 registry 移除（在換人之前檢查）
        4. CLICK：獎池加 grit bonus
        5. 換下一位
        """
        # 1. 驗證
        game = self._require_active_game(channel_id)
        player = self._require_turn(game, identity)

        # 2. 轉輪
        outcome = self.chamber.spin()
        player.last_action = LastAction.SHOT
        reset_rotation(game)

        logger.info(f"Channel {channel_id}: {player.identity} shot -> {outcome.value}")

        if outcome == ShotOutcome.BANG:
            # 3. 淘汰並檢查勝負
            player.alive = False
            alive = alive_players(game)
            if not alive:
                raise GameInvariantViolation(
                    f"Elimination in channel {channel_id} left no alive players"
                )

            if len(alive) == 1:
                return self._finish(game, player, alive[0])

            next_player = advance_turn(game)
            return ShootResult(
                identity=player.identity,
                outcome=outcome,
                pot_balance=game.pot_balance,
                alive_count=len(alive),
                next_player=next_player.identity,
            )

        # 4. 存活
        game.pot_balance = credit_grit_bonus(game.pot_balance, self.grit_bonus_amount)
        next_player = advance_turn(game)

        return ShootResult(
            identity=player.identity,
            outcome=outcome,
            grit_bonus=self.grit_bonus_amount,
            pot_balance=game.pot_balance,
            alive_count=len(alive_players(game)),
            next_player=next_player.identity,
        )

    def _finish(self, game: GameState, eliminated: Player, survivor: Player) -> ShootResult:
        """結束遊戲（ACTIVE -> FINISHED）並立即從 registry 移除"""
        game.winner = survivor.identity
        GameStateMachine.transition(game, GameStatus.FINISHED)
        prize = payout(game.pot_balance)
        self.registry.remove(game.channel_id)

        logger.info(
            f"Game over in channel {game.channel_id}: {survivor.identity} wins {prize} wei "
            f"(payout address {survivor.payout_address})"
        )

        return ShootResult(
            identity=eliminated.identity,
            outcome=ShotOutcome.BANG,
            pot_balance=game.pot_balance,
            alive_count=1,
            finished=True,
            winner=survivor.identity,
            payout=prize,
            context={"payout_address": survivor.payout_address},
        )

    @channel_transaction
    def pass_turn(self, channel_id: str, identity: str) -> PassResult:
        """
        Pass：燒掉一部分獎池，換下一位

        前置條件：
        1-4. 同 shoot
        5. forced-shoot：其他存活玩家全都 pass 過了就不能再 pass

        流程：
        1. 標記 PASSED，獎池扣 min(獎池, pass_burn_amount)
        2. 換下一位
        3. 換人之後，若所有存活玩家都 pass 了，重設這一輪並標記下一位必須開槍

        異常：
            MustShoot: 其他人都 pass 了
        """
        # 1. 驗證
        game = self._require_active_game(channel_id)
        player = self._require_turn(game, identity)

        if others_all_passed(game, player):
            raise MustShoot(player.identity)

        # 2. 燒獎池
        new_pot, burned = burn_for_pass(game.pot_balance, self.pass_burn_amount)
        player.last_action = LastAction.PASSED
        game.pot_balance = new_pot

        # 3. 換人，再檢查是否整輪都 pass
        next_player = advance_turn(game)
        forced = everyone_passed(game)
        if forced:
            reset_rotation(game)
            logger.info(f"Channel {channel_id}: everyone passed, {next_player.identity} must shoot")

        logger.info(
            f"Channel {channel_id}: {player.identity} passed, burned {burned} wei (pot={game.pot_balance})"
        )

        return PassResult(
            identity=player.identity,
            burned=burned,
            pot_balance=game.pot_balance,
            next_player=next_player.identity,
            forced_shoot=forced,
        )

    # ============ Queries ============

    @channel_transaction
    def get_status(self, channel_id: str) -> StatusResult:
        """
        查詢遊戲狀態（唯讀）

        異常：
            NoGameInProgress: 沒有遊戲（包含剛結束被移除的）
        """
        game = self.registry.get(channel_id)
        if game is None:
            raise NoGameInProgress(channel_id)

        result = StatusResult(
            status=game.status,
            pot_balance=game.pot_balance,
            player_count=game.player_count,
            players=game.turn_order(),
        )

        if game.status == GameStatus.ACTIVE:
            result.alive_count = len(alive_players(game))
            result.current_player = current_player(game).identity
        elif game.status == GameStatus.FINISHED:
            result.alive_count = len(alive_players(game))
            result.winner = game.winner
            result.payout = payout(game.pot_balance)

        return result

    def info(self, kind: CommandKind) -> InfoResult:
        """/join-game 與 /help：不碰 registry"""
        return InfoResult(
            kind=kind.value,
            entry_fee_hint=self.entry_fee_hint,
            pass_burn_amount=self.pass_burn_amount,
            grit_bonus_amount=self.grit_bonus_amount,
        )
