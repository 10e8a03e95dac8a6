"""
回合服務：輪流順序與 pass 輪次的判斷

輪流順序永遠以「存活玩家子序列」為準：
- players 依加入順序排列，永不重排
- current_turn_index 是存活子序列中的位置，每次都重新計算
- 玩家數量很少（幾十人以內），每次 O(n) 過濾即可，不另外維護索引
"""
from typing import List

from models import GameState, LastAction, Player
from core.exceptions import GameInvariantViolation


def identities_match(a: str, b: str) -> bool:
    """聊天平台 / 錢包地址的大小寫不一定一致，一律不分大小寫比較"""
    return a.casefold() == b.casefold()


def alive_players(game: GameState) -> List[Player]:
    return [p for p in game.players if p.alive]


def is_enrolled(game: GameState, identity: str, payout_address: str) -> bool:
    """identity 或收款地址任一個重複就算已加入"""
    return any(
        identities_match(p.identity, identity) or identities_match(p.payout_address, payout_address)
        for p in game.players
    )


def current_player(game: GameState) -> Player:
    """
    取得目前輪到的玩家

    異常：
        GameInvariantViolation: 沒有存活玩家（ACTIVE 狀態下不應該發生）
    """
    alive = alive_players(game)
    if not alive:
        raise GameInvariantViolation(
            f"Game in channel {game.channel_id} has no alive players "
            f"(status: {game.status.value})"
        )
    return alive[game.current_turn_index % len(alive)]


def advance_turn(game: GameState) -> Player:
    """
    換下一位：current_turn_index = (current_turn_index + 1) % 存活人數

    存活人數在呼叫當下重新計算，淘汰之後模數會跟著變小。

    返回：
        新的目前玩家
    """
    alive = alive_players(game)
    if not alive:
        raise GameInvariantViolation(
            f"Cannot advance turn in channel {game.channel_id}: no alive players"
        )

    game.current_turn_index = (game.current_turn_index + 1) % len(alive)
    return alive[game.current_turn_index]


def reset_rotation(game: GameState) -> None:
    """開始新的 pass 輪次：所有存活玩家的 last_action 歸零"""
    for player in alive_players(game):
        player.last_action = LastAction.NONE


def others_all_passed(game: GameState, actor: Player) -> bool:
    """
    forced-shoot 規則：其他存活玩家是否全都 pass 了

    其他人為空（只剩 actor 一人）時回傳 False，允許 pass。
    """
    others = [p for p in alive_players(game) if p is not actor]
    return bool(others) and all(p.last_action == LastAction.PASSED for p in others)


def everyone_passed(game: GameState) -> bool:
    """所有存活玩家這一輪都 pass 了（至少要 2 人才算一輪）"""
    alive = alive_players(game)
    if len(alive) < 2:
        return False
    return all(p.last_action == LastAction.PASSED for p in alive)
