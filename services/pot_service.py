"""
獎池服務：Deadman's Tip 的獎池計算

純計算邏輯，只處理整數（wei），不碰浮點數。
不改變 GameState，由 GameManager 把回傳值寫回去。

獎池的變動只有四種：
- 入場存款：+ 存款全額
- 開槍存活（CLICK）：+ grit bonus
- Pass：- burn（最多扣到 0）
- 遊戲結束：整個獎池發給贏家
"""
from typing import Tuple

from core.exceptions import GameInvariantViolation, InvalidDepositAmount


def is_positive_amount(amount) -> bool:
    """bool 是 int 的子類別，要特別排除"""
    return isinstance(amount, int) and not isinstance(amount, bool) and amount > 0


def _require_valid_pot(pot_balance: int) -> None:
    if not isinstance(pot_balance, int) or isinstance(pot_balance, bool) or pot_balance < 0:
        raise GameInvariantViolation(f"Pot balance must be a non-negative integer, got {pot_balance!r}")


def _require_configured_amount(amount: int, name: str) -> None:
    if not is_positive_amount(amount):
        raise ValueError(f"{name} must be a positive integer, got {amount!r}")


def credit_deposit(pot_balance: int, amount: int) -> int:
    """
    入場存款全額進獎池

    異常：
        InvalidDepositAmount: amount 不是正整數
    """
    if not is_positive_amount(amount):
        raise InvalidDepositAmount(amount)
    _require_valid_pot(pot_balance)
    return pot_balance + amount


def credit_grit_bonus(pot_balance: int, grit_bonus_amount: int) -> int:
    """開槍存活的獎勵"""
    _require_valid_pot(pot_balance)
    _require_configured_amount(grit_bonus_amount, "grit_bonus_amount")
    return pot_balance + grit_bonus_amount


def burn_for_pass(pot_balance: int, pass_burn_amount: int) -> Tuple[int, int]:
    """
    Pass 的懲罰：從獎池燒掉固定金額

    燒掉的金額不會超過目前獎池，獎池最低就是 0。

    返回：
        (新的獎池, 實際燒掉的金額)

    範例：
        burn_for_pass(10, 3) -> (7, 3)
        burn_for_pass(2, 3)  -> (0, 2)
        burn_for_pass(0, 3)  -> (0, 0)
    """
    _require_valid_pot(pot_balance)
    _require_configured_amount(pass_burn_amount, "pass_burn_amount")
    burned = min(pot_balance, pass_burn_amount)
    return pot_balance - burned, burned


def payout(pot_balance: int) -> int:
    """贏家拿走整個獎池；實際轉帳由外部 payout 步驟負責"""
    _require_valid_pot(pot_balance)
    return pot_balance
