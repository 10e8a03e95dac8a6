"""
轉輪服務：系統中唯一的隨機來源

每次開槍都是獨立的 50/50：BANG（淘汰）或 CLICK（存活）。
預設使用作業系統的亂數（random.SystemRandom），不可預測也無法重播；
測試時傳入 seed 改用 random.Random，結果可重現。
"""
import random
from typing import Optional

from models import ShotOutcome


class Chamber:
    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            self._rng = random.SystemRandom()
        else:
            self._rng = random.Random(seed)

    def spin(self) -> ShotOutcome:
        """機率剛好 1/2（取 1 個隨機 bit，沒有浮點誤差）"""
        if self._rng.getrandbits(1):
            return ShotOutcome.BANG
        return ShotOutcome.CLICK
