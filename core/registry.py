"""
Game Registry：頻道 → 遊戲的對照表

職責：
1. 建立遊戲（第一次存款時）
2. 查詢遊戲（不建立）
3. 刪除遊戲（遊戲結束當下）

同一個頻道永遠最多只有一場遊戲。Registry 不負責頻道層級的互斥，
呼叫者要先拿到 core.locks 的頻道鎖；這裡的 _guard 只保護 dict 本身。
"""
import logging
import threading
from typing import Dict, List, Optional

from models import GameState

logger = logging.getLogger(__name__)


class GameRegistry:
    """遊戲生命週期的擁有者"""

    def __init__(self):
        self._games: Dict[str, GameState] = {}
        self._guard = threading.Lock()

    def resolve_or_create(self, channel_id: str) -> GameState:
        """
        取得頻道內的遊戲，沒有的話建立一場 WAITING 的新遊戲

        返回：
            GameState（新建立時沒有玩家、獎池為 0）
        """
        with self._guard:
            game = self._games.get(channel_id)
            if game is None:
                game = GameState(channel_id=channel_id)
                self._games[channel_id] = game
                logger.info(f"Created game for channel {channel_id}")
            return game

    def get(self, channel_id: str) -> Optional[GameState]:
        with self._guard:
            return self._games.get(channel_id)

    def remove(self, channel_id: str) -> None:
        """刪除遊戲；遊戲結束時呼叫一次"""
        with self._guard:
            game = self._games.pop(channel_id, None)
        if game is None:
            logger.warning(f"Tried to remove missing game for channel {channel_id}")
        else:
            logger.info(f"Removed game for channel {channel_id}")

    def channels(self) -> List[str]:
        with self._guard:
            return list(self._games)

    def __contains__(self, channel_id: str) -> bool:
        with self._guard:
            return channel_id in self._games

    def __len__(self) -> int:
        with self._guard:
            return len(self._games)
