"""
並發控制工具

每個頻道一把 threading.Lock，確保同一頻道同一時間只有一個狀態轉換在進行
（例如兩位玩家同時 /shoot）。不同頻道互不影響，也沒有跨頻道的鎖順序問題。

FastAPI 的 sync endpoint 會在 threadpool 裡執行，所以這裡用的是 thread lock。
"""
import logging
import threading
from contextlib import contextmanager
from functools import wraps
from typing import Dict, Iterator

from core.exceptions import DeadmansTipException

logger = logging.getLogger(__name__)


class ChannelLocks:
    """
    頻道鎖的集合

    注意：
        - 鎖在第一次使用時建立，之後不刪除；遊戲結束後同一頻道的下一場會沿用同一把鎖，
          避免有人正在等舊鎖時鎖被換掉
        - _guard 只保護 dict 本身，持有時間極短
    """

    def __init__(self):
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, channel_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(channel_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[channel_id] = lock
            return lock


@contextmanager
def with_channel_lock(channel_id: str, locks: ChannelLocks) -> Iterator[None]:
    """
    鎖定一個頻道

    使用場景：
    - 讀取 → 驗證 → 修改 → 組出結果，整段都要在鎖內
    - 訊息送出、圖片產生等外部 I/O 必須在鎖釋放之後才做

    範例：
        with with_channel_lock(channel_id, locks):
            game = registry.get(channel_id)
            ...

    注意：
        - 不論正常返回或拋出異常都會釋放
        - threading.Lock 不可重入，鎖內不要再呼叫另一個 @channel_transaction 方法
    """
    lock = locks.lock_for(channel_id)
    with lock:
        yield


def channel_transaction(func):
    """
    Transaction decorator：整個方法在頻道鎖內執行

    使用方式：
        class GameManager:
            @channel_transaction
            def shoot(self, channel_id: str, identity: str):
                ...

    規則：
        - 被裝飾的必須是方法，self 上要有 locks: ChannelLocks
        - channel_id 必須是第一個參數（self 之後）或 keyword argument
        - DeadmansTipException 是預期中的拒絕：記 info 後重新拋出
        - 其他異常記 error（含 traceback）後重新拋出
    """
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        if args:
            channel_id = args[0]
        elif 'channel_id' in kwargs:
            channel_id = kwargs['channel_id']
        else:
            raise ValueError(
                f"@channel_transaction requires 'channel_id' as first argument, "
                f"but got args={args}, kwargs={kwargs}"
            )

        with with_channel_lock(channel_id, self.locks):
            try:
                return func(self, *args, **kwargs)
            except DeadmansTipException as e:
                logger.info(f"{func.__name__} rejected in channel {channel_id}: {e}")
                raise
            except Exception as e:
                logger.error(f"Transaction failed in {func.__name__} (channel={channel_id}): {e}", exc_info=True)
                raise

    return wrapper
