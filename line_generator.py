"""易經三錢占卜爻值產生模組.

以傳統三錢法產生爻值：每枚硬幣正面 +3、反面 +2，三枚相加得 6, 7, 8, 9。
機率分佈：6 與 9 各 1/8，7 與 8 各 3/8。
"""

import threading
from typing import Optional

import numpy as np

from config import HEADS_VALUE, NUM_COINS, NUM_LINES, TAILS_VALUE, get_logger, settings
from iching_core import Line, LineSequence


class LineGenerator:
    """三錢法爻值產生器類別.

    隨機來源在建構時初始化一次（設定 RANDOM_SEED 時使用固定種子，
    否則由作業系統熵源初始化），之後不再重新播種。
    所有抽樣都在鎖內進行，多個執行緒共用同一產生器時亦可安全使用。

    Attributes:
        logger: logging.Logger 實例，用於記錄操作日誌
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None
    ) -> None:
        """初始化 LineGenerator 實例.

        Args:
            seed: 隨機種子。若為 None 則使用 settings.RANDOM_SEED。
            rng: 自訂的 numpy Generator；提供時忽略 seed。
        """
        self.logger = get_logger(__name__)
        if rng is None:
            if seed is None:
                seed = settings.RANDOM_SEED
            rng = np.random.default_rng(seed)
            if seed is not None:
                self.logger.debug(f"使用固定隨機種子: {seed}")
        self._rng = rng
        self._lock = threading.Lock()

    def generate_line(self) -> Line:
        """模擬擲三枚硬幣，產生一個爻值.

        Returns:
            Line：6（老陰）、7（少陽）、8（少陰）或 9（老陽）
        """
        with self._lock:
            # 1 = 正面，0 = 反面；每枚硬幣 p = 0.5 且互相獨立
            flips = self._rng.integers(0, 2, size=NUM_COINS)
        total = sum(HEADS_VALUE if heads else TAILS_VALUE for heads in flips)
        return Line(total)

    def generate_sequence(self) -> LineSequence:
        """產生六爻序列，索引 0 為底部第1爻，索引 5 為頂部第6爻."""
        sequence = tuple(self.generate_line() for _ in range(NUM_LINES))
        self.logger.debug(f"產生六爻序列: {[int(line) for line in sequence]}")
        return sequence
