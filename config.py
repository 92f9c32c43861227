"""易經三錢占卜專案配置模組.

此模組提供全專案共用的配置設定，包括：
- 全局設定（參考資料路徑、隨機種子、譯本網址、日誌等級）
- 爻值常數（三錢法的 6, 7, 8, 9）
- 共用的 logger 建立函數
"""

import dataclasses
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# 載入環境變數（.env 檔案存在時）
load_dotenv()


# 爻值常數，依傳統三錢法：正面 +3、反面 +2
LINE_OLD_YIN = 6  # 老陰（變動之陰，變為陽）
LINE_YOUNG_YANG = 7  # 少陽（靜止之陽）
LINE_YOUNG_YIN = 8  # 少陰（靜止之陰）
LINE_OLD_YANG = 9  # 老陽（變動之陽，變為陰）

YIN = False
YANG = True

NUM_COINS = 3
NUM_LINES = 6
NUM_HEXAGRAMS = 64

HEADS_VALUE = 3
TAILS_VALUE = 2

DEFAULT_DATA_PATH = Path(__file__).resolve().parent / "data" / "hexagrams.csv"


@dataclasses.dataclass(frozen=True)
class Settings:
    """全局配置設定類別.

    使用 frozen dataclass 確保設定不可變。

    Attributes:
        DATA_PATH: 六十四卦參考資料 CSV 路徑
        RANDOM_SEED: 隨機種子；None 代表由作業系統熵源初始化
        WILHELM_BASE_URL: Wilhelm/Baynes 譯本網址（以 #卦號 定位）
        LEGGE_BASE_URL: Legge 譯本網址前綴（以 ic<卦號>.htm 定位）
        LOG_LEVEL: 日誌等級名稱（例如 "INFO"）
    """
    DATA_PATH: Path = DEFAULT_DATA_PATH
    RANDOM_SEED: Optional[int] = None
    WILHELM_BASE_URL: str = "http://www.akirarabelais.com/i/i.html"
    LEGGE_BASE_URL: str = "http://www.sacred-texts.com/ich/"
    LOG_LEVEL: str = "INFO"


def parse_seed(raw: Optional[str]) -> Optional[int]:
    """解析隨機種子環境變數.

    Raises:
        ValueError: 如果種子不是非負整數
    """
    if raw is None or raw.strip() == "":
        return None
    try:
        seed = int(raw)
    except ValueError:
        raise ValueError(f"ICHING_RANDOM_SEED 必須為整數，實際得到 {raw!r}") from None
    if seed < 0:
        raise ValueError(f"ICHING_RANDOM_SEED 必須為非負整數，實際得到 {seed}")
    return seed


def load_settings() -> Settings:
    """從環境變數建立 Settings.

    支援的環境變數：
    - `ICHING_DATA_PATH`
    - `ICHING_RANDOM_SEED`
    - `ICHING_WILHELM_URL`
    - `ICHING_LEGGE_URL`
    - `ICHING_LOG_LEVEL`

    未設定的項目使用 Settings 的預設值。
    """
    defaults = Settings()
    data_path = os.getenv("ICHING_DATA_PATH")
    return Settings(
        DATA_PATH=Path(data_path) if data_path else defaults.DATA_PATH,
        RANDOM_SEED=parse_seed(os.getenv("ICHING_RANDOM_SEED")),
        WILHELM_BASE_URL=os.getenv("ICHING_WILHELM_URL") or defaults.WILHELM_BASE_URL,
        LEGGE_BASE_URL=os.getenv("ICHING_LEGGE_URL") or defaults.LEGGE_BASE_URL,
        LOG_LEVEL=(os.getenv("ICHING_LOG_LEVEL") or defaults.LOG_LEVEL).upper(),
    )


def get_logger(name: str) -> logging.Logger:
    """取得模組 logger，並在尚無 handler 時加上控制台 handler.

    Args:
        name: logger 名稱，通常為 `__name__`

    Returns:
        已設定等級與格式的 logging.Logger 實例
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))
    # 如果 logger 還沒有 handler，添加一個控制台 handler
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


# 全局設定實例
settings = load_settings()
