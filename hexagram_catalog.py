"""易經三錢占卜六十四卦目錄模組.

從 data/hexagrams.csv 載入六十四卦參考資料，並以卦號及陰陽簽名兩種方式建立索引。
目錄在啟動時建立一次，之後唯讀，可在多執行緒下無鎖讀取。

CSV 格式（含標題列）：
    lines,name,character,description,chinese_name
- lines: 六個布林值以 "|" 分隔，由下至上（例如 "true|false|false|false|true|false"）
- name: 英文卦名
- character: Unicode 卦符（例如 "䷂"）
- description: 卦象描述
- chinese_name: 繁體中文卦名（可選欄位）

卦號依資料列順序決定（第 1 列為第 1 卦）。
"""

import dataclasses
import functools
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

import pandas as pd

from config import NUM_HEXAGRAMS, NUM_LINES, get_logger, settings
from iching_core import PolaritySignature, signature_to_binary


REQUIRED_COLUMNS = ["lines", "name", "character", "description"]
LINE_DELIMITER = "|"

# 與 Go strconv.ParseBool 相同的布林字面值
_TRUE_TOKENS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_TOKENS = {"0", "f", "F", "FALSE", "false", "False"}


class CatalogLoadError(RuntimeError):
    """參考資料缺失或格式錯誤；程式無法提供任何占卜."""


class HexagramNotFoundError(LookupError):
    """卦號或陰陽簽名不在目錄中."""


def wilhelm_url(hexagram_num: int, base_url: Optional[str] = None) -> str:
    """Wilhelm/Baynes 譯本（1950）中該卦的網址，以 #卦號 定位.

    Example:
        >>> wilhelm_url(3)
        'http://www.akirarabelais.com/i/i.html#3'
    """
    _check_number(hexagram_num)
    base = base_url or settings.WILHELM_BASE_URL
    return f"{base}#{hexagram_num}"


def legge_url(hexagram_num: int, base_url: Optional[str] = None) -> str:
    """Legge 譯本（1899）中該卦的網址；卦號小於 10 時補零為兩位數.

    Example:
        >>> legge_url(3)
        'http://www.sacred-texts.com/ich/ic03.htm'
        >>> legge_url(42)
        'http://www.sacred-texts.com/ich/ic42.htm'
    """
    _check_number(hexagram_num)
    base = base_url or settings.LEGGE_BASE_URL
    segment = f"{hexagram_num:02d}" if hexagram_num < 10 else str(hexagram_num)
    return f"{base}ic{segment}.htm"


def translation_urls(hexagram_num: int) -> Tuple[str, ...]:
    """回傳該卦所有網路譯本網址（Wilhelm, Legge）."""
    return (wilhelm_url(hexagram_num), legge_url(hexagram_num))


def _check_number(hexagram_num: int) -> None:
    if not 1 <= hexagram_num <= NUM_HEXAGRAMS:
        raise ValueError(
            f"卦號必須介於 1 到 {NUM_HEXAGRAMS}，實際得到 {hexagram_num}"
        )


@dataclasses.dataclass(frozen=True)
class Hexagram:
    """六十四卦之一（不可變）.

    Attributes:
        number: 卦號（1-64）
        lines: 六位陰陽簽名，由下至上（True = 陽爻）
        name: 英文卦名
        character: Unicode 卦符
        description: 卦象描述
        chinese_name: 繁體中文卦名
        translation_urls: 網路譯本網址
    """
    number: int
    lines: PolaritySignature
    name: str
    character: str
    description: str
    chinese_name: str = ""
    translation_urls: Tuple[str, ...] = ()

    @property
    def binary(self) -> str:
        return signature_to_binary(self.lines)

    def to_dict(self) -> Dict[str, object]:
        return {
            "number": self.number,
            "lines": list(self.lines),
            "binary": self.binary,
            "name": self.name,
            "character": self.character,
            "description": self.description,
            "chinese_name": self.chinese_name,
            "translation_urls": list(self.translation_urls),
        }


def _parse_signature(raw: str, row_num: int) -> PolaritySignature:
    """解析 "true|false|..." 形式的陰陽簽名.

    Raises:
        CatalogLoadError: 如果 token 數量不足或含有非布林值
    """
    tokens = [t.strip() for t in str(raw).split(LINE_DELIMITER)]
    if len(tokens) < NUM_LINES:
        raise CatalogLoadError(
            f"第 {row_num} 列的 lines 欄位必須包含 {NUM_LINES} 個值，實際為 {raw!r}"
        )
    signature = []
    for token in tokens[:NUM_LINES]:
        if token in _TRUE_TOKENS:
            signature.append(True)
        elif token in _FALSE_TOKENS:
            signature.append(False)
        else:
            raise CatalogLoadError(
                f"第 {row_num} 列含有無法轉換為布林值的 token: {token!r}"
            )
    return tuple(signature)


class HexagramCatalog:
    """六十四卦目錄類別.

    以卦號與陰陽簽名兩種方式查詢卦象。建構時驗證目錄為完整的 64 卦，
    且所有簽名兩兩不同（因此恰好覆蓋全部 2^6 種組合）。
    """

    def __init__(self, hexagrams: Iterable[Hexagram]) -> None:
        """初始化目錄.

        Args:
            hexagrams: 64 個 Hexagram，卦號須為 1 到 64 各一

        Raises:
            CatalogLoadError: 如果卦數、卦號或簽名不符合要求
        """
        ordered = sorted(hexagrams, key=lambda h: h.number)
        if len(ordered) != NUM_HEXAGRAMS:
            raise CatalogLoadError(
                f"目錄須包含 {NUM_HEXAGRAMS} 卦，實際為 {len(ordered)}"
            )
        numbers = [h.number for h in ordered]
        if numbers != list(range(1, NUM_HEXAGRAMS + 1)):
            raise CatalogLoadError(f"卦號必須為 1 到 {NUM_HEXAGRAMS} 各一次")

        by_signature: Dict[PolaritySignature, Hexagram] = {}
        for hexagram in ordered:
            signature = tuple(bool(bit) for bit in hexagram.lines)
            if len(signature) != NUM_LINES:
                raise CatalogLoadError(
                    f"第 {hexagram.number} 卦的簽名長度不是 {NUM_LINES}"
                )
            if signature in by_signature:
                other = by_signature[signature]
                raise CatalogLoadError(
                    f"第 {hexagram.number} 卦與第 {other.number} 卦的簽名重複: "
                    f"{signature_to_binary(signature)}"
                )
            by_signature[signature] = hexagram

        self._hexagrams: Tuple[Hexagram, ...] = tuple(ordered)
        self._by_signature = by_signature

    @classmethod
    def from_csv(cls, file_path: Union[str, Path]) -> "HexagramCatalog":
        """從 CSV 檔案載入目錄.

        Args:
            file_path: 參考資料 CSV 路徑

        Returns:
            已驗證的 HexagramCatalog

        Raises:
            CatalogLoadError: 檔案不存在、無法解析、缺少欄位或資料不合法
        """
        logger = get_logger(__name__)
        path = Path(file_path)
        if not path.is_file():
            raise CatalogLoadError(f"參考資料檔案不存在或不是檔案: {path}")

        try:
            df = pd.read_csv(
                path,
                dtype=str,
                keep_default_na=False,
                encoding="utf-8",
            )
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise CatalogLoadError(f"無法讀取參考資料 {path}: {e}") from e
        # 欄位不足的列會被補上 NaN
        df = df.fillna("")

        missing_cols = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing_cols:
            raise CatalogLoadError(
                f"參考資料缺少欄位: {missing_cols}。實際欄位: {list(df.columns)}"
            )
        if len(df) != NUM_HEXAGRAMS:
            raise CatalogLoadError(
                f"參考資料須為 {NUM_HEXAGRAMS} 列，實際為 {len(df)} 列"
            )

        has_chinese = "chinese_name" in df.columns
        hexagrams: List[Hexagram] = []
        for i, row in enumerate(df.itertuples(index=False)):
            # 資料列從 0 開始，卦號從 1 開始
            number = i + 1
            name = row.name.strip()
            character = row.character.strip()
            if not name or not character:
                raise CatalogLoadError(f"第 {number} 列缺少卦名或卦符")
            hexagrams.append(
                Hexagram(
                    number=number,
                    lines=_parse_signature(row.lines, number),
                    name=name,
                    character=character,
                    description=row.description.strip(),
                    chinese_name=row.chinese_name.strip() if has_chinese else "",
                    translation_urls=translation_urls(number),
                )
            )

        catalog = cls(hexagrams)
        logger.debug(f"已載入 {len(catalog)} 卦參考資料: {path}")
        return catalog

    def lookup_by_signature(self, signature: Iterable[bool]) -> Hexagram:
        """依陰陽簽名查詢卦象.

        Raises:
            HexagramNotFoundError: 如果簽名不在目錄中（代表參考資料不一致）
        """
        signature = tuple(signature)
        hexagram = self.find_by_signature(signature)
        if hexagram is None:
            raise HexagramNotFoundError(
                f"找不到陰陽簽名為 {signature_to_binary(signature)} 的卦象"
            )
        return hexagram

    def find_by_signature(self, signature: Iterable[bool]) -> Optional[Hexagram]:
        """依陰陽簽名查詢卦象，查不到時回傳 None."""
        key = tuple(bool(bit) for bit in signature)
        return self._by_signature.get(key)

    def lookup_by_number(self, number: int) -> Hexagram:
        """依卦號（1-64）查詢卦象.

        Raises:
            HexagramNotFoundError: 如果卦號不在 1 到 64 之間
        """
        if not 1 <= number <= len(self._hexagrams):
            raise HexagramNotFoundError(
                f"卦號必須介於 1 到 {len(self._hexagrams)}，實際得到 {number}"
            )
        return self._hexagrams[number - 1]

    def all(self) -> Tuple[Hexagram, ...]:
        """依卦號順序回傳全部 64 卦."""
        return self._hexagrams

    def __len__(self) -> int:
        return len(self._hexagrams)

    def __iter__(self) -> Iterator[Hexagram]:
        return iter(self._hexagrams)


@functools.lru_cache(maxsize=None)
def _load_catalog(path: str) -> HexagramCatalog:
    return HexagramCatalog.from_csv(path)


def load_default_catalog() -> HexagramCatalog:
    """載入 settings.DATA_PATH 的目錄（同一路徑在行程內只載入一次）."""
    return _load_catalog(str(settings.DATA_PATH))
