"""易經三錢占卜流程模組.

整合爻值產生、卦象查詢和之卦計算，產生一次完整的占卜結果（Reading）：
1. 產生六爻序列
2. 計算本卦陰陽簽名並查詢本卦
3. 依變爻規則計算之卦簽名
4. 簽名有變動時查詢之卦，否則之卦為 None
"""

import dataclasses
from typing import Dict, Iterable, List, Optional

from config import get_logger
from hexagram_catalog import Hexagram, HexagramCatalog
from iching_core import ChangeResolver, LineSequence, polarity, to_line_sequence
from line_generator import LineGenerator


@dataclasses.dataclass(frozen=True)
class Reading:
    """一次占卜的結果.

    Attributes:
        question: 提問內容
        lines: 產生的六爻序列，由下至上
        hexagram: 本卦
        next_hexagram: 之卦；沒有動爻（或變動後簽名相同）時為 None
    """
    question: str
    lines: LineSequence
    hexagram: Hexagram
    next_hexagram: Optional[Hexagram] = None

    @property
    def moving_lines(self) -> List[int]:
        """動爻位置（1-based），例如 `[1, 4]`."""
        return [i + 1 for i, line in enumerate(self.lines) if line.is_changing]

    @property
    def has_changes(self) -> bool:
        return self.next_hexagram is not None

    def to_dict(self) -> Dict[str, object]:
        return {
            "question": self.question,
            "lines": [int(line) for line in self.lines],
            "moving_lines": self.moving_lines,
            "hexagram": self.hexagram.to_dict(),
            "next_hexagram": (
                self.next_hexagram.to_dict() if self.next_hexagram else None
            ),
        }


class ReadingEngine:
    """占卜引擎類別.

    目錄由外部建立後注入，方便以假目錄進行測試。
    查詢失敗代表目錄不完整（違反 64 卦全覆蓋），會直接拋出例外，不進行重試。
    """

    def __init__(
        self,
        catalog: HexagramCatalog,
        generator: Optional[LineGenerator] = None,
        resolver: Optional[ChangeResolver] = None
    ) -> None:
        """初始化占卜引擎.

        Args:
            catalog: 六十四卦目錄
            generator: 爻值產生器，預設為新的 LineGenerator
            resolver: 之卦計算器，預設為新的 ChangeResolver
        """
        self.catalog = catalog
        self.generator = generator if generator is not None else LineGenerator()
        self.resolver = resolver if resolver is not None else ChangeResolver()
        self.logger = get_logger(__name__)

    def conduct_reading(self, question: str) -> Reading:
        """進行一次三錢法占卜.

        Args:
            question: 提問內容

        Returns:
            Reading，其 lines 與本次產生的序列完全相同

        Raises:
            HexagramNotFoundError: 如果目錄缺少任一簽名
        """
        sequence = self.generator.generate_sequence()
        return self.read_lines(question, sequence)

    def read_lines(self, question: str, lines: Iterable[int]) -> Reading:
        """以指定的六爻序列解卦（不經隨機產生）.

        Raises:
            ValueError: 如果 `lines` 不是合法的六爻序列
            HexagramNotFoundError: 如果目錄缺少任一簽名
        """
        sequence = to_line_sequence(lines)

        primary_signature = polarity(sequence)
        hexagram = self.catalog.lookup_by_signature(primary_signature)

        next_signature = self.resolver.resolve_next(sequence)
        if next_signature == primary_signature:
            next_hexagram = None
        else:
            next_hexagram = self.catalog.lookup_by_signature(next_signature)

        self.logger.info(
            f"占卜完成: 本卦 {hexagram.number} {hexagram.name}"
            + (
                f" -> 之卦 {next_hexagram.number} {next_hexagram.name}"
                if next_hexagram else "（無動爻）"
            )
        )
        return Reading(
            question=question,
            lines=sequence,
            hexagram=hexagram,
            next_hexagram=next_hexagram,
        )
