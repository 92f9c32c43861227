"""易經三錢占卜核心邏輯模組.

此模組提供爻值、卦象陰陽簽名（polarity signature）和之卦計算的核心功能。

核心概念：
- 本卦：由六個爻值直接轉換而成的卦象
- 之卦：根據變爻規則計算出的變動後卦象
- 動爻：值為 6 或 9 的爻位，代表正在變動的狀態
"""

import enum
from typing import Iterable, List, Tuple

from config import (
    LINE_OLD_YANG,
    LINE_OLD_YIN,
    LINE_YOUNG_YANG,
    LINE_YOUNG_YIN,
    NUM_LINES,
    YANG,
    YIN,
)


class Line(enum.IntEnum):
    """三錢法產生的爻值.

    - 6 (老陰): 陰爻，變為陽爻
    - 7 (少陽): 陽爻，不變
    - 8 (少陰): 陰爻，不變
    - 9 (老陽): 陽爻，變為陰爻
    """

    OLD_YIN = LINE_OLD_YIN
    YOUNG_YANG = LINE_YOUNG_YANG
    YOUNG_YIN = LINE_YOUNG_YIN
    OLD_YANG = LINE_OLD_YANG

    @property
    def is_yang(self) -> bool:
        return self in (Line.YOUNG_YANG, Line.OLD_YANG)

    @property
    def is_changing(self) -> bool:
        return self in (Line.OLD_YIN, Line.OLD_YANG)

    @property
    def polarity(self) -> bool:
        """陰陽屬性（YANG = True, YIN = False）."""
        return YANG if self.is_yang else YIN

    def changed(self) -> "Line":
        """回傳變爻後的爻值：9 -> 8，6 -> 7，其餘不變."""
        if self is Line.OLD_YANG:
            return Line.YOUNG_YIN
        if self is Line.OLD_YIN:
            return Line.YOUNG_YANG
        return self


LineSequence = Tuple[Line, ...]
PolaritySignature = Tuple[bool, ...]


def to_line_sequence(values: Iterable[int]) -> LineSequence:
    """將整數序列轉換為六爻序列.

    Args:
        values: 六個整數，索引 0 為底部第1爻，索引 5 為頂部第6爻

    Returns:
        Line 組成的 tuple，順序不變

    Raises:
        ValueError: 如果長度不等於 6，或任一值不是 6, 7, 8, 9 之一
    """
    values = list(values)
    if len(values) != NUM_LINES:
        raise ValueError(
            f"爻值序列必須包含恰好 {NUM_LINES} 個元素，實際得到 {len(values)} 個"
        )
    try:
        return tuple(Line(v) for v in values)
    except ValueError:
        raise ValueError(
            f"爻值必須為 6, 7, 8, 9 之一，實際得到 {values}"
        ) from None


def polarity(sequence: Iterable[int]) -> PolaritySignature:
    """計算本卦的陰陽簽名.

    9 和 7 -> True（陽爻），6 和 8 -> False（陰爻），順序保持由下至上。
    """
    return tuple(line.polarity for line in to_line_sequence(sequence))


def moving_lines(sequence: Iterable[int]) -> List[int]:
    """識別動爻位置（1-based index）.

    Example:
        >>> moving_lines([9, 8, 8, 6, 7, 8])
        [1, 4]
    """
    return [
        i + 1
        for i, line in enumerate(to_line_sequence(sequence))
        if line.is_changing
    ]


def signature_to_binary(signature: Iterable[bool]) -> str:
    """將陰陽簽名轉為二進制字串（1=陽爻，0=陰爻），例如 "100010"."""
    return "".join("1" if bit else "0" for bit in signature)


class ChangeResolver:
    """之卦計算器.

    變爻規則：
    - 9 (老陽) -> 陰爻
    - 6 (老陰) -> 陽爻
    - 7 (少陽) -> 保持陽爻
    - 8 (少陰) -> 保持陰爻
    """

    def resolve_next(self, sequence: Iterable[int]) -> PolaritySignature:
        """計算之卦的陰陽簽名.

        Args:
            sequence: 六爻序列，例如 `[9, 8, 8, 6, 7, 8]`
                順序：索引 0 為底部第1爻，索引 5 為頂部第6爻

        Returns:
            變爻後的六位陰陽簽名。
            例如：`[9, 8, 8, 6, 7, 8]` -> `(False, False, False, True, True, False)`

        Raises:
            ValueError: 如果序列不是合法的六爻序列
        """
        return tuple(
            line.changed().polarity for line in to_line_sequence(sequence)
        )
