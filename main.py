"""易經三錢占卜主程式.

執行完整的占卜流程：
1. 載入六十四卦參考資料
2. 以三錢法產生六爻（或使用 --lines 指定）
3. 解釋卦象（本卦 -> 之卦）
4. 輸出報告（文字或 JSON）
"""

import argparse
import json
import sys
from typing import List, Optional

# 設定輸出編碼為 UTF-8（處理 Windows 終端編碼問題）
if sys.platform == 'win32':
    try:
        sys.stdout.reconfigure(encoding='utf-8')
        sys.stderr.reconfigure(encoding='utf-8')
    except (AttributeError, ValueError):
        pass

from config import get_logger, parse_seed
from hexagram_catalog import CatalogLoadError, Hexagram, HexagramCatalog, load_default_catalog
from iching_core import Line
from line_generator import LineGenerator
from reading_engine import Reading, ReadingEngine


logger = get_logger(__name__)


def print_hexagram_visual(lines: List[Line]) -> None:
    """以 ASCII 藝術顯示六爻卦象.

    從頂部（第6爻）到底部（第1爻）顯示卦象。

    Args:
        lines: 六爻序列，從底部到頂部（索引 0 到 5）。
            - 9/7 (陽爻): 顯示為 `─────────`
            - 6/8 (陰爻): 顯示為 `───   ───`
    """
    print("\n卦象視覺化（從上到下）：")
    print("─" * 50)

    # 從頂部到底部（反向遍歷）
    for i in range(len(lines) - 1, -1, -1):
        line = lines[i]

        if line.is_yang:
            drawing = "─────────"
            label = "陽"
        else:
            drawing = "───   ───"
            label = "陰"

        marker = " * (變)" if line.is_changing else ""
        print(f"第 {i + 1} 爻 {label} ({int(line)}): {drawing}{marker}")

    print("─" * 50)
    print("(* 變 = 動爻，會變動到相反的狀態)\n")


def format_moving_lines(moving_lines: List[int]) -> str:
    """格式化動爻列表為可讀字串.

    Args:
        moving_lines: 動爻列表（1-based index）

    Returns:
        格式化的字串，例如 "1, 4" 或 "無"
    """
    if not moving_lines:
        return "無"
    return ", ".join(map(str, moving_lines))


def print_hexagram(title: str, hexagram: Hexagram) -> None:
    """輸出單一卦象的資訊區塊.

    Args:
        title: 區塊標題（例如 "本卦" 或 "之卦"）
        hexagram: 要顯示的卦象
    """
    print(f"\n[{title}]")
    print(f"   編號: {hexagram.number}")
    print(f"   名稱: {hexagram.character} {hexagram.name} ({hexagram.chinese_name})")
    print(f"   二進制碼: {hexagram.binary}  (1 = 陽爻, 0 = 陰爻，由下至上)")
    print(f"   說明: {hexagram.description}")
    for url in hexagram.translation_urls:
        print(f"   譯本: {url}")


def print_reading(reading: Reading) -> None:
    """輸出占卜報告."""
    print("=" * 60)
    print("  === 易經三錢占卜報告 ===")
    print("=" * 60)
    print(f"\n[問題] {reading.question}")

    print(f"\n[六爻序列]（由下至上）:")
    print(f"   {[int(line) for line in reading.lines]}")

    print_hexagram("本卦", reading.hexagram)

    print(f"\n[動爻] {format_moving_lines(reading.moving_lines)}")

    if reading.next_hexagram is not None:
        print_hexagram("之卦", reading.next_hexagram)
        print(
            f"\n[變動] {reading.hexagram.name} → {reading.next_hexagram.name}"
        )
    else:
        print("\n[之卦] 無變動")

    print_hexagram_visual(list(reading.lines))
    print("=" * 60)


def parse_lines(raw: str) -> List[int]:
    """解析 "9,8,8,6,7,8" 或 "988678" 形式的六爻序列."""
    raw = raw.replace(" ", "")
    parts = raw.split(",") if "," in raw else list(raw)
    try:
        return [int(p) for p in parts]
    except ValueError:
        raise argparse.ArgumentTypeError(f"無法解析六爻序列: {raw!r}") from None


def seed_argument(raw: str) -> int:
    """解析 --seed 參數；與 ICHING_RANDOM_SEED 相同，只接受非負整數."""
    try:
        seed = parse_seed(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None
    if seed is None:
        raise argparse.ArgumentTypeError("--seed 不可為空白")
    return seed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="以傳統三錢法進行易經占卜",
    )
    parser.add_argument("question", nargs="*", help="提問內容")
    parser.add_argument("--seed", type=seed_argument, default=None,
                        help="隨機種子（預設使用 ICHING_RANDOM_SEED 或作業系統熵源）")
    parser.add_argument("--lines", type=parse_lines, default=None,
                        help="指定六爻序列，由下至上，例如 9,8,8,6,7,8")
    parser.add_argument("--data", default=None,
                        help="參考資料 CSV 路徑（預設為 settings.DATA_PATH）")
    parser.add_argument("--json", action="store_true", help="以 JSON 輸出")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """主程式執行函數.

    Args:
        argv: 命令列參數，預設為 sys.argv[1:]

    Returns:
        結束碼：0 表示成功，1 表示參考資料載入失敗，2 表示參數錯誤
    """
    args = build_parser().parse_args(argv)
    question = " ".join(args.question)

    try:
        if args.data:
            catalog = HexagramCatalog.from_csv(args.data)
        else:
            catalog = load_default_catalog()
    except CatalogLoadError as e:
        logger.error(f"無法載入六十四卦參考資料: {e}")
        return 1

    engine = ReadingEngine(catalog, generator=LineGenerator(seed=args.seed))

    if args.lines is not None:
        try:
            reading = engine.read_lines(question, args.lines)
        except ValueError as e:
            print(f"[錯誤] 驗證錯誤: {e}", file=sys.stderr)
            return 2
    else:
        reading = engine.conduct_reading(question)

    if args.json:
        print(json.dumps(reading.to_dict(), ensure_ascii=False, indent=2))
    else:
        print_reading(reading)
    return 0


if __name__ == "__main__":
    sys.exit(main())
