"""
文献 CSV 导入

根据表头别名识别列：题目/标题/title、作者/author、摘要/abstract、
链接/来源/url、时间/日期/date/published
"""
import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

HEADER_ALIASES = {
    "title": ("题目", "标题", "title"),
    "authors": ("作者", "author"),
    "abstract": ("摘要", "abstract"),
    "url": ("链接", "来源", "url"),
    "published": ("时间", "日期", "date", "published"),
}


@dataclass
class ImportResult:
    papers: List[Dict[str, str]] = field(default_factory=list)
    skipped: int = 0  # 没有标题而被丢弃的行数


def _find_column(headers: List[str], aliases) -> Optional[int]:
    """返回第一个包含任一别名的表头下标（英文不区分大小写）"""
    for index, header in enumerate(headers):
        lowered = header.lower()
        if any(alias in lowered for alias in aliases):
            return index
    return None


def detect_columns(headers: List[str]) -> Dict[str, Optional[int]]:
    headers = [h.strip().strip('"') for h in headers]
    return {name: _find_column(headers, aliases) for name, aliases in HEADER_ALIASES.items()}


def parse_csv(text: str) -> ImportResult:
    """
    解析 CSV 文本

    - 空行忽略
    - 没有识别出标题列，或该行标题为空时丢弃该行
    - 缺失的字段一律为空字符串
    """
    text = text.lstrip("\ufeff")
    rows = [row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row)]
    result = ImportResult()
    if len(rows) < 2:
        return result

    columns = detect_columns(rows[0])
    title_index = columns["title"]

    def _value(row: List[str], name: str) -> str:
        index = columns[name]
        if index is None or index >= len(row):
            return ""
        return row[index].strip()

    for row in rows[1:]:
        if title_index is None or not _value(row, "title"):
            result.skipped += 1
            continue
        result.papers.append({name: _value(row, name) for name in HEADER_ALIASES})

    if result.skipped:
        logger.warning(f"CSV 导入跳过 {result.skipped} 行（缺少标题）")
    return result
