"""
导出服务

1. 带参考文献列表的 Markdown 草稿导出
2. Word（DOCX）导出
3. 文献的 RIS / BibTeX / CSV 导出
"""
import csv
import io
import re
from typing import Dict, List, Sequence

from docx import Document

from review_assistant.models import SearchedLiterature

CITATION_PATTERN = re.compile(r"\[(\d+(?:,\s*\d+)*)\]")

NO_REFERENCES_TEXT = "No references cited in the text.\n"

CSV_COLUMNS = ["title", "authors", "abstract", "doi", "url", "source", "published"]


# ========== 引用解析 ==========

def collect_cited_numbers(content: str, literature_count: int) -> List[int]:
    """
    收集正文中 [n] / [n, m] 形式的引用编号

    只保留 1..literature_count 范围内的编号，去重后升序返回；
    越界编号（包括位数超过文献数的超长编号）静默丢弃
    """
    max_digits = len(str(literature_count))
    cited = set()
    for match in CITATION_PATTERN.finditer(content or ""):
        for part in match.group(1).split(","):
            part = part.strip()
            if len(part.lstrip("0")) > max_digits:
                continue
            number = int(part)
            if 0 < number <= literature_count:
                cited.add(number)
    return sorted(cited)


def build_renumber_map(cited_numbers: Sequence[int]) -> Dict[int, int]:
    """原编号 -> 参考文献列表中的连续编号"""
    return {original: index for index, original in enumerate(cited_numbers, start=1)}


def renumber_citations(content: str, mapping: Dict[int, int]) -> str:
    """把正文中范围内的引用改写为连续编号，范围外的编号保持原样"""
    max_digits = len(str(max(mapping, default=0)))

    def _renumber(part: str) -> str:
        part = part.strip()
        if len(part.lstrip("0")) > max_digits:
            return part
        number = int(part)
        return str(mapping.get(number, number))

    def _replace(match: re.Match) -> str:
        return "[" + ", ".join(_renumber(part) for part in match.group(1).split(",")) + "]"

    return CITATION_PATTERN.sub(_replace, content)


def render_references_section(cited: Sequence[SearchedLiterature]) -> str:
    """渲染追加在正文后的 References 小节"""
    section = "\n\n## References\n\n"
    if not cited:
        return section + NO_REFERENCES_TEXT

    for number, lit in enumerate(cited, start=1):
        section += f"{number}. **{lit.title}**\n"
        if lit.authors:
            section += f"   Authors: {lit.authors}\n"
        if lit.doi:
            section += f"   DOI: {lit.doi}\n"
        if lit.url:
            section += f"   URL: {lit.url}\n"
        if lit.source:
            section += f"   Source: {lit.source}\n"
        section += "\n"
    return section


def build_markdown_export(
    content: str,
    literature: Sequence[SearchedLiterature],
    renumber: bool = False,
) -> str:
    """
    正文 + References 小节

    参考文献按被引用的原编号升序排列并重新编号为 1..k；
    默认不改写正文中的引用编号，renumber=True 时改写为与列表一致
    """
    cited_numbers = collect_cited_numbers(content, len(literature))
    cited = [literature[n - 1] for n in cited_numbers]
    if renumber:
        content = renumber_citations(content, build_renumber_map(cited_numbers))
    return content + render_references_section(cited)


# ========== Word ==========

_HEADING = re.compile(r"^(#{1,6})\s+(.*)$")
_BULLET = re.compile(r"^\s*[-*+]\s+(.*)$")
_NUMBERED = re.compile(r"^\s*\d+\.\s+(.*)$")
_BOLD = re.compile(r"\*\*(.+?)\*\*")


def _add_inline_runs(paragraph, text: str):
    """只处理 **粗体**，其余 Markdown 标记原样保留"""
    pos = 0
    for match in _BOLD.finditer(text):
        if match.start() > pos:
            paragraph.add_run(text[pos:match.start()])
        paragraph.add_run(match.group(1)).bold = True
        pos = match.end()
    if pos < len(text):
        paragraph.add_run(text[pos:])


def build_docx(markdown_text: str) -> bytes:
    """把 Markdown 文本逐行转换为 DOCX（标题 / 列表 / 段落）"""
    document = Document()
    for line in markdown_text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        heading = _HEADING.match(stripped)
        if heading:
            level = min(len(heading.group(1)), 4)
            document.add_heading(heading.group(2).strip(), level=level)
            continue
        bullet = _BULLET.match(line)
        if bullet:
            _add_inline_runs(document.add_paragraph(style="List Bullet"), bullet.group(1))
            continue
        numbered = _NUMBERED.match(line)
        if numbered:
            _add_inline_runs(document.add_paragraph(style="List Number"), numbered.group(1))
            continue
        _add_inline_runs(document.add_paragraph(), stripped)

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


# ========== 文献格式 ==========

def _year_and_journal(lit: SearchedLiterature):
    meta = lit.metadata_dict
    return meta.get("year") or meta.get("published"), meta.get("journal")


def _split_authors(authors: str) -> List[str]:
    return [a.strip() for a in re.split(r"[,;]", authors)]


def to_ris(literature: Sequence[SearchedLiterature]) -> str:
    """RIS 格式（EndNote / Zotero 通用）"""
    ris = ""
    for lit in literature:
        ris += "TY  - JOUR\n"
        if lit.title:
            ris += f"TI  - {lit.title}\n"
        if lit.authors:
            for author in _split_authors(lit.authors):
                ris += f"AU  - {author}\n"
        if lit.abstract:
            ris += f"AB  - {lit.abstract}\n"
        if lit.doi:
            ris += f"DO  - {lit.doi}\n"
        if lit.url:
            ris += f"UR  - {lit.url}\n"
        if lit.source:
            ris += f"DB  - {lit.source}\n"
        year, journal = _year_and_journal(lit)
        if year:
            ris += f"PY  - {year}\n"
        if journal:
            ris += f"JO  - {journal}\n"
        ris += "ER  - \n\n"
    return ris


def to_bibtex(literature: Sequence[SearchedLiterature]) -> str:
    """BibTeX 格式，字段值不转义花括号"""
    bibtex = ""
    for index, lit in enumerate(literature, start=1):
        bibtex += f"@article{{ref{index},\n"
        if lit.title:
            bibtex += f"  title = {{{lit.title}}},\n"
        if lit.authors:
            bibtex += f"  author = {{{lit.authors}}},\n"
        if lit.abstract:
            bibtex += f"  abstract = {{{lit.abstract}}},\n"
        if lit.doi:
            bibtex += f"  doi = {{{lit.doi}}},\n"
        if lit.url:
            bibtex += f"  url = {{{lit.url}}},\n"
        year, journal = _year_and_journal(lit)
        if year:
            bibtex += f"  year = {{{year}}},\n"
        if journal:
            bibtex += f"  journal = {{{journal}}},\n"
        bibtex += "}\n\n"
    return bibtex


def to_csv(literature: Sequence[SearchedLiterature]) -> str:
    """CSV 表格，UTF-8 BOM 开头，所有字段加双引号"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for lit in literature:
        year, _ = _year_and_journal(lit)
        writer.writerow([
            lit.title or "",
            lit.authors or "",
            lit.abstract or "",
            lit.doi or "",
            lit.url or "",
            lit.source or "",
            year or "",
        ])
    return "\ufeff" + buffer.getvalue()


LITERATURE_FORMATS = {
    "ris": (to_ris, "application/x-research-info-systems", "references.ris"),
    "bibtex": (to_bibtex, "application/x-bibtex", "references.bib"),
    "csv": (to_csv, "text/csv; charset=utf-8", "references.csv"),
}
