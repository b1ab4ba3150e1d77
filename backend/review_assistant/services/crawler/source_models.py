from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class SourcePaper:
    """
    统一的跨数据源文献中间模型

    arXiv / PubMed 检索结果都先转成 SourcePaper，
    再由路由层序列化或保存为 SearchedLiterature。
    """

    # 核心元数据
    title: str
    authors: List[str]
    # 来源 (必须字段，需放在有默认值的字段之前)
    source: str

    abstract: str = ""
    url: str = ""
    published: str = ""  # arXiv 为 ISO 时间，PubMed 为 "YYYY-Mon"

    # 来源内部ID（arXiv entry id / PubMed PMID）
    source_id: Optional[str] = None
    doi: Optional[str] = None

    # 出版相关信息
    journal: Optional[str] = None
    pdf_url: Optional[str] = None

    # 主题/分类信息
    categories: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """序列化为接口返回格式，作者以 ', ' 连接"""
        return {
            "title": self.title,
            "authors": ", ".join(self.authors),
            "abstract": self.abstract,
            "url": self.url,
            "pdf_url": self.pdf_url,
            "published": self.published,
            "journal": self.journal,
            "doi": self.doi,
            "categories": list(self.categories),
            "source": self.source,
            "source_id": self.source_id,
        }


@dataclass
class SearchResult:
    """一次检索的结果；failed_batches 记录被跳过的批次数"""

    papers: List[SourcePaper] = field(default_factory=list)
    failed_batches: int = 0
