"""
Arxiv检索服务
使用官方arxiv API，按相关度降序返回
"""
import arxiv
import logging
from typing import Optional
from datetime import datetime

from review_assistant.config import Settings
from review_assistant.services.crawler.base_crawler import BaseCrawler, SearchError
from review_assistant.services.crawler.source_models import SearchResult, SourcePaper

logger = logging.getLogger(__name__)


class ArxivCrawler(BaseCrawler):
    """Arxiv文献检索客户端"""

    source_name = "arxiv"

    def __init__(self, settings: Settings):
        self.settings = settings
        self.client = arxiv.Client(
            page_size=100,
            delay_seconds=3,  # 遵守API速率限制
            num_retries=0  # 请求失败直接上抛，不重试
        )

    def search(
        self,
        query: str,
        max_results: int = 10,
        year_from: Optional[int] = None,
        year_to: Optional[int] = None
    ) -> SearchResult:
        """
        搜索Arxiv文献

        Args:
            query: 查询表达式，按 all: 字段检索
            max_results: 最大返回结果数
            year_from: 起始年份
            year_to: 结束年份

        Returns:
            SearchResult，顺序与 arXiv 返回顺序一致
        """
        search_query = self._build_query(query, year_from, year_to)
        logger.info(f"Arxiv搜索查询: {search_query}")

        search = arxiv.Search(
            query=search_query,
            max_results=max_results,
            sort_by=arxiv.SortCriterion.Relevance,
            sort_order=arxiv.SortOrder.Descending
        )

        papers = []
        try:
            for result in self.client.results(search):
                paper = self._parse_result(result)
                if paper:
                    papers.append(paper)
        except Exception as e:
            logger.error(f"Arxiv搜索失败: {e}")
            raise SearchError("arXiv搜索失败") from e

        logger.info(f"Arxiv搜索完成，找到 {len(papers)} 篇文献")
        return SearchResult(papers=papers)

    def _build_query(
        self,
        query: str,
        year_from: Optional[int] = None,
        year_to: Optional[int] = None
    ) -> str:
        """
        构建Arxiv查询字符串

        - 基础查询：all:{query}
        - 时间过滤使用 submittedDate 区间
          格式: submittedDate:[YYYYMMDD0000 TO YYYYMMDD2359]
        """
        base_query = f"all:{query.strip()}"
        if not (year_from or year_to):
            return base_query

        year_from_str = f"{year_from}01010000" if year_from else "199101010000"
        year_to_str = f"{year_to}12312359" if year_to else datetime.now().strftime("%Y%m%d2359")
        return f"({base_query}) AND submittedDate:[{year_from_str} TO {year_to_str}]"

    def _parse_result(self, result: arxiv.Result) -> Optional[SourcePaper]:
        """解析Arxiv搜索结果为SourcePaper，格式异常的条目返回None"""
        try:
            return SourcePaper(
                title=" ".join(result.title.split()),
                authors=[author.name for author in result.authors],
                source=self.source_name,
                abstract=" ".join((result.summary or "").split()),
                url=result.entry_id,
                published=result.published.isoformat() if result.published else "",
                source_id=result.entry_id.split('/')[-1],  # 提取arxiv ID
                doi=result.doi or None,
                journal=result.journal_ref or None,
                pdf_url=result.pdf_url,
                categories=list(result.categories or []),
            )
        except Exception as e:
            logger.error(f"解析Arxiv结果失败: {e}")
            return None
