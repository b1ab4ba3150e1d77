from abc import ABC, abstractmethod
from typing import Optional

from review_assistant.services.crawler.source_models import SearchResult


class SearchError(Exception):
    """检索请求失败（网络 / HTTP 状态 / 响应无法解析）"""
    pass


class BaseCrawler(ABC):
    """
    文献检索客户端抽象基类

    约定：
    - 每个具体实现需要设置类属性 source_name，例如 "arxiv" / "pubmed"
    - search 只负责请求外部数据源并做字段标准化，不负责入库
    - 请求级失败统一抛出 SearchError，不做重试
    """

    source_name: str = "unknown"

    @abstractmethod
    def search(
        self,
        query: str,
        max_results: int = 20,
        year_from: Optional[int] = None,
        year_to: Optional[int] = None,
    ) -> SearchResult:
        """
        执行检索，返回保持数据源顺序的 SearchResult

        参数：
            query:       查询表达式
            max_results: 最大返回条数
            year_from:   起始年份（可选）
            year_to:     结束年份（可选）
        """
        raise NotImplementedError
