"""
文献检索服务模块
"""
from review_assistant.config import settings
from review_assistant.services.crawler.arxiv_crawler import ArxivCrawler
from review_assistant.services.crawler.base_crawler import BaseCrawler, SearchError
from review_assistant.services.crawler.pubmed_crawler import PubmedCrawler
from review_assistant.services.crawler.source_models import SearchResult, SourcePaper


def get_arxiv_crawler() -> ArxivCrawler:
    """FastAPI 依赖：arXiv 检索客户端"""
    return ArxivCrawler(settings=settings)


def get_pubmed_crawler():
    """FastAPI 依赖：PubMed 检索客户端，请求结束后关闭连接"""
    crawler = PubmedCrawler(settings=settings)
    try:
        yield crawler
    finally:
        crawler.close()


__all__ = [
    "ArxivCrawler",
    "PubmedCrawler",
    "BaseCrawler",
    "SearchError",
    "SearchResult",
    "SourcePaper",
    "get_arxiv_crawler",
    "get_pubmed_crawler",
]
