"""
PubMed检索服务
两阶段：esearch 获取 PMID 列表，efetch 分批获取详情
"""
import logging
import time
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import List, Optional

import httpx

from review_assistant.config import Settings
from review_assistant.services.crawler.base_crawler import BaseCrawler, SearchError
from review_assistant.services.crawler.source_models import SearchResult, SourcePaper

logger = logging.getLogger(__name__)


# 高影响力期刊白名单（不区分大小写的子串匹配）
HIGH_IMPACT_JOURNALS = [
    "nature",
    "science",
    "cell",
    "lancet",
    "new england journal of medicine",
    "jama",
    "bmj",
    "annals of internal medicine",
    "plos medicine",
    "radiology",
    "circulation",
    "journal of clinical oncology",
    "gastroenterology",
    "medical image analysis",
    "ieee transactions on medical imaging",
]


def is_high_impact_journal(journal: Optional[str]) -> bool:
    if not journal:
        return False
    name = journal.lower()
    return any(keyword in name for keyword in HIGH_IMPACT_JOURNALS)


class PubmedCrawler(BaseCrawler):
    """PubMed文献检索客户端"""

    source_name = "pubmed"

    BATCH_SIZE = 100  # efetch 每批最多 PMID 数
    BATCH_DELAY_SECONDS = 0.35  # NCBI 建议每秒不超过 3 个请求

    def __init__(self, settings: Settings):
        self.settings = settings
        self.esearch_url = settings.PUBMED_ESEARCH_URL
        self.efetch_url = settings.PUBMED_EFETCH_URL
        self.client = httpx.Client(timeout=settings.SEARCH_TIMEOUT)

    def search(
        self,
        query: str,
        max_results: int = 10,
        year_from: Optional[int] = None,
        year_to: Optional[int] = None,
        high_impact_only: bool = False,
    ) -> SearchResult:
        """
        搜索PubMed文献

        esearch 失败抛出 SearchError；efetch 单批失败只记录日志并跳过，
        跳过的批次数通过 SearchResult.failed_batches 返回
        """
        try:
            pmids = self._search_pmids(query, max_results, year_from, year_to)
        except Exception as e:
            logger.error(f"PubMed搜索失败: {e}")
            raise SearchError("PubMed搜索失败") from e

        if not pmids:
            return SearchResult()

        result = self._fetch_details(pmids)
        if high_impact_only:
            result.papers = [p for p in result.papers if is_high_impact_journal(p.journal)]

        logger.info(
            f"PubMed搜索完成，找到 {len(result.papers)} 篇文献，失败批次 {result.failed_batches}"
        )
        return result

    def close(self):
        self.client.close()

    def build_term(self, query: str, year_from: Optional[int] = None, year_to: Optional[int] = None) -> str:
        """把年份区间以 from:to[dp] 的形式拼进查询"""
        if not (year_from or year_to):
            return query
        from_year = year_from or 1900
        to_year = year_to or datetime.now().year
        return f"{query} AND {from_year}:{to_year}[dp]"

    def _search_pmids(
        self,
        query: str,
        max_results: int,
        year_from: Optional[int],
        year_to: Optional[int],
    ) -> List[str]:
        params = {
            "db": "pubmed",
            "term": self.build_term(query, year_from, year_to),
            "retmax": max_results,
            "retmode": "json",
        }
        logger.info(f"PubMed esearch: {params['term']}")
        resp = self.client.get(self.esearch_url, params=params)
        resp.raise_for_status()
        data = resp.json()
        return list((data.get("esearchresult") or {}).get("idlist") or [])

    def _fetch_details(self, pmids: List[str]) -> SearchResult:
        """分批获取详情，单批失败不中断整个流程"""
        result = SearchResult()

        for start in range(0, len(pmids), self.BATCH_SIZE):
            batch = pmids[start:start + self.BATCH_SIZE]
            try:
                resp = self.client.get(
                    self.efetch_url,
                    params={"db": "pubmed", "id": ",".join(batch), "retmode": "xml"},
                )
                resp.raise_for_status()
                result.papers.extend(self.parse_articles(resp.text))
            except Exception as e:
                result.failed_batches += 1
                logger.error(f"获取PMID批次 {start}-{start + len(batch)} 失败: {e}")

            if start + self.BATCH_SIZE < len(pmids):
                time.sleep(self.BATCH_DELAY_SECONDS)

        return result

    def parse_articles(self, xml_text: str) -> List[SourcePaper]:
        """解析 efetch 返回的 PubmedArticleSet"""
        root = ET.fromstring(xml_text)
        papers = []
        for article in root.findall(".//PubmedArticle"):
            citation = article.find("MedlineCitation")
            if citation is None:
                continue
            pmid = (citation.findtext("PMID") or "").strip()
            papers.append(self._parse_article(pmid, citation.find("Article")))
        return papers

    def _parse_article(self, pmid: str, article: Optional[ET.Element]) -> SourcePaper:
        if article is None:
            article = ET.Element("Article")

        title_el = article.find("ArticleTitle")
        title = "".join(title_el.itertext()).strip() if title_el is not None else ""

        journal = (article.findtext("Journal/Title") or "").strip()

        abstract = " ".join(
            "".join(el.itertext()).strip()
            for el in article.findall("Abstract/AbstractText")
        )

        authors = []
        for author in article.findall("AuthorList/Author"):
            fore_name = author.findtext("ForeName") or ""
            last_name = author.findtext("LastName") or ""
            name = f"{fore_name} {last_name}".strip()
            if name:
                authors.append(name)

        year = article.findtext("Journal/JournalIssue/PubDate/Year") or ""
        month = article.findtext("Journal/JournalIssue/PubDate/Month") or ""
        published = f"{year}-{month}".strip("-")

        doi = None
        for location in article.findall("ELocationID"):
            if location.get("EIdType") == "doi":
                doi = (location.text or "").strip() or None
                break

        return SourcePaper(
            title=title,
            authors=authors,
            source=self.source_name,
            abstract=abstract,
            url=f"https://pubmed.ncbi.nlm.nih.gov/{pmid}/",
            published=published,
            source_id=pmid,
            doi=doi,
            journal=journal or None,
        )
