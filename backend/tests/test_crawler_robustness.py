import pytest
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx

from review_assistant.config import Settings
from review_assistant.services.crawler.arxiv_crawler import ArxivCrawler
from review_assistant.services.crawler.base_crawler import SearchError
from review_assistant.services.crawler.pubmed_crawler import PubmedCrawler, is_high_impact_journal


@pytest.fixture
def settings():
    return Settings()


# ========== arXiv ==========

def test_arxiv_network_timeout(settings):
    """网络超时转换为 SearchError"""
    crawler = ArxivCrawler(settings=settings)

    with patch.object(crawler.client, "results", side_effect=TimeoutError("Network timeout")):
        with pytest.raises(SearchError):
            crawler.search("test")


def test_arxiv_malformed_response(settings):
    """格式异常的条目被跳过"""
    crawler = ArxivCrawler(settings=settings)

    mock_result = MagicMock()
    # Simulate missing required fields
    del mock_result.title

    with patch.object(crawler.client, "results", return_value=[mock_result]):
        result = crawler.search("test")
    assert len(result.papers) == 0


def test_arxiv_result_normalization(settings):
    crawler = ArxivCrawler(settings=settings)
    entry = SimpleNamespace(
        title="Urban   Heat\n Islands",
        authors=[SimpleNamespace(name="Ann Lee"), SimpleNamespace(name="Bo Chen")],
        summary="  Line one\n  line two ",
        entry_id="http://arxiv.org/abs/2301.00001v1",
        published=datetime(2023, 1, 1, tzinfo=timezone.utc),
        doi=None,
        journal_ref=None,
        pdf_url="http://arxiv.org/pdf/2301.00001v1",
        categories=["cs.CV"],
    )

    with patch.object(crawler.client, "results", return_value=[entry]):
        paper = crawler.search("urban heat").papers[0]

    assert paper.title == "Urban Heat Islands"
    assert paper.abstract == "Line one line two"
    assert paper.source_id == "2301.00001v1"
    assert paper.published.startswith("2023-01-01")
    assert paper.to_dict()["authors"] == "Ann Lee, Bo Chen"


def test_arxiv_year_filter(settings):
    crawler = ArxivCrawler(settings=settings)
    assert crawler._build_query("heat") == "all:heat"
    assert crawler._build_query("heat", 2020, 2022) == (
        "(all:heat) AND submittedDate:[202001010000 TO 202212312359]"
    )


# ========== PubMed ==========

EFETCH_XML = """<?xml version="1.0"?>
<PubmedArticleSet>
  <PubmedArticle>
    <MedlineCitation>
      <PMID>111</PMID>
      <Article>
        <Journal>
          <JournalIssue><PubDate><Year>2022</Year><Month>Mar</Month></PubDate></JournalIssue>
          <Title>Nature Medicine</Title>
        </Journal>
        <ArticleTitle>Deep <i>learning</i> for imaging</ArticleTitle>
        <Abstract>
          <AbstractText Label="BACKGROUND">First part.</AbstractText>
          <AbstractText Label="RESULTS">Second part.</AbstractText>
        </Abstract>
        <AuthorList>
          <Author><LastName>Lee</LastName><ForeName>Ann</ForeName></Author>
          <Author><CollectiveName>Study Group</CollectiveName></Author>
        </AuthorList>
        <ELocationID EIdType="pii">S000</ELocationID>
        <ELocationID EIdType="doi">10.1000/abc</ELocationID>
      </Article>
    </MedlineCitation>
  </PubmedArticle>
  <PubmedArticle>
    <MedlineCitation>
      <PMID>222</PMID>
      <Article>
        <Journal><Title>Local Journal</Title></Journal>
        <ArticleTitle>Second</ArticleTitle>
      </Article>
    </MedlineCitation>
  </PubmedArticle>
</PubmedArticleSet>
"""


def _response(json_data=None, text="", error=None):
    resp = MagicMock()
    resp.json.return_value = json_data
    resp.text = text
    if error is not None:
        resp.raise_for_status.side_effect = error
    return resp


def test_pubmed_parse_articles(settings):
    crawler = PubmedCrawler(settings=settings)
    papers = crawler.parse_articles(EFETCH_XML)
    crawler.close()

    first, second = papers
    assert first.title == "Deep learning for imaging"
    assert first.abstract == "First part. Second part."
    assert first.authors == ["Ann Lee"]
    assert first.published == "2022-Mar"
    assert first.doi == "10.1000/abc"
    assert first.url == "https://pubmed.ncbi.nlm.nih.gov/111/"
    assert first.journal == "Nature Medicine"
    assert second.published == ""
    assert second.doi is None
    assert second.abstract == ""


def test_pubmed_year_range_term(settings):
    crawler = PubmedCrawler(settings=settings)
    assert crawler.build_term("cancer") == "cancer"
    assert crawler.build_term("cancer", 2018, 2020) == "cancer AND 2018:2020[dp]"
    assert crawler.build_term("cancer", year_to=2020) == "cancer AND 1900:2020[dp]"
    crawler.close()


@patch("review_assistant.services.crawler.pubmed_crawler.time.sleep")
def test_pubmed_partial_batch_failure(mock_sleep, settings):
    """单批详情失败时跳过该批，其余结果照常返回"""
    crawler = PubmedCrawler(settings=settings)
    crawler.BATCH_SIZE = 2
    crawler.client = MagicMock()

    pmids = ["111", "222", "333", "444"]
    crawler.client.get.side_effect = [
        _response(json_data={"esearchresult": {"idlist": pmids}}),
        _response(text=EFETCH_XML),
        _response(error=httpx.HTTPError("503 Service Unavailable")),
    ]

    result = crawler.search("imaging", max_results=4)
    assert [p.source_id for p in result.papers] == ["111", "222"]
    assert result.failed_batches == 1
    mock_sleep.assert_called_once_with(crawler.BATCH_DELAY_SECONDS)


@patch("review_assistant.services.crawler.pubmed_crawler.time.sleep")
def test_pubmed_unparseable_batch_counts_as_failed(mock_sleep, settings):
    crawler = PubmedCrawler(settings=settings)
    crawler.client = MagicMock()
    crawler.client.get.side_effect = [
        _response(json_data={"esearchresult": {"idlist": ["1"]}}),
        _response(text="<PubmedArticleSet><broken"),
    ]

    result = crawler.search("imaging")
    assert result.papers == []
    assert result.failed_batches == 1


def test_pubmed_esearch_failure_raises(settings):
    crawler = PubmedCrawler(settings=settings)
    crawler.client = MagicMock()
    crawler.client.get.side_effect = httpx.ConnectError("connection refused")

    with pytest.raises(SearchError):
        crawler.search("imaging")


def test_pubmed_no_hits_skips_efetch(settings):
    crawler = PubmedCrawler(settings=settings)
    crawler.client = MagicMock()
    crawler.client.get.return_value = _response(json_data={"esearchresult": {"idlist": []}})

    result = crawler.search("nothing")
    assert result.papers == []
    assert crawler.client.get.call_count == 1


@patch("review_assistant.services.crawler.pubmed_crawler.time.sleep")
def test_pubmed_high_impact_filter(mock_sleep, settings):
    crawler = PubmedCrawler(settings=settings)
    crawler.client = MagicMock()
    crawler.client.get.side_effect = [
        _response(json_data={"esearchresult": {"idlist": ["111", "222"]}}),
        _response(text=EFETCH_XML),
    ]

    result = crawler.search("imaging", high_impact_only=True)
    assert [p.source_id for p in result.papers] == ["111"]


def test_high_impact_journal_matching():
    assert is_high_impact_journal("The Lancet Oncology")
    assert not is_high_impact_journal("Local Journal")
    assert not is_high_impact_journal(None)
