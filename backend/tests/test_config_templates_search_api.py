from unittest.mock import patch

from review_assistant.models import AIConfig, ReviewTemplate
from review_assistant.services.crawler import SearchError, SearchResult, SourcePaper


# ========== 模板 ==========

def test_builtin_templates_are_seeded_default_first(client):
    templates = client.get("/api/templates").json()["data"]
    assert len(templates) == 4
    assert templates[0]["is_default"] is True
    assert all(t["is_builtin"] for t in templates)


def test_template_crud(client):
    created = client.post("/api/templates", json={"name": "我的模板", "structure": "# 1. 引言"}).json()["data"]
    assert created["is_builtin"] is False

    updated = client.put(f"/api/templates/{created['id']}", json={"description": "简短"}).json()["data"]
    assert updated["description"] == "简短"
    assert updated["structure"] == "# 1. 引言"

    assert client.get(f"/api/templates/{created['id']}").json()["data"]["name"] == "我的模板"
    assert client.delete(f"/api/templates/{created['id']}").status_code == 200
    assert client.get(f"/api/templates/{created['id']}").status_code == 404


def test_template_requires_name_and_structure(client):
    assert client.post("/api/templates", json={"name": "only name"}).status_code == 400


def test_builtin_template_cannot_be_deleted(client, db):
    builtin = db.query(ReviewTemplate).filter(ReviewTemplate.is_builtin.is_(True)).first()
    response = client.delete(f"/api/templates/{builtin.id}")
    assert response.status_code == 400
    assert response.json()["error"] == "内置模板不能删除"


# ========== AI 配置 ==========

def test_ai_config_is_null_initially(client):
    assert client.get("/api/config/ai").json()["data"] is None


def test_ai_config_keeps_single_row_and_masks_key(client, db, mock_provider):
    client.post("/api/config/ai", json={"api_endpoint": "https://a.example/v1", "api_key": "sk-first-1234567"})
    response = client.post("/api/config/ai", json={
        "api_endpoint": "https://b.example/v1",
        "api_key": "sk-second-7654321",
        "model_name": "gpt-4o",
    })
    assert response.status_code == 200
    assert db.query(AIConfig).count() == 1
    assert mock_provider.invalidate.call_count == 2

    config = client.get("/api/config/ai").json()["data"]
    assert config["api_endpoint"] == "https://b.example/v1"
    assert config["model_name"] == "gpt-4o"
    assert config["api_key_masked"] == "sk-secon..."
    assert "api_key" not in config


def test_ai_config_default_model(client):
    client.post("/api/config/ai", json={"api_endpoint": "https://a.example/v1", "api_key": "sk-x"})
    assert client.get("/api/config/ai").json()["data"]["model_name"] == "gpt-4"


def test_ai_config_requires_endpoint_and_key(client):
    assert client.post("/api/config/ai", json={"api_key": "sk-x"}).status_code == 400


def test_list_models_forwards_upstream_error(client):
    with patch("review_assistant.api.settings.list_provider_models", side_effect=RuntimeError("401 Unauthorized")):
        response = client.post("/api/config/models", json={"api_endpoint": "https://a", "api_key": "bad"})
    assert response.status_code == 500
    assert response.json()["error"] == "401 Unauthorized"


def test_list_models(client):
    with patch("review_assistant.api.settings.list_provider_models", return_value=["gpt-4", "gpt-4o"]):
        response = client.post("/api/config/models", json={"api_endpoint": "https://a", "api_key": "k"})
    assert response.json()["data"] == ["gpt-4", "gpt-4o"]


# ========== 外部检索 ==========

def _paper(title, source):
    return SourcePaper(title=title, authors=["Ann Lee", "Bo Chen"], source=source, journal="Nature")


def test_search_arxiv(client, mock_arxiv_crawler):
    mock_arxiv_crawler.search.return_value = SearchResult(papers=[_paper("Heat", "arxiv")])

    response = client.post("/api/search/arxiv", json={"query": "urban heat", "maxResults": 5, "yearFrom": 2020})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data[0]["authors"] == "Ann Lee, Bo Chen"
    assert data[0]["source"] == "arxiv"
    mock_arxiv_crawler.search.assert_called_once_with("urban heat", 5, 2020, None)


def test_search_arxiv_failure(client, mock_arxiv_crawler):
    mock_arxiv_crawler.search.side_effect = SearchError("arXiv搜索失败")
    response = client.post("/api/search/arxiv", json={"query": "x"})
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "arXiv搜索失败"}


def test_search_requires_query(client):
    assert client.post("/api/search/arxiv", json={"query": "  "}).status_code == 400


def test_search_max_results_out_of_range(client):
    response = client.post("/api/search/pubmed", json={"query": "x", "maxResults": 0})
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_search_pubmed_reports_failed_batches(client, mock_pubmed_crawler):
    mock_pubmed_crawler.search.return_value = SearchResult(papers=[_paper("Cancer", "pubmed")], failed_batches=1)

    response = client.post("/api/search/pubmed", json={"query": "cancer", "highImpactOnly": True})
    assert response.status_code == 200
    assert response.json()["failedBatches"] == 1
    assert response.json()["data"][0]["journal"] == "Nature"
    mock_pubmed_crawler.search.assert_called_once_with("cancer", 10, None, None, True)


def test_generate_search_query(client, mock_ai_service):
    mock_ai_service.generate_search_query.return_value = '"urban heat" AND "remote sensing"'
    response = client.post("/api/generate/search-query", json={
        "keywords": [
            {"keyword": "urban heat", "isPrimary": True},
            {"keyword": "remote sensing"},
        ],
        "source": "pubmed",
    })
    assert response.json()["data"]["query"] == '"urban heat" AND "remote sensing"'
    mock_ai_service.generate_search_query.assert_awaited_once_with(["urban heat"], ["remote sensing"], "pubmed")


def test_generate_search_query_requires_keywords(client):
    assert client.post("/api/generate/search-query", json={"keywords": []}).status_code == 400


def test_translate(client, mock_ai_service):
    mock_ai_service.translate.return_value = "标题：城市热岛\n摘要：一项研究。\n第二行。"
    response = client.post("/api/translate", json={"title": "Urban heat", "abstract": "A study."})
    assert response.json()["data"] == {"title": "城市热岛", "abstract": "一项研究。\n第二行。"}
