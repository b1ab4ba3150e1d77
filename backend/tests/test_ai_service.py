import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from review_assistant.config import Settings
from review_assistant.models import AIConfig
from review_assistant.schemas.ai import KeywordSuggestionResult, LiteratureSelection
from review_assistant.services.llm.errors import UpstreamFormatError
from review_assistant.services.llm.openai_service import AIClientProvider, AIService, ProviderConfig
from review_assistant.services.llm.parsing import (
    parse_index_list,
    parse_json_response,
    parse_translation,
    strip_code_fences,
)
from review_assistant.services.llm.prompts import WritingOptions, render_writing_requirements


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _service(*contents):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(side_effect=[_completion(c) for c in contents])
    return AIService(client=client, model="test-model"), client


# ========== 解析 ==========

def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('说明文字\n```\n{"a": 1}\n```\n结尾') == '{"a": 1}'
    assert strip_code_fences("```mermaid\ngraph TD") == "graph TD"
    assert strip_code_fences("plain") == "plain"


def test_parse_json_response_validates_schema():
    result = parse_json_response('```json\n{"selectedIndices": [2, 1], "reason": "r"}\n```', LiteratureSelection)
    assert result.selected_indices == [2, 1]

    with pytest.raises(UpstreamFormatError):
        parse_json_response("not json", LiteratureSelection)
    with pytest.raises(UpstreamFormatError):
        parse_json_response('{"selectedIndices": "all"}', LiteratureSelection)


def test_parse_index_list_drops_invalid_tokens():
    assert parse_index_list("3, 1, x, 0, 9, 3, 2", count=5) == [2, 0, 1]
    assert parse_index_list("1,2,3,4", count=4, limit=2) == [0, 1]
    assert parse_index_list("1. first, 2) second", count=2) == [0, 1]
    assert parse_index_list("none", count=3) == []
    assert parse_index_list("9" * 5000 + ", 2", count=3) == [1]


def test_parse_translation_fallbacks():
    assert parse_translation("标题: T\n摘要: A") == {"title": "T", "abstract": "A"}
    assert parse_translation("only one line\nmore") == {"title": "only one line", "abstract": "only one line\nmore"}


def test_writing_requirements_reflect_options():
    text = render_writing_requirements(WritingOptions(wordCount=5000, detailLevel="basic", citationDensity="low"))
    assert "5000" in text
    default_text = render_writing_requirements(None)
    assert default_text != text


# ========== AIService ==========

@pytest.mark.asyncio
async def test_complete_json_retries_once_with_correction():
    service, client = _service("oops", '{"keywords": [{"keyword": "LST"}]}')

    result = await service.complete_json("prompt", KeywordSuggestionResult)
    assert result.keywords[0].keyword == "LST"
    assert client.chat.completions.create.await_count == 2

    retry_messages = client.chat.completions.create.await_args_list[1].kwargs["messages"]
    assert retry_messages[-2] == {"role": "assistant", "content": "oops"}
    assert retry_messages[-1]["role"] == "user"


@pytest.mark.asyncio
async def test_complete_json_gives_up_after_second_failure():
    service, client = _service("oops", "still not json")

    with pytest.raises(UpstreamFormatError) as exc_info:
        await service.complete_json("prompt", KeywordSuggestionResult)
    assert exc_info.value.raw == "still not json"
    assert client.chat.completions.create.await_count == 2


@pytest.mark.asyncio
async def test_filter_literature_maps_indices_back_to_papers():
    service, client = _service("3, 1, 7")
    papers = [{"title": "A"}, {"title": "B"}, {"title": "C"}]

    result = await service.filter_literature(papers, ["heat"], "topic", max_results=5)
    assert result == [{"title": "C"}, {"title": "A"}]
    assert client.chat.completions.create.await_args.kwargs["temperature"] == 0.3


@pytest.mark.asyncio
async def test_filter_literature_with_no_papers_skips_call():
    service, client = _service()
    assert await service.filter_literature([], [], "topic", 5) == []
    client.chat.completions.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_select_literature_ignores_out_of_range_indices():
    service, _ = _service('{"selectedIndices": [2, 0, 5], "reason": "relevant"}')
    papers = [{"title": "A"}, {"title": "B"}]

    selected, reason = await service.select_literature(papers, "topic", "", top_n=2)
    assert selected == [{"title": "B"}]
    assert reason == "relevant"


@pytest.mark.asyncio
async def test_analyze_style_truncates_input():
    service, client = _service("analysis")
    await service.analyze_style("x" * 100, limit=10)

    user_message = client.chat.completions.create.await_args.kwargs["messages"][-1]["content"]
    assert "x" * 10 in user_message
    assert "x" * 11 not in user_message


@pytest.mark.asyncio
async def test_stream_write_review_yields_deltas():
    async def chunks():
        for content in ["Hello", None, " world"]:
            yield SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])
        yield SimpleNamespace(choices=[])

    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=chunks())
    service = AIService(client=client, model="m")

    collected = [c async for c in service.stream_write_review("plan", "guide", "refs", "en")]
    assert collected == ["Hello", " world"]
    assert client.chat.completions.create.await_args.kwargs["stream"] is True


@pytest.mark.asyncio
async def test_generate_search_query_strips_fences():
    service, _ = _service('```\n"a" AND "b"\n```')
    assert await service.generate_search_query(["a"], ["b"], "unknown") == '"a" AND "b"'


# ========== 客户端配置 ==========

def test_provider_prefers_database_config(db):
    provider = AIClientProvider(Settings(OPENAI_API_KEY="sk-env", OPENAI_MODEL="env-model"))
    assert provider.resolve_config(db).model == "env-model"

    db.add(AIConfig(api_endpoint="https://db.example/v1", api_key="sk-db", model_name="db-model"))
    db.commit()
    assert provider.resolve_config(db) == ProviderConfig("https://db.example/v1", "sk-db", "db-model")


def test_provider_rebuilds_client_when_config_changes():
    provider = AIClientProvider(Settings())
    first = provider.get_client(ProviderConfig("https://a.example/v1", "sk-a", "m"))
    assert provider.get_client(ProviderConfig("https://a.example/v1", "sk-a", "m")) is first

    second = provider.get_client(ProviderConfig("https://b.example/v1", "sk-b", "m"))
    assert second is not first

    provider.invalidate()
    assert provider.get_client(ProviderConfig("https://b.example/v1", "sk-b", "m")) is not second
