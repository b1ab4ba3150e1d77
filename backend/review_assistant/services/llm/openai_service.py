"""
OpenAI兼容API服务
所有 AI 操作共用一个客户端和一个“当前模型”，配置来自 ai_config 表，环境变量兜底
"""
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

import requests
from openai import AsyncOpenAI
from pydantic import BaseModel
from sqlalchemy.orm import Session

from review_assistant.config import Settings, settings
from review_assistant.models.ai_config import AIConfig
from review_assistant.schemas.ai import (
    ClassificationResult,
    KeywordSuggestionResult,
    LiteratureSelection,
)
from review_assistant.services.llm import prompts
from review_assistant.services.llm.errors import UpstreamFormatError
from review_assistant.services.llm.parsing import (
    parse_index_list,
    parse_json_response,
    strip_code_fences,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

DIAGRAM_TYPES = tuple(prompts.DIAGRAM_TYPE_INSTRUCTIONS.keys())


@dataclass(frozen=True)
class ProviderConfig:
    """AI 服务商配置快照，同时作为客户端缓存键"""
    endpoint: str
    api_key: str
    model: str


class AIClientProvider:
    """
    持有唯一的 AsyncOpenAI 客户端

    - 配置优先读取 ai_config 表中最新一行，没有时使用环境变量
    - 配置变化时重建客户端；保存配置后调用 invalidate() 强制重建
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._client: Optional[AsyncOpenAI] = None
        self._client_config: Optional[ProviderConfig] = None

    def resolve_config(self, db: Session) -> ProviderConfig:
        row = db.query(AIConfig).order_by(AIConfig.id.desc()).first()
        if row is not None:
            return ProviderConfig(
                endpoint=row.api_endpoint,
                api_key=row.api_key,
                model=row.model_name or "gpt-4",
            )
        return ProviderConfig(
            endpoint=self.settings.OPENAI_BASE_URL,
            api_key=self.settings.OPENAI_API_KEY,
            model=self.settings.OPENAI_MODEL,
        )

    def get_client(self, config: ProviderConfig) -> AsyncOpenAI:
        if self._client is None or self._client_config != config:
            logger.info(f"创建 AI 客户端: endpoint={config.endpoint}, model={config.model}")
            self._client = AsyncOpenAI(api_key=config.api_key, base_url=config.endpoint)
            self._client_config = config
        return self._client

    def invalidate(self):
        """丢弃当前客户端，下次使用时按最新配置重建"""
        self._client = None
        self._client_config = None

    def service_for(self, db: Session) -> "AIService":
        config = self.resolve_config(db)
        return AIService(client=self.get_client(config), model=config.model)


_ai_client_provider = AIClientProvider(settings)


def get_ai_client_provider() -> AIClientProvider:
    """获取进程内唯一的 AIClientProvider"""
    return _ai_client_provider


def list_provider_models(api_endpoint: str, api_key: str) -> List[str]:
    """
    从 OpenAI 兼容服务的 /models 接口获取模型列表

    请求失败时异常直接上抛，由调用方把错误信息返回给前端
    """
    url = api_endpoint.rstrip("/") + "/models"
    headers = {"Authorization": f"Bearer {api_key}"}

    resp = requests.get(url, headers=headers, timeout=10)
    resp.raise_for_status()
    data = resp.json()

    ids: List[str] = []
    for item in data.get("data") or []:
        if isinstance(item, dict) and isinstance(item.get("id"), str):
            ids.append(item["id"])
    return sorted(set(ids))


def _paper_field(paper: Any, name: str, default: str = "") -> str:
    """papers 既可能是 dict 也可能是 ORM 对象"""
    value = paper.get(name) if isinstance(paper, dict) else getattr(paper, name, None)
    return str(value) if value else default


class AIService:
    """OpenAI兼容LLM服务"""

    def __init__(self, client: AsyncOpenAI, model: str):
        self.client = client
        self.model = model

    # ---------- 基础调用 ----------

    async def _complete(self, messages: List[Dict[str, str]], temperature: float = 0.7) -> str:
        logger.info(f"调用模型 {self.model}, prompt 长度: {sum(len(m['content']) for m in messages)}")
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
        )
        return response.choices[0].message.content or ""

    async def _stream(self, messages: List[Dict[str, str]], temperature: float = 0.7) -> AsyncIterator[str]:
        stream = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            stream=True,
        )
        async for chunk in stream:
            if not chunk.choices:
                continue
            content = chunk.choices[0].delta.content
            if content:
                yield content

    @staticmethod
    def _messages(prompt: str, system_prompt: Optional[str] = None) -> List[Dict[str, str]]:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    async def chat(self, prompt: str, system_prompt: Optional[str] = None, temperature: float = 0.7) -> str:
        """单轮对话透传"""
        return await self._complete(self._messages(prompt, system_prompt), temperature=temperature)

    async def complete_json(self, prompt: str, schema: Type[T], system_prompt: Optional[str] = None) -> T:
        """
        请求结构化 JSON 并按 schema 校验

        第一次解析失败时追加一条修正提示重试一次，仍失败则抛出 UpstreamFormatError
        """
        messages = self._messages(prompt, system_prompt)
        raw = await self._complete(messages)
        try:
            return parse_json_response(raw, schema)
        except UpstreamFormatError as e:
            logger.warning(f"AI响应格式错误，发送修正提示重试一次: {e}")
            messages = messages + [
                {"role": "assistant", "content": raw},
                {"role": "user", "content": prompts.JSON_CORRECTION_PROMPT.format(error=e)},
            ]

        raw = await self._complete(messages)
        try:
            return parse_json_response(raw, schema)
        except UpstreamFormatError as e:
            logger.error(f"AI响应格式错误（重试后仍失败）: {e}")
            raise UpstreamFormatError("AI响应格式错误", raw=raw) from e

    # ---------- 风格分析 / 指南 / 大纲 ----------

    async def analyze_style(self, text: str, limit: int = 8000) -> str:
        """分析文献写作风格，输入截断到 limit 个字符"""
        prompt = prompts.STYLE_ANALYSIS_USER_TEMPLATE.format(text=text[:limit])
        result = await self.chat(prompt, prompts.STYLE_ANALYSIS_SYSTEM_PROMPT)
        logger.info(f"风格分析完成，长度: {len(result)}")
        return result

    async def generate_writing_guide(self, analysis: str) -> str:
        prompt = prompts.WRITING_GUIDE_USER_TEMPLATE.format(analysis=analysis)
        return await self.chat(prompt, prompts.WRITING_GUIDE_SYSTEM_PROMPT)

    async def generate_review_plan(self, guide: str, topic: str) -> str:
        prompt = prompts.REVIEW_PLAN_USER_TEMPLATE.format(topic=topic, guide=guide)
        return await self.chat(prompt, prompts.REVIEW_PLAN_SYSTEM_PROMPT)

    # ---------- 流式写作 ----------

    async def stream_write_review(
        self,
        plan: str,
        guide: str,
        references: str,
        language: str,
        options: Optional[prompts.WritingOptions] = None,
    ) -> AsyncIterator[str]:
        """按撰写计划流式生成整篇综述，逐块产出文本"""
        messages = [
            {
                "role": "system",
                "content": prompts.WRITE_REVIEW_SYSTEM_TEMPLATE.format(language=prompts.language_name(language)),
            },
            {
                "role": "user",
                "content": prompts.WRITE_REVIEW_USER_TEMPLATE.format(
                    guide=guide,
                    plan=plan,
                    references=references,
                    requirements=prompts.render_writing_requirements(options),
                ),
            },
        ]
        async for chunk in self._stream(messages):
            yield chunk

    async def stream_write_review_by_section(
        self,
        section: str,
        title: str,
        plan: str,
        guide: str,
        references: str,
        previous_content: str,
        language: str,
        options: Optional[prompts.WritingOptions] = None,
    ) -> AsyncIterator[str]:
        """
        流式生成单个章节

        previous_content 只保留末尾一段作为上下文提示，不保证模型不重复
        """
        previous = (previous_content or "")[-prompts.PREVIOUS_CONTENT_LIMIT:] or "（无）"
        messages = [
            {
                "role": "system",
                "content": prompts.WRITE_SECTION_SYSTEM_TEMPLATE.format(language=prompts.language_name(language)),
            },
            {
                "role": "user",
                "content": prompts.WRITE_SECTION_USER_TEMPLATE.format(
                    guide=guide,
                    plan=plan,
                    references=references,
                    previous=previous,
                    title=title,
                    section=section,
                    requirements=prompts.render_writing_requirements(options),
                ),
            },
        ]
        async for chunk in self._stream(messages):
            yield chunk

    # ---------- 文献筛选 ----------

    @staticmethod
    def _summarize_papers(papers: Sequence[Any], abstract_limit: int = 300) -> str:
        lines = []
        for idx, paper in enumerate(papers, start=1):
            lines.append(f"{idx}. 标题: {_paper_field(paper, 'title')}")
            lines.append(f"   作者: {_paper_field(paper, 'authors')}")
            lines.append(f"   摘要: {_paper_field(paper, 'abstract')[:abstract_limit]}...")
        return "\n".join(lines)

    async def filter_literature(
        self,
        papers: Sequence[Any],
        keywords: List[str],
        topic: str,
        max_results: int,
        custom_criteria: Optional[str] = None,
    ) -> List[Any]:
        """
        让模型按相关性返回逗号分隔的序号，映射回原始文献

        非法或越界的序号直接丢弃，结果可能为空
        """
        if not papers:
            return []
        criteria = f"额外筛选标准：{custom_criteria}\n" if custom_criteria else ""
        prompt = prompts.FILTER_LITERATURE_USER_TEMPLATE.format(
            topic=topic,
            keywords=", ".join(keywords) or "（无）",
            criteria=criteria,
            papers=self._summarize_papers(papers),
            max_results=max_results,
        )
        response = await self.chat(prompt, prompts.FILTER_LITERATURE_SYSTEM_PROMPT, temperature=0.3)
        indices = parse_index_list(response, len(papers), limit=max_results)
        logger.info(f"AI筛选: {len(papers)} 篇中选出 {len(indices)} 篇")
        return [papers[i] for i in indices]

    async def select_literature(
        self,
        papers: Sequence[Any],
        topic: str,
        keywords: str,
        top_n: int,
    ) -> Tuple[List[Any], Optional[str]]:
        """JSON 协议的筛选，返回 (文献列表, 筛选理由)"""
        prompt = prompts.SELECT_LITERATURE_USER_TEMPLATE.format(
            count=len(papers),
            top_n=top_n,
            topic=topic,
            keywords=keywords,
            papers=self._summarize_papers(papers),
        )
        selection = await self.complete_json(prompt, LiteratureSelection, prompts.SELECT_LITERATURE_SYSTEM_PROMPT)
        selected = [papers[i - 1] for i in selection.selected_indices if 1 <= i <= len(papers)]
        return selected, selection.reason

    # ---------- 关键词 / 分类 / 检索式 ----------

    async def suggest_keywords(
        self,
        user_keywords: List[str],
        description: Optional[str],
        guide: Optional[str],
        plan: Optional[str],
    ) -> KeywordSuggestionResult:
        context = ""
        if guide:
            context += f"\n\n写作指南内容：\n{guide[:prompts.KEYWORD_CONTEXT_LIMIT]}"
        if plan:
            context += f"\n\n撰写计划内容：\n{plan[:prompts.KEYWORD_CONTEXT_LIMIT]}"
        prompt = prompts.KEYWORD_SUGGESTION_USER_TEMPLATE.format(
            user_keywords=", ".join(user_keywords),
            description=f"项目描述：{description}\n" if description else "",
            context=context,
        )
        return await self.complete_json(prompt, KeywordSuggestionResult, prompts.KEYWORD_SUGGESTION_SYSTEM_PROMPT)

    async def classify_literature(self, keywords: str, literature: Sequence[Any]) -> ClassificationResult:
        lines = []
        for idx, item in enumerate(literature, start=1):
            lines.append(f"[{idx}] 文献ID：{_paper_field(item, 'id')}")
            lines.append(f"标题：{_paper_field(item, 'title')}")
            lines.append(f"摘要：{_paper_field(item, 'abstract', '无摘要')[:300]}")
        prompt = prompts.CLASSIFY_LITERATURE_USER_TEMPLATE.format(keywords=keywords, papers="\n".join(lines))
        return await self.complete_json(prompt, ClassificationResult, prompts.CLASSIFY_LITERATURE_SYSTEM_PROMPT)

    async def generate_search_query(self, primary: List[str], secondary: List[str], source: str) -> str:
        source = source if source in prompts.SEARCH_QUERY_SYNTAX else "arxiv"
        prompt = prompts.SEARCH_QUERY_USER_TEMPLATE.format(
            source="arXiv" if source == "arxiv" else "PubMed",
            primary=", ".join(primary) or "（无）",
            secondary=", ".join(secondary) or "（无）",
            syntax=prompts.SEARCH_QUERY_SYNTAX[source],
        )
        response = await self.chat(prompt, prompts.SEARCH_QUERY_SYSTEM_PROMPT, temperature=0.3)
        return strip_code_fences(response)

    # ---------- 图表 / 翻译 ----------

    async def generate_diagram(self, diagram_type: str, description: str) -> str:
        """返回模型输出的原始 Mermaid 文本，代码块标记由调用方去除"""
        instruction = prompts.DIAGRAM_TYPE_INSTRUCTIONS[diagram_type]
        prompt = prompts.DIAGRAM_USER_TEMPLATE.format(instruction=instruction, description=description)
        return await self.chat(prompt, prompts.DIAGRAM_SYSTEM_PROMPT)

    async def translate(self, title: str, abstract: str) -> str:
        prompt = prompts.TRANSLATE_USER_TEMPLATE.format(title=title, abstract=abstract)
        return await self.chat(prompt, prompts.TRANSLATE_SYSTEM_PROMPT, temperature=0.3)
