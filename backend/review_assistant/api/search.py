"""
外部文献检索 API 路由：arXiv / PubMed / 检索式生成 / 标题摘要翻译
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
import logging

from review_assistant.api.deps import get_ai_service
from review_assistant.schemas.literature import SearchQueryRequest, SearchRequest, TranslateRequest
from review_assistant.services.crawler import (
    ArxivCrawler,
    PubmedCrawler,
    SearchError,
    get_arxiv_crawler,
    get_pubmed_crawler,
)
from review_assistant.services.llm.openai_service import AIService
from review_assistant.services.llm.parsing import parse_translation

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["search"],
)


@router.post("/search/arxiv")
async def search_arxiv(payload: SearchRequest, crawler: ArxivCrawler = Depends(get_arxiv_crawler)):
    if not payload.query or not payload.query.strip():
        raise HTTPException(status_code=400, detail="缺少搜索关键词")

    try:
        result = await run_in_threadpool(
            crawler.search,
            payload.query,
            payload.max_results,
            payload.year_from,
            payload.year_to,
        )
    except SearchError as e:
        logger.error(f"arXiv搜索错误: {e.__cause__ or e}")
        raise HTTPException(status_code=500, detail="arXiv搜索失败")

    return {"success": True, "data": [p.to_dict() for p in result.papers]}


@router.post("/search/pubmed")
async def search_pubmed(payload: SearchRequest, crawler: PubmedCrawler = Depends(get_pubmed_crawler)):
    """
    PubMed 检索

    详情分批获取，失败批次被跳过，数量通过 failedBatches 返回
    """
    if not payload.query or not payload.query.strip():
        raise HTTPException(status_code=400, detail="缺少搜索关键词")

    try:
        result = await run_in_threadpool(
            crawler.search,
            payload.query,
            payload.max_results,
            payload.year_from,
            payload.year_to,
            payload.high_impact_only,
        )
    except SearchError as e:
        logger.error(f"PubMed搜索错误: {e.__cause__ or e}")
        raise HTTPException(status_code=500, detail="PubMed搜索失败")

    return {
        "success": True,
        "data": [p.to_dict() for p in result.papers],
        "failedBatches": result.failed_batches,
    }


@router.post("/generate/search-query")
async def generate_search_query(payload: SearchQueryRequest, ai: AIService = Depends(get_ai_service)):
    """根据项目关键词生成布尔检索式"""
    if not payload.keywords:
        raise HTTPException(status_code=400, detail="请提供至少一个关键词")

    primary = [k.keyword for k in payload.keywords if k.is_primary]
    secondary = [k.keyword for k in payload.keywords if not k.is_primary]
    try:
        query = await ai.generate_search_query(primary, secondary, payload.source)
    except Exception as e:
        logger.error(f"生成检索式失败: {e}")
        raise HTTPException(status_code=500, detail="生成检索式失败")

    return {"success": True, "data": {"query": query}}


@router.post("/translate")
async def translate(payload: TranslateRequest, ai: AIService = Depends(get_ai_service)):
    if not payload.title or not payload.abstract:
        raise HTTPException(status_code=400, detail="缺少标题或摘要")

    try:
        response = await ai.translate(payload.title, payload.abstract)
    except Exception as e:
        logger.error(f"翻译失败: {e}")
        raise HTTPException(status_code=500, detail="翻译失败")

    return {"success": True, "data": parse_translation(response)}
